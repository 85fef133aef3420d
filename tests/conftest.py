from typing import List

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from main import create_app
from settings import Settings


class FakeLLM:
    """Stands in for GeminiClient: replays queued replies and records prompts."""

    def __init__(self):
        self.replies: List[object] = []
        self.prompts: List[str] = []

    def queue(self, *replies) -> None:
        self.replies.extend(replies)

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def stateless_app(llm: FakeLLM) -> FastAPI:
    return create_app(Settings(SESSION_MODE="stateless", API_KEY="test-key"), llm=llm)


@pytest.fixture
def stateful_app(llm: FakeLLM) -> FastAPI:
    return create_app(Settings(SESSION_MODE="stateful", API_KEY="test-key"), llm=llm)


@pytest.fixture
def stateless_client(stateless_app: FastAPI) -> TestClient:
    return TestClient(stateless_app)


@pytest.fixture
def stateful_client(stateful_app: FastAPI) -> TestClient:
    return TestClient(stateful_app)
