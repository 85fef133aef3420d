# prompts.py
"""Prompt templates sent to the model.

Every template asks for a bare JSON object so the reply can go through
``cleaner.parse_model_output`` unchanged.
"""
import json
from typing import Any, Iterable, Union

DESCRIPTION_TEMPLATE = (
    'You are a strict JSON API. Describe the mechanical part "{part_name}" in exactly this format:\n'
    "\n"
    "{{\n"
    '  "description": "Short general description (max 4 lines)",\n'
    '  "technicalDetails": "Technical details (max 4 lines)",\n'
    '  "functionSummary": "1-line function summary"\n'
    "}}\n"
    "\n"
    "Return only the pure JSON object with double quotes. No markdown, no extra text, no explanations."
)

CHAT_TEMPLATE = (
    "You are an AI assistant. Answer the following question clearly and concisely in a JSON format:\n"
    "\n"
    "User: {question}\n"
    "\n"
    "Respond in this JSON format:\n"
    "{{\n"
    '  "answer": "..."\n'
    "}}\n"
    "\n"
    "Return only the JSON object. Do not include markdown, code fences, or explanations."
)

CONVERSATION_TEMPLATE = (
    "You are an AI assistant helping a user understand a mechanical part. "
    "Use the conversation below for context and answer the last User message "
    "clearly and concisely in a JSON format.\n"
    "\n"
    "Conversation:\n"
    "{transcript}\n"
    "\n"
    "Respond in this JSON format:\n"
    "{{\n"
    '  "answer": "..."\n'
    "}}\n"
    "\n"
    "Return only the JSON object. Do not include markdown, code fences, or explanations."
)


def build_description_prompt(part_name: str) -> str:
    return DESCRIPTION_TEMPLATE.format(part_name=part_name)


def build_chat_prompt(question: str) -> str:
    return CHAT_TEMPLATE.format(question=question)


def build_conversation_prompt(transcript: Iterable[str]) -> str:
    return CONVERSATION_TEMPLATE.format(transcript="\n".join(transcript))


def system_line(part_name: str, description: Union[str, Any]) -> str:
    """Transcript line that seeds a session with the part just described."""
    if not isinstance(description, str):
        description = json.dumps(description)
    return f'System: The user is asking about the mechanical part "{part_name}". Description: {description}'


def user_line(question: str) -> str:
    return f"User: {question}"


def ai_line(answer: str) -> str:
    return f"AI: {answer}"
