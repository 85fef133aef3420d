# models.py
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DescriptionRequest(BaseModel):
    partName: Optional[str] = Field(None, description="Name of the mechanical part")


class ChatRequest(BaseModel):
    question: Optional[str] = Field(None, description="User question")


class PartDescription(BaseModel):
    # the model sometimes adds keys of its own; only these three are relayed
    model_config = ConfigDict(extra="ignore")

    description: str
    technicalDetails: str
    functionSummary: str


class ChatAnswer(BaseModel):
    model_config = ConfigDict(extra="ignore")

    answer: str


class DescriptionResponse(BaseModel):
    partName: str
    description: Optional[PartDescription] = None
    raw: Optional[str] = None


class ChatResponse(BaseModel):
    question: str
    answer: Optional[ChatAnswer] = None
    raw: Optional[str] = None


class ResetResponse(BaseModel):
    message: str


class SessionResponse(BaseModel):
    conversationHistory: List[str]


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
