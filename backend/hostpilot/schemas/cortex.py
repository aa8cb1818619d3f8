"""Schemas for Captain Cortex endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CortexAskRequest(BaseModel):
    """Request payload for one question."""

    question: str = Field(min_length=1, max_length=2000)


class SourceRef(BaseModel):
    """Connector route and parameters that backed an answer."""

    model_config = ConfigDict(frozen=True)

    route: str
    params: dict[str, Any] = Field(default_factory=dict)


class AnswerResult(BaseModel):
    """Final answer with provenance; `latency` covers the answer stage only."""

    model_config = ConfigDict(frozen=True)

    answer: str
    sources: list[SourceRef] = Field(default_factory=list)
    latency: float
    cached: bool = False
    intent: str
    confidence: float


class RoleCapabilities(BaseModel):
    role: str
    tone: str
    permissions: list[str]
    data_domains: list[str]


class RoleGreeting(BaseModel):
    role: str
    greeting: str


class SuggestedQuestions(BaseModel):
    questions: list[str]
