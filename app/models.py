"""
Pydantic models for the HTTP API. Field names follow the wire format the
interview front-end already consumes.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    message: Optional[str] = Field(default=None, description="Operator's answer")
    session_id: Optional[str] = Field(default=None, description="Session ID (shared default session if omitted)")


class SessionRequest(BaseModel):
    session_id: Optional[str] = None


class ValidationInfo(BaseModel):
    isAnswered: bool
    confidence: float
    reason: str


class StartResponse(BaseModel):
    message: str
    question: str
    questionIndex: int
    totalQuestions: int
    session_id: str


class ChatResponse(BaseModel):
    response: str = Field(description="Acknowledgment, inventory note or follow-up question")
    nextQuestion: Optional[str] = Field(description="Question to show next; None once the interview is done")
    questionIndex: int
    totalQuestions: int
    requiresFollowUp: bool
    isNewQuestion: bool
    done: bool
    validation: ValidationInfo
    session_id: str


class SummaryResponse(BaseModel):
    summary: str


class HistoryResponse(BaseModel):
    history: List[Dict[str, str]]


class ResetResponse(BaseModel):
    message: str
    session_id: str


class RecommendationsResponse(BaseModel):
    success: bool = True
    periodo: Optional[Any] = None
    recommendations: List[Dict[str, Any]] = Field(default_factory=list)
    raw_data: Optional[List[Dict[str, Any]]] = None
    message: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    aiApiUrl: str
    model: str
