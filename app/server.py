"""
FastAPI server for the business interview agent.

Usage:
    python -m app.server
    # or
    uvicorn app.server:app --port 5050
"""
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.models import (
    ChatRequest,
    ChatResponse,
    HealthResponse,
    HistoryResponse,
    RecommendationsResponse,
    ResetResponse,
    SessionRequest,
    StartResponse,
    SummaryResponse,
)
from core.config import get_settings
from core.errors import DecodeError, EmptyTranscriptError, InvalidInput, UpstreamError
from core.logger import get_logger
from core.recommendations import generate_inventory_recommendations
from core.sessions import DEFAULT_SESSION_ID, store
from core.state import INTRO_MESSAGE

logger = get_logger("api.server")

app = FastAPI(
    title="Business Interview Agent API",
    description="Guided daily business-activity interview with automatic ledger updates",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidInput)
@app.exception_handler(EmptyTranscriptError)
async def client_error_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(UpstreamError)
@app.exception_handler(DecodeError)
async def upstream_error_handler(request: Request, exc: Exception):
    logger.error(f"{request.url.path} failed: {exc}")
    return JSONResponse(status_code=500, content={"error": "Upstream service failed", "details": str(exc)})


def _sid(session_id: Optional[str]) -> str:
    return session_id or DEFAULT_SESSION_ID


@app.get("/api/start-interview", response_model=StartResponse)
def start_interview(session_id: Optional[str] = None):
    sid = _sid(session_id)
    state = store.reset(sid)
    logger.info(f"Interview started [{sid}]")
    return StartResponse(
        message=INTRO_MESSAGE,
        question=state.current_question,
        questionIndex=state.current_question_index,
        totalQuestions=state.total_questions,
        session_id=sid,
    )


@app.post("/api/chat", response_model=ChatResponse)
def chat(request: ChatRequest):
    sid = _sid(request.session_id)
    result = store.submit(request.message, sid)
    state = result["state"]
    return ChatResponse(
        response=result["acknowledgment"],
        nextQuestion=result["next_question"],
        questionIndex=state.current_question_index,
        totalQuestions=state.total_questions,
        requiresFollowUp=result["requires_follow_up"],
        isNewQuestion=not result["requires_follow_up"],
        done=result["done"],
        validation=result["validation"].as_dict(),
        session_id=sid,
    )


@app.post("/api/summarize", response_model=SummaryResponse)
def summarize(request: Optional[SessionRequest] = None):
    sid = _sid(request.session_id if request else None)
    summary = store.summarize(sid)
    logger.info(f"Business summary [{sid}]:\n{summary}")
    return SummaryResponse(summary=summary)


@app.get("/api/inventory-recommendations", response_model=RecommendationsResponse)
def inventory_recommendations():
    return RecommendationsResponse(**generate_inventory_recommendations())


@app.get("/api/conversation-history", response_model=HistoryResponse)
def conversation_history(session_id: Optional[str] = None):
    return HistoryResponse(history=store.transcript(_sid(session_id)))


@app.post("/api/reset", response_model=ResetResponse)
def reset(request: Optional[SessionRequest] = None):
    sid = _sid(request.session_id if request else None)
    store.reset(sid)
    return ResetResponse(message="Conversation reset", session_id=sid)


@app.get("/api/health", response_model=HealthResponse)
def health():
    settings = get_settings()
    return HealthResponse(status="ok", aiApiUrl=settings.ai_api_url, model=settings.ai_model)


def main():
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
