"""
AI Study Buddy - FastAPI Backend
Adaptive tutoring chat with per-session understanding tracking
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Dict, Optional
from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from models import (
    SessionStartResponse,
    ChatRequest,
    ChatResponse,
    HistoryRequest,
    HistoryResponse,
    DifficultyRequest,
    DifficultyResponse,
    ProgressResponse,
    HealthResponse
)
from core import (
    SessionManager,
    get_session_manager,
    StudyBuddyError,
    ValidationError
)
from services import (
    TutorService,
    get_tutor_service,
    suggest_follow_ups,
    validate_tutor_config
)
from utils import setup_logging, get_logger, SessionLogger, truncate

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""

    # Startup
    logger.info(f"Starting {settings.service_name} backend...")

    try:
        validate_tutor_config()
    except Exception as e:
        logger.error(f"Configuration validation failed: {e}")
        raise

    session_manager = get_session_manager()
    await session_manager.start()
    logger.info("Session manager started")

    logger.info(f"Backend running on {settings.host}:{settings.port}")
    logger.info(f"Environment: {settings.environment.value}")
    logger.info(f"Session store: {settings.session_store.value}")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.service_name} backend...")

    await get_tutor_service().cleanup()
    await session_manager.stop()
    logger.info("Backend shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="AI Study Buddy API",
    description="Adaptive AI tutoring with per-session progress tracking",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _cors_headers(request: Request) -> Dict[str, str]:
    """CORS headers matching the middleware policy for a request's origin."""
    origin = request.headers.get("origin")
    if not origin:
        return {}
    if "*" in settings.allowed_origins:
        return {"Access-Control-Allow-Origin": "*"}
    if origin in settings.allowed_origins:
        return {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
    return {}


# Health check endpoint
@app.get("/api/health", response_model=HealthResponse)
async def health_check(session_manager: SessionManager = Depends(get_session_manager)):
    """Health check endpoint."""
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")

    return HealthResponse(
        timestamp=timestamp.replace("+00:00", "Z"),
        service=settings.service_name,
        active_sessions=session_manager.active_actor_count()
    )


# Session endpoints
@app.post("/api/session/start", response_model=SessionStartResponse)
async def start_session(session_manager: SessionManager = Depends(get_session_manager)):
    """
    Create a new study session.

    Returns:
        Session ID and confirmation message
    """
    session_id = await session_manager.create_session()
    logger.info(f"Session started: {session_id}")

    return SessionStartResponse(session_id=session_id)


@app.post("/api/chat", response_model=ChatResponse)
async def chat(
    request: Optional[ChatRequest] = None,
    session_manager: SessionManager = Depends(get_session_manager),
    tutor: TutorService = Depends(get_tutor_service)
):
    """
    Send a chat message and get the tutor's reply.

    The session is read before the model call and updated after it; the
    model call itself holds no session lock. The actor is leased for the
    whole flow so it cannot be evicted and replaced mid-request. A fallback
    reply is returned to the client but not recorded.
    """
    request = request or ChatRequest()
    if _is_blank(request.session_id) or _is_blank(request.message):
        raise ValidationError("Missing sessionId or message")

    session_id = request.session_id
    session_log = SessionLogger(session_id)
    session_log.info(f"Chat message: '{truncate(request.message)}'")

    async with session_manager.lease(session_id) as actor:
        await actor.init(session_id)
        history, difficulty = await actor.get_history()

        reply = await tutor.respond(request.message, history, difficulty)

        if reply.is_fallback:
            session_log.warning("Tutor reply unavailable; exchange not recorded")
        else:
            await actor.add_message(request.message, reply.text)

    return ChatResponse(
        response=reply.text,
        session_id=session_id,
        suggestions=suggest_follow_ups(request.message, reply.text)
    )


@app.get("/api/progress/{session_id}", response_model=ProgressResponse)
async def get_progress(
    session_id: str,
    session_manager: SessionManager = Depends(get_session_manager)
):
    """Get progress metrics for a session."""
    snapshot = await session_manager.get_actor(session_id).get_progress()

    return ProgressResponse(
        metrics=snapshot.metrics,
        message_count=snapshot.message_count,
        session_age=snapshot.session_age
    )


@app.post("/api/history", response_model=HistoryResponse)
async def get_history(
    request: Optional[HistoryRequest] = None,
    session_manager: SessionManager = Depends(get_session_manager)
):
    """Get conversation history and the current difficulty tier."""
    request = request or HistoryRequest()
    if _is_blank(request.session_id):
        raise ValidationError("Missing sessionId")

    history, difficulty = await session_manager.get_actor(request.session_id).get_history()

    return HistoryResponse(history=history, difficulty_level=difficulty)


@app.post("/api/difficulty", response_model=DifficultyResponse)
async def set_difficulty(
    request: Optional[DifficultyRequest] = None,
    session_manager: SessionManager = Depends(get_session_manager)
):
    """Manually set the difficulty tier for a session."""
    request = request or DifficultyRequest()
    if _is_blank(request.session_id) or request.level is None:
        raise ValidationError("Missing sessionId or level")

    async with session_manager.lease(request.session_id) as actor:
        await actor.init(request.session_id)
        level = await actor.set_difficulty(request.level)

    return DifficultyResponse(level=level)


# Error handlers
@app.exception_handler(StudyBuddyError)
async def study_buddy_error_handler(request: Request, exc: StudyBuddyError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message}
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.debug(f"Rejected request body on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body"}
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    # Runs in ServerErrorMiddleware, outside CORSMiddleware
    logger.opt(exception=exc).error(f"Internal server error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
        headers=_cors_headers(request)
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
