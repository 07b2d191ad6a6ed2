"""Mentorship API: FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.auth.routes import router as auth_router
from src.config.cors import SecurityHeadersMiddleware, configure_cors
from src.config.logging_config import configure_logging
from src.config.settings import get_settings
from src.db.client import dispose_engine, init_db
from src.messages.routes import router as messages_router
from src.middleware.error_handler import register_error_handlers
from src.middleware.rate_limiter import RateLimiterMiddleware
from src.middleware.request_id import RequestIDMiddleware
from src.profiles.routes import router as profiles_router
from src.realtime.hub import MessagingHub
from src.realtime.routes import router as realtime_router
from src.sessions.routes import router as sessions_router
from src.users.routes import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    settings = get_settings()
    init_db()
    app.state.hub = MessagingHub(
        auth_timeout=settings.WS_AUTH_TIMEOUT_SECONDS,
        outbox_size=settings.WS_OUTBOX_MAX_FRAMES,
    )
    logger.info(
        "Mentorship API started (conflict window %d min, socket auth timeout %.1fs)",
        settings.BOOKING_CONFLICT_WINDOW_MINUTES,
        settings.WS_AUTH_TIMEOUT_SECONDS,
    )
    yield
    dispose_engine()


app = FastAPI(
    title="Mentorship API",
    description=(
        "Backend for a mentorship marketplace: students discover mentors, book sessions and chat in real time.\n\n"
        "## Features\n"
        "- JWT access/refresh authentication with refresh-token rotation\n"
        "- Mentor profiles and subject search\n"
        "- Session booking with per-mentor conflict windows\n"
        "- Real-time chat over WebSocket with persisted, paginated history\n\n"
        "## Authentication\n"
        "All endpoints except `/health` and `/auth/register|login|refresh` require "
        "`Authorization: Bearer <access token>`. The `/ws` socket expects "
        '`{"type": "authenticate", "token": "<access token>"}` as its first frame.'
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Health", "description": "Health check endpoints"},
        {"name": "Auth", "description": "Authentication: register, login, token refresh, logout"},
        {"name": "Users", "description": "User lookup"},
        {"name": "Profiles", "description": "Profiles and mentor discovery"},
        {"name": "Sessions", "description": "Booking and session lifecycle"},
        {"name": "Chat", "description": "Chat history and conversation partners"},
        {"name": "Realtime", "description": "WebSocket chat channel"},
    ],
)

# --- Middleware (order matters: last added is outermost) ---
app.add_middleware(RateLimiterMiddleware)
configure_cors(app)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIDMiddleware)

# --- Error handlers ---
register_error_handlers(app)

# --- Routes ---
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(profiles_router)
app.include_router(sessions_router)
app.include_router(messages_router)
app.include_router(realtime_router)


@app.get("/health", tags=["Health"], summary="Health check", description="Returns OK if the service is running.")
async def health_check():
    return {"status": "ok"}
