"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from skillbridge.api.routes import chat, profile, projects, quiz, roadmaps
from skillbridge.core.auth import USER_ID_HEADER
from skillbridge.core.config import get_settings
from skillbridge.core.database import close_db, init_db
from skillbridge.core.logging import bind_request_context, configure_logging, get_logger

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging(debug=settings.DEBUG, json_logs=settings.LOG_JSON)
    logger.info(
        "Starting SkillBridge",
        version=settings.APP_VERSION,
        env=settings.ENV,
        debug=settings.DEBUG,
    )
    await init_db()
    yield
    logger.info("Shutting down SkillBridge")
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="AI-generated learning roadmaps with quizzes, streaks and XP",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def bind_log_context(request: Request, call_next):
    """Tag log lines of a request with its method, path and user header."""
    bind_request_context(
        method=request.method,
        path=request.url.path,
        user_id=request.headers.get(USER_ID_HEADER),
    )
    return await call_next(request)


app.include_router(projects.router, prefix="/api")
app.include_router(roadmaps.router, prefix="/api")
app.include_router(quiz.router, prefix="/api")
app.include_router(profile.router, prefix="/api")
app.include_router(chat.router, prefix="/api")


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "env": settings.ENV,
    }


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "skillbridge.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development,
    )
