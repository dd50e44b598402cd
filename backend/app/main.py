from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from app.core.config import settings
from app.core.database import engine, Base
from app.core.exceptions import register_exception_handlers
from app.core.logging_config import setup_logging, CorrelationIdMiddleware
from app.api.endpoints import auth, content, tags
from app import models  # noqa: F401  (registers every table on Base.metadata)
import logging

# Configure structured JSON logging
setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting linkvault API...")

    # Migrations own the schema in production; this covers fresh dev databases
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")

    yield

    logger.info("Shutting down linkvault API...")
    engine.dispose()


app = FastAPI(
    title="linkvault - Personal Content Bookmarks",
    description="Save links and notes by type and tag, then browse, filter and search them",
    version="1.0.0",
    lifespan=lifespan,
)

register_exception_handlers(app)

# Add correlation ID middleware (first, so all logs have correlation IDs)
app.add_middleware(CorrelationIdMiddleware)

app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(content.router, prefix="/api/content", tags=["content"])
app.include_router(tags.router, prefix="/api/tags", tags=["tags"])


@app.get("/")
def root():
    return {
        "name": "linkvault",
        "version": "1.0.0",
        "description": "Personal content bookmarks",
    }


@app.get("/health")
def health_check():
    return {"status": "ok", "message": "Server is running"}
