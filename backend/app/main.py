import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from app.core.config import get_settings
from app.core.exceptions import register_exception_handlers
from app.core.logging_config import setup_logging
from app.core.middleware import (
    CorrelationIDMiddleware,
    JWTValidationMiddleware,
    RequestLoggingMiddleware,
)
from app.core.rate_limit import limiter, rate_limit_exceeded_handler
from app.routers import admin, health, reports

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    setup_logging()
    logger.info("Starting %s...", settings.app_name)
    yield
    logger.info("Shutting down %s...", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="Post reporting and moderation API for Portlink",
    version="0.1.0",
    lifespan=lifespan,
)

# Middleware runs outermost-last-added: correlation ID wraps everything
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(JWTValidationMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIDMiddleware)

# Rate limiting (slowapi)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Domain exceptions -> HTTP responses
register_exception_handlers(app)

app.include_router(health.router, tags=["Health"])
app.include_router(reports.router, prefix=f"{settings.api_prefix}/reports", tags=["Reports"])
app.include_router(admin.router, prefix=f"{settings.api_prefix}/admin", tags=["Admin"])
