"""
Rate limiting using slowapi
"""
import os

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

logger = structlog.get_logger()

AI_RATE_LIMIT = os.getenv("AI_RATE_LIMIT", "5/minute")

limiter = Limiter(key_func=get_remote_address)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Render rate limit errors in the same shape as every other API error"""
    logger.warning("rate_limit_exceeded", client_ip=get_remote_address(request), path=request.url.path, limit=str(exc.detail))
    return JSONResponse(
        status_code=429,
        content={"error": f"Rate limit exceeded: {exc.detail}. Please try again later.", "retryable": True},
    )


def ai_generation_limit():
    """Rate limit for endpoints that call the LLM"""
    return limiter.limit(AI_RATE_LIMIT)
