"""
Structured logging configuration
"""
import functools
import logging
import sys
import time

import structlog


def configure_logging(level: str = "INFO"):
    """Configure structured logging"""

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


def get_logger(name: str = None):
    """Get a structured logger"""
    return structlog.get_logger(name)


def log_performance(func_name: str):
    """Decorator to log function duration and outcome"""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger("performance")
            start_time = time.perf_counter()

            try:
                result = func(*args, **kwargs)
                logger.info(
                    "function_completed",
                    function=func_name,
                    duration_seconds=round(time.perf_counter() - start_time, 4),
                    status="success"
                )
                return result
            except Exception as e:
                logger.error(
                    "function_failed",
                    function=func_name,
                    duration_seconds=round(time.perf_counter() - start_time, 4),
                    error=str(e),
                    error_type=type(e).__name__,
                    status="error"
                )
                raise
        return wrapper
    return decorator


def log_api_request(request, response=None, duration_seconds=None):
    """Log the start of a request, or its completion when ``response`` is given.

    ``user_id`` is set on ``request.state`` by the session dependency and is
    ``None`` on completion lines of anonymous requests.
    """
    logger = get_logger("api")
    route = request.scope.get("route")

    log_data = {
        "method": request.method,
        "endpoint": getattr(route, "path", request.url.path),
        "client_ip": request.client.host if request.client else "unknown",
    }

    if response is None:
        log_data["user_agent"] = request.headers.get("user-agent", "unknown")
        logger.info("api_request_started", **log_data)
        return

    log_data.update(
        status_code=response.status_code,
        user_id=getattr(request.state, "user_id", None),
        duration_seconds=round(duration_seconds, 4) if duration_seconds is not None else None,
    )
    if response.status_code >= 500:
        logger.error("api_request_completed", **log_data)
    else:
        logger.info("api_request_completed", **log_data)
