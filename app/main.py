from contextlib import asynccontextmanager
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
import structlog

from app.auth import AuthGate
from app.config import Settings
from app.db import create_db_engine, init_db
from app.deps import Services
from app.errors import AppError
from app.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from app.routers import auth as auth_router
from app.routers import summaries as summaries_router
from app.services.cache import CacheService
from app.services.llm import LLMGateway
from app.services.logging import configure_logging, log_api_request
from app.services.monitoring import HealthChecker, get_metrics, REQUEST_COUNT, REQUEST_DURATION
from app.services.records import StudyRecordStore
from app.services.sessions import SessionStore

logger = structlog.get_logger()


def build_services(settings: Settings) -> Services:
    engine = create_db_engine(settings.database_url)
    init_db(engine)
    cache = CacheService(settings.redis_url)
    sessions = SessionStore(
        cache,
        idle_seconds=settings.session_idle_minutes * 60,
        absolute_seconds=settings.session_absolute_hours * 3600,
    )
    return Services(
        settings=settings,
        engine=engine,
        cache=cache,
        records=StudyRecordStore(engine),
        auth=AuthGate(engine, sessions),
        gateway=LLMGateway.from_settings(settings),
    )


def shutdown_services(services: Services) -> None:
    services.gateway.close()
    services.cache.close()
    services.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        services = build_services(settings)
        app.state.services = services
        app.state.health_checker = HealthChecker(services)
        logger.info("startup_complete", database=settings.database_url.split("://")[0], cache=services.cache.backend)
        try:
            yield
        finally:
            shutdown_services(services)
            logger.info("shutdown_complete")

    app = FastAPI(
        title="AI Study Summarizer",
        description="Summaries and practice questions for your study material",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, error=exc.message, error_type=type(exc).__name__)
        else:
            logger.info("request_rejected", path=request.url.path, error=exc.message, error_type=type(exc).__name__)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info("request_invalid", path=request.url.path, errors=len(exc.errors()))
        details = [{"loc": list(err.get("loc", ())), "msg": err.get("msg")} for err in exc.errors()]
        return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})

    # Add middleware for request logging and metrics
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        log_api_request(request)

        response = await call_next(request)

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        REQUEST_COUNT.labels(method=request.method, endpoint=endpoint, status=response.status_code).inc()
        REQUEST_DURATION.labels(method=request.method, endpoint=endpoint).observe(process_time)

        log_api_request(request, response, duration_seconds=process_time)
        return response

    # ----------------- Health & Monitoring Endpoints -----------------
    @app.get("/health")
    def health_check(request: Request):
        """Health check endpoint"""
        return request.app.state.health_checker.get_health_status()

    @app.get("/metrics")
    def metrics():
        """Prometheus metrics endpoint"""
        return get_metrics()

    # ----------------- Routers -----------------
    app.include_router(auth_router.router)
    app.include_router(summaries_router.router)

    return app


configure_logging(Settings.from_env().log_level)
app = create_app()
