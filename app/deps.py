"""
Request-scoped access to the collaborators built at startup.
"""
from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.engine import Engine

from app.auth import AuthGate
from app.config import Settings
from app.services.cache import CacheService
from app.services.llm import LLMGateway
from app.services.records import StudyRecordStore
from app.services.sessions import Identity


@dataclass
class Services:
    settings: Settings
    engine: Engine
    cache: CacheService
    records: StudyRecordStore
    auth: AuthGate
    gateway: LLMGateway


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_settings(services: Services = Depends(get_services)) -> Settings:
    return services.settings


def get_records(services: Services = Depends(get_services)) -> StudyRecordStore:
    return services.records


def get_auth(services: Services = Depends(get_services)) -> AuthGate:
    return services.auth


def get_gateway(services: Services = Depends(get_services)) -> LLMGateway:
    return services.gateway


def get_session_token(request: Request, settings: Settings = Depends(get_settings)) -> str | None:
    return request.cookies.get(settings.session_cookie_name)


def get_current_user(
    request: Request,
    token: str | None = Depends(get_session_token),
    auth: AuthGate = Depends(get_auth),
) -> Identity:
    """Resolve the session cookie once per request; raises Unauthenticated (401)."""
    identity = auth.current_user(token)
    # Picked up by the request logging middleware
    request.state.user_id = identity.user_id
    return identity
