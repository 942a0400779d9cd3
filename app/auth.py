from typing import Optional, Tuple

import structlog
from passlib.context import CryptContext
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.errors import InvalidCredentials, MissingFields, Unauthenticated, UsernameTaken
from app.models import User
from app.services.sessions import Identity, SessionStore

logger = structlog.get_logger()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Verified against when the username is unknown so both failure paths cost a hash check.
_DUMMY_HASH = pwd_context.hash("not-a-real-password")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


class AuthGate:
    def __init__(self, engine: Engine, sessions: SessionStore) -> None:
        self.engine = engine
        self.sessions = sessions

    def register(self, username: Optional[str], password: Optional[str]) -> Identity:
        missing = [name for name, value in (("username", username), ("password", password)) if not (value or "").strip()]
        if missing:
            raise MissingFields(*missing)

        with Session(self.engine) as session:
            existing = session.exec(select(User).where(User.username == username)).first()
            if existing:
                logger.info("registration_rejected", reason="username_taken")
                raise UsernameTaken()
            user = User(username=username, hashed_password=get_password_hash(password))
            session.add(user)
            try:
                session.commit()
            except IntegrityError as e:
                # Lost a race with a concurrent registration of the same name
                session.rollback()
                raise UsernameTaken() from e
            session.refresh(user)
            logger.info("user_registered", user_id=user.id)
            return Identity(user_id=user.id, username=user.username)

    def login(self, username: Optional[str], password: Optional[str]) -> Tuple[Identity, str]:
        if not username or not password:
            raise InvalidCredentials()

        with Session(self.engine) as session:
            user = session.exec(select(User).where(User.username == username)).first()

        if user is None:
            verify_password(password, _DUMMY_HASH)
            logger.info("login_failed")
            raise InvalidCredentials()
        if not verify_password(password, user.hashed_password):
            logger.info("login_failed")
            raise InvalidCredentials()

        identity = Identity(user_id=user.id, username=user.username)
        token = self.sessions.create(identity)
        logger.info("login_succeeded", user_id=user.id)
        return identity, token

    def current_user(self, token: Optional[str]) -> Identity:
        identity = self.sessions.get(token)
        if identity is None:
            raise Unauthenticated()
        return identity

    def logout(self, token: Optional[str]) -> None:
        self.sessions.destroy(token)
