from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from sqlmodel import Field, SQLModel
from sqlalchemy import Column, JSON, Text


def _new_record_id() -> str:
    return uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    hashed_password: str
    created_at: datetime = Field(default_factory=_utcnow)


class StudyRecord(SQLModel, table=True):
    id: str = Field(default_factory=_new_record_id, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    filename: Optional[str] = None
    text: str = Field(sa_column=Column(Text, nullable=False))
    summary: Optional[str] = Field(default=None, sa_column=Column(Text))
    questions: List[Dict[str, str]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=_utcnow, index=True)

    def to_public(self) -> Dict[str, Any]:
        return {
            "_id": self.id,
            "userId": self.user_id,
            "filename": self.filename,
            "text": self.text,
            "summary": self.summary,
            "questions": list(self.questions or []),
            "createdAt": self.created_at.isoformat(),
        }
