from __future__ import annotations

from typing import Dict, Iterable, List, Optional

import structlog
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from app.db import ping
from app.errors import NotFound
from app.models import StudyRecord
from app.services.qa_extractor import QuestionAnswer

logger = structlog.get_logger()


def _as_dict(item) -> Dict[str, str]:
    if isinstance(item, QuestionAnswer):
        return item.to_dict()
    return {"question": str(item["question"]), "answer": str(item["answer"])}


class StudyRecordStore:
    """Per-user persistence of summarization sessions.

    Every method opens its own database session and commits at most once, so
    each call is a single-row atomic write and concurrent writers to the same
    record resolve as last-writer-wins.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def ping(self) -> None:
        ping(self.engine)

    def create(self, user_id: int, source_text: str, filename: Optional[str] = None) -> str:
        record = StudyRecord(user_id=user_id, text=source_text, filename=filename)
        with Session(self.engine) as session:
            session.add(record)
            session.commit()
            session.refresh(record)
            logger.info("study_record_created", record_id=record.id, user_id=user_id, has_file=filename is not None)
            return record.id

    def get(self, record_id: str, user_id: int) -> StudyRecord:
        """Fetch a record owned by ``user_id``; other users' records look absent."""
        with Session(self.engine) as session:
            record = session.get(StudyRecord, record_id)
            if not record or record.user_id != user_id:
                raise NotFound()
            return record

    def attach_summary(self, record_id: str, summary_text: str) -> None:
        """Overwrite the summary; questions drawn from a different summary are cleared."""
        with Session(self.engine) as session:
            record = session.get(StudyRecord, record_id)
            if not record:
                raise NotFound()
            if record.summary != summary_text:
                record.questions = []
            record.summary = summary_text
            session.add(record)
            session.commit()
        logger.info("summary_attached", record_id=record_id)

    def attach_questions(self, record_id: str, questions: Iterable) -> None:
        """Replace the record's question list."""
        items = [_as_dict(q) for q in questions]
        with Session(self.engine) as session:
            record = session.get(StudyRecord, record_id)
            if not record:
                raise NotFound()
            record.questions = items
            session.add(record)
            session.commit()
        logger.info("questions_attached", record_id=record_id, count=len(items))

    def list_by_user(self, user_id: int) -> List[StudyRecord]:
        with Session(self.engine) as session:
            return list(
                session.exec(
                    select(StudyRecord)
                    .where(StudyRecord.user_id == user_id)
                    .order_by(StudyRecord.created_at.desc())
                ).all()
            )

    def delete(self, record_id: str, user_id: int) -> None:
        with Session(self.engine) as session:
            record = session.get(StudyRecord, record_id)
            # Check the record exists AND belongs to the caller; both misses look the same
            if not record or record.user_id != user_id:
                logger.info("study_record_delete_refused", record_id=record_id, user_id=user_id)
                raise NotFound()
            session.delete(record)
            session.commit()
        logger.info("study_record_deleted", record_id=record_id, user_id=user_id)
