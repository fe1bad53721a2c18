import threading
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import Column, DateTime, Integer, String
from studentdesk.core.database import Base

_clock_lock = threading.Lock()
_last_created_at = datetime.min.replace(tzinfo=timezone.utc)


def new_student_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def next_created_at() -> datetime:
    """
    Creation time that strictly increases within the process, so two inserts
    in the same clock tick still list in reverse-creation order.
    """
    global _last_created_at
    with _clock_lock:
        now = utcnow()
        if now <= _last_created_at:
            now = _last_created_at + timedelta(microseconds=1)
        _last_created_at = now
        return now


class Student(Base):
    __tablename__ = "students"

    id = Column(String(36), primary_key=True, default=new_student_id)
    name = Column(String, nullable=False)
    age = Column(Integer, nullable=False)
    course = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=next_created_at, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
