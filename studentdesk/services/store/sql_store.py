import logging
import uuid
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studentdesk.core.database import (
    check_database_connection,
    create_database_tables,
    create_session_factory,
)
from studentdesk.core.exceptions import InvalidStudentIdError, StoreError
from studentdesk.models.student import Student
from studentdesk.schemas.student import StudentFields, StudentRecord
from studentdesk.services.store.base import StudentStore

logger = logging.getLogger(__name__)


class SQLStudentStore(StudentStore):
    """Students kept in a SQL table, ids are UUID4 strings issued on insert."""

    backend = "sql"

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = create_session_factory(engine)

    @contextmanager
    def _session(self, failure_message: str) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(failure_message, exc_info=True, extra={"context": {"error": str(e)}})
            raise StoreError(failure_message) from e
        finally:
            db.close()

    def _parse_id(self, raw_id: str) -> str:
        try:
            return str(uuid.UUID(str(raw_id)))
        except ValueError:
            raise InvalidStudentIdError(raw_id)

    def is_valid_id(self, raw_id: str) -> bool:
        try:
            self._parse_id(raw_id)
        except InvalidStudentIdError:
            return False
        return True

    def list_students(self) -> List[StudentRecord]:
        """Newest-created first; id breaks ties from timestamps written by other processes."""
        with self._session("Error fetching students") as db:
            rows = db.scalars(select(Student).order_by(Student.created_at.desc(), Student.id.desc())).all()
            return [StudentRecord.model_validate(row) for row in rows]

    def get_student(self, raw_id: str) -> Optional[StudentRecord]:
        student_id = self._parse_id(raw_id)
        with self._session("Error fetching student") as db:
            db_student = db.get(Student, student_id)
            return StudentRecord.model_validate(db_student) if db_student else None

    def create_student(self, fields: StudentFields) -> StudentRecord:
        with self._session("Error creating student") as db:
            db_student = Student(name=fields.name, age=fields.age, course=fields.course)
            db.add(db_student)
            db.commit()
            db.refresh(db_student)
            return StudentRecord.model_validate(db_student)

    def update_student(self, raw_id: str, fields: StudentFields) -> Optional[StudentRecord]:
        student_id = self._parse_id(raw_id)
        with self._session("Error updating student") as db:
            db_student = db.get(Student, student_id)
            if db_student is None:
                return None
            db_student.name = fields.name
            db_student.age = fields.age
            db_student.course = fields.course
            db.commit()
            db.refresh(db_student)
            return StudentRecord.model_validate(db_student)

    def delete_student(self, raw_id: str) -> bool:
        student_id = self._parse_id(raw_id)
        with self._session("Error deleting student") as db:
            db_student = db.get(Student, student_id)
            if db_student is None:
                return False
            db.delete(db_student)
            db.commit()
            return True

    def count(self) -> int:
        with self._session("Error counting students") as db:
            return db.scalar(select(func.count()).select_from(Student))

    def is_connected(self) -> bool:
        return check_database_connection(self.engine)

    def startup(self) -> None:
        # An unreachable database must not stop the service; /health reports it
        try:
            create_database_tables(self.engine)
        except SQLAlchemyError as e:
            logger.error(
                "Database connection error",
                exc_info=True,
                extra={"context": {"error": str(e)}},
            )

    def shutdown(self) -> None:
        self.engine.dispose()
