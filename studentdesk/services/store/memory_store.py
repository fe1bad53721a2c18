import re
import threading
from datetime import datetime, timezone
from typing import List, Optional

from studentdesk.core.exceptions import InvalidStudentIdError
from studentdesk.schemas.student import StudentFields, StudentRecord
from studentdesk.services.store.base import StudentStore

# ASCII digits only (str.isdigit also accepts superscripts int() rejects),
# bounded so int() never sees an oversized string
_INTEGER_ID = re.compile(r"[+-]?[0-9]{1,18}")


class InMemoryStudentStore(StudentStore):
    """
    Students kept in a list owned by this instance, in insertion order.

    Ids are integers handed out from 1 upwards and never reused. Sync
    endpoints run on a thread pool, so mutations hold a lock.
    """

    backend = "memory"

    def __init__(self):
        self._students: List[StudentRecord] = []
        self._next_id = 1
        self._lock = threading.Lock()

    def _parse_id(self, raw_id) -> int:
        if isinstance(raw_id, int) and not isinstance(raw_id, bool):
            return raw_id
        text = str(raw_id)
        if not _INTEGER_ID.fullmatch(text):
            raise InvalidStudentIdError(raw_id)
        return int(text)

    def _find_index(self, student_id: int) -> Optional[int]:
        for index, student in enumerate(self._students):
            if student.id == student_id:
                return index
        return None

    def is_valid_id(self, raw_id) -> bool:
        try:
            self._parse_id(raw_id)
        except InvalidStudentIdError:
            return False
        return True

    def list_students(self) -> List[StudentRecord]:
        with self._lock:
            return [student.model_copy() for student in self._students]

    def get_student(self, raw_id) -> Optional[StudentRecord]:
        student_id = self._parse_id(raw_id)
        with self._lock:
            index = self._find_index(student_id)
            return self._students[index].model_copy() if index is not None else None

    def create_student(self, fields: StudentFields) -> StudentRecord:
        now = datetime.now(timezone.utc)
        with self._lock:
            student = StudentRecord(
                id=self._next_id,
                created_at=now,
                updated_at=now,
                **fields.model_dump(),
            )
            self._next_id += 1
            self._students.append(student)
            return student.model_copy()

    def update_student(self, raw_id, fields: StudentFields) -> Optional[StudentRecord]:
        student_id = self._parse_id(raw_id)
        with self._lock:
            index = self._find_index(student_id)
            if index is None:
                return None
            updated = self._students[index].model_copy(
                update={**fields.model_dump(), "updated_at": datetime.now(timezone.utc)}
            )
            self._students[index] = updated
            return updated.model_copy()

    def delete_student(self, raw_id) -> bool:
        student_id = self._parse_id(raw_id)
        with self._lock:
            index = self._find_index(student_id)
            if index is None:
                return False
            del self._students[index]
            return True

    def count(self) -> int:
        with self._lock:
            return len(self._students)

    def is_connected(self) -> bool:
        return True
