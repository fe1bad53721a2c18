from abc import ABC, abstractmethod
from typing import List, Optional

from studentdesk.schemas.student import StudentFields, StudentRecord


class StudentStore(ABC):
    """
    Record store contract shared by every backend.

    Ids arrive as the raw text from the URL. A store raises
    ``InvalidStudentIdError`` for text it could never have issued and
    reports a well-formed but unknown id as ``None`` / ``False``, so callers
    can tell "bad id" from "no such student" without knowing the id format.
    """

    backend: str = "abstract"

    @abstractmethod
    def is_valid_id(self, raw_id: str) -> bool:
        ...

    @abstractmethod
    def list_students(self) -> List[StudentRecord]:
        ...

    @abstractmethod
    def get_student(self, raw_id: str) -> Optional[StudentRecord]:
        ...

    @abstractmethod
    def create_student(self, fields: StudentFields) -> StudentRecord:
        ...

    @abstractmethod
    def update_student(self, raw_id: str, fields: StudentFields) -> Optional[StudentRecord]:
        """Replace name, age and course together; id and creation time are kept."""

    @abstractmethod
    def delete_student(self, raw_id: str) -> bool:
        ...

    @abstractmethod
    def is_connected(self) -> bool:
        ...

    def count(self) -> int:
        return len(self.list_students())

    def startup(self) -> None:
        """Called once when the application starts."""

    def shutdown(self) -> None:
        """Called once when the application stops."""
