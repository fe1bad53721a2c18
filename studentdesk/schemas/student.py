from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict


class StudentPayload(BaseModel):
    """Request body as sent; presence and shape are checked by the validation service."""
    name: Any = None
    age: Any = None
    course: Any = None

    model_config = ConfigDict(extra="ignore")


class StudentFields(BaseModel):
    name: str
    age: int
    course: str


class StudentRecord(StudentFields):
    id: Union[int, str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class StudentOut(BaseModel):
    id: Union[int, str]
    name: str
    age: int
    course: str

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str
