from fastapi import APIRouter, Depends, status
from typing import List
from studentdesk.api.deps import get_store
from studentdesk.core.exceptions import InvalidStudentIdException, NotFoundException
from studentdesk.core.logging import logger
from studentdesk.schemas.student import MessageResponse, StudentOut, StudentPayload
from studentdesk.services.store.base import StudentStore
from studentdesk.services.validation import clean_student

router = APIRouter()

STUDENT_NOT_FOUND = "Student not found"


def ensure_valid_id(store: StudentStore, student_id: str) -> None:
    if not store.is_valid_id(student_id):
        logger.warning("Invalid student ID format", extra={"context": {"id": student_id}})
        raise InvalidStudentIdException()


@router.get("", response_model=List[StudentOut])
def get_students(store: StudentStore = Depends(get_store)):
    """
    List every student.

    SQL store: newest first. Memory store: insertion order.
    """
    logger.debug("Fetching all students")
    students = store.list_students()
    logger.info("Students fetched successfully", extra={"context": {"count": len(students)}})
    return students


@router.get("/{student_id}", response_model=StudentOut)
def get_student(student_id: str, store: StudentStore = Depends(get_store)):
    ensure_valid_id(store, student_id)
    student = store.get_student(student_id)
    if student is None:
        raise NotFoundException(STUDENT_NOT_FOUND)
    return student


@router.post("", response_model=StudentOut, status_code=status.HTTP_201_CREATED)
def create_student(payload: StudentPayload, store: StudentStore = Depends(get_store)):
    """
    Create a student.

    - **name**: non-empty text
    - **age**: integer >= 1 (numeric strings accepted)
    - **course**: non-empty text
    """
    logger.info("Creating new student", extra={"context": payload.model_dump()})
    fields = clean_student(payload)

    student = store.create_student(fields)
    logger.info(
        "Student created successfully",
        extra={"context": {"id": str(student.id), "name": student.name}},
    )
    return student


@router.put("/{student_id}", response_model=StudentOut)
def update_student(
    student_id: str,
    payload: StudentPayload,
    store: StudentStore = Depends(get_store)
):
    """
    Replace name, age and course of an existing student.
    """
    ensure_valid_id(store, student_id)
    logger.info("Updating student", extra={"context": {"id": student_id, **payload.model_dump()}})
    fields = clean_student(payload)

    student = store.update_student(student_id, fields)
    if student is None:
        logger.warning("Student not found for update", extra={"context": {"id": student_id}})
        raise NotFoundException(STUDENT_NOT_FOUND)

    logger.info(
        "Student updated successfully",
        extra={"context": {"id": str(student.id), "name": student.name}},
    )
    return student


@router.delete("/{student_id}", response_model=MessageResponse)
def delete_student(student_id: str, store: StudentStore = Depends(get_store)):
    ensure_valid_id(store, student_id)
    logger.info("Deleting student", extra={"context": {"id": student_id}})

    deleted = store.delete_student(student_id)
    if not deleted:
        logger.warning("Student not found for deletion", extra={"context": {"id": student_id}})
        raise NotFoundException(STUDENT_NOT_FOUND)

    logger.info("Student deleted successfully", extra={"context": {"id": student_id}})
    return {"message": "Student deleted successfully"}
