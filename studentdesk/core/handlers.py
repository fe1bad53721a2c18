# studentdesk/core/handlers.py
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from studentdesk.core.exceptions import BaseAPIException, InvalidStudentIdError, InvalidStudentIdException
from studentdesk.core.logging import logger
from studentdesk.services.validation import MISSING_FIELDS_MESSAGE


def error_body(message: str, code: str, details=None) -> dict:
    body = {"message": message, "code": code}
    if details:
        body["details"] = details
    return body


# 1. Errors raised on purpose by the service
async def custom_api_exception_handler(request: Request, exc: BaseAPIException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.code, exc.details),
    )


# 1b. A record store refused an id it could never have issued
async def invalid_student_id_handler(request: Request, exc: InvalidStudentIdError):
    return await custom_api_exception_handler(request, InvalidStudentIdException())


# 2. Body that could not be parsed into a payload at all (not JSON, not an object)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = {}
    for error in exc.errors():
        field = ".".join(str(x) for x in error["loc"] if x != "body")
        details[field or "body"] = error["msg"]

    logger.warning(
        "Validation failed: unreadable body",
        extra={"context": {"path": request.url.path, "errors": details}},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(MISSING_FIELDS_MESSAGE, "BAD_REQUEST", details),
    )


# 3. Standard HTTP errors (unknown URL, wrong method...)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), "HTTP_ERROR"),
        headers=getattr(exc, "headers", None),
    )


# 4. Anything else: full detail in the log, nothing in the response
async def general_exception_handler(request: Request, exc: Exception):
    logger.critical(
        f"Unhandled Exception: {exc}",
        exc_info=True,
        extra={"context": {"method": request.method, "path": request.url.path}},
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", "INTERNAL_SERVER_ERROR"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAPIException, custom_api_exception_handler)
    app.add_exception_handler(InvalidStudentIdError, invalid_student_id_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
