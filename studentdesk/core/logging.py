# studentdesk/core/logging.py
import asyncio
import json
import logging
import sys
import threading
from datetime import datetime, timezone

from studentdesk.core.config import settings

LOGGER_NAME = "studentdesk"


class JsonFormatter(logging.Formatter):
    """One JSON object per line; structured fields come from ``extra={"context": {...}}``."""

    def __init__(self, service: str):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "service": self.service,
            "message": record.getMessage(),
        }
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            entry.update(context)
        if record.exc_info:
            entry["stack"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    def __init__(self):
        super().__init__("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = getattr(record, "context", None)
        if context:
            line = f"{line} {json.dumps(context, default=str)}"
        return line


# Configure standard Python logging
def setup_logging(
    level: str = settings.LOG_LEVEL,
    fmt: str = settings.LOG_FORMAT,
    service: str = settings.SERVICE_NAME,
) -> logging.Logger:
    handler = logging.StreamHandler(sys.stdout)  # Print logs to console
    if fmt == "json":
        handler.setFormatter(JsonFormatter(service))
    else:
        handler.setFormatter(TextFormatter())

    # No-op when the root logger already has handlers (uvicorn --log-config, pytest)
    logging.basicConfig(level=level, handlers=[handler])
    service_logger = logging.getLogger(LOGGER_NAME)
    service_logger.setLevel(level)
    return service_logger


def install_exception_hooks() -> None:
    """
    Process-level error policy.

    Uncaught exceptions in the main thread are logged and end the process.
    Exceptions escaping worker threads or never-awaited asyncio tasks are
    logged and the process keeps running.
    """

    def handle_uncaught(exc_type, exc, tb):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc, tb)
            return
        logger.critical(
            "Uncaught Exception",
            exc_info=(exc_type, exc, tb),
            extra={"context": {"error": str(exc)}},
        )
        sys.exit(1)

    def handle_thread_exception(args: threading.ExceptHookArgs):
        logger.error(
            "Unhandled thread exception",
            exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
            extra={"context": {"thread": getattr(args.thread, "name", None)}},
        )

    sys.excepthook = handle_uncaught
    threading.excepthook = handle_thread_exception


def handle_loop_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    """asyncio exception handler: log unretrieved task errors without stopping."""
    exc = context.get("exception")
    logger.error(
        "Unhandled Rejection",
        exc_info=(type(exc), exc, exc.__traceback__) if exc else None,
        extra={"context": {"reason": context.get("message")}},
    )


logger = logging.getLogger(LOGGER_NAME)
