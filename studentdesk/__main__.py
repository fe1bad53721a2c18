import uvicorn

from studentdesk.core.config import settings
from studentdesk.core.logging import install_exception_hooks


def main() -> None:
    install_exception_hooks()
    # 0.0.0.0 by default so the service is reachable from inside a container
    uvicorn.run(
        "studentdesk.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
