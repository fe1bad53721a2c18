from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool
from .config import Settings
import logging

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()


# =============================================================================
# DATABASE ENGINE CONFIGURATION
# =============================================================================

def create_db_engine(settings: Settings) -> Engine:
    """
    Create the database engine for the configured DATABASE_URL.

    Server databases get a QueuePool sized from the DB_POOL_* settings and a
    driver connect timeout. SQLite (used for local runs and tests) gets a
    single shared connection when the database lives in memory.
    """
    url = settings.DATABASE_URL

    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url:
            options["poolclass"] = StaticPool
    else:
        options = {
            # Connection pool settings
            "poolclass": QueuePool,
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_timeout": settings.DB_POOL_TIMEOUT,
            "pool_recycle": settings.DB_POOL_RECYCLE,
            # Test connection before using (detect disconnects)
            "pool_pre_ping": True,
            "connect_args": {"connect_timeout": settings.DB_CONNECT_TIMEOUT},
        }

    engine = create_engine(url, echo=settings.DB_ECHO_SQL, **options)

    if settings.DEBUG:
        @event.listens_for(engine, "connect")
        def receive_connect(dbapi_conn, connection_record):
            logger.debug("New database connection established")

    return engine


# =============================================================================
# SESSION CONFIGURATION
# =============================================================================

def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,  # Don't auto-commit transactions
        autoflush=False,   # Don't auto-flush before queries
        bind=engine,
        expire_on_commit=False  # Keep attributes readable after commit
    )


# =============================================================================
# DATABASE UTILITIES
# =============================================================================

def create_database_tables(engine: Engine) -> None:
    """
    Create all database tables defined in models (no-op for existing ones).
    """
    # Registers the models on Base.metadata
    from studentdesk.models import student  # noqa: F401

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")


def check_database_connection(engine: Engine) -> bool:
    """
    Check if database connection is working.

    Returns:
        bool: True if connection successful, False otherwise
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(
            "Database connection check failed",
            extra={"context": {"error": str(e)}},
        )
        return False
