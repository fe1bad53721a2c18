from studentdesk.core.config import Settings
from studentdesk.core.database import create_db_engine
from studentdesk.services.store.base import StudentStore
from studentdesk.services.store.memory_store import InMemoryStudentStore
from studentdesk.services.store.sql_store import SQLStudentStore


def build_store(settings: Settings) -> StudentStore:
    """Record store selected by STORE_BACKEND."""
    if settings.STORE_BACKEND == "memory":
        return InMemoryStudentStore()
    return SQLStudentStore(create_db_engine(settings))
