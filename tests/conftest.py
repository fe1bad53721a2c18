import uuid

import pytest
from fastapi.testclient import TestClient

from studentdesk.core.config import Settings
from studentdesk.core.database import create_db_engine
from studentdesk.main import create_app
from studentdesk.services.store.memory_store import InMemoryStudentStore
from studentdesk.services.store.sql_store import SQLStudentStore


@pytest.fixture
def test_settings():
    return Settings(DATABASE_URL="sqlite://", LOG_FORMAT="text", LOG_LEVEL="DEBUG")


@pytest.fixture
def memory_store():
    return InMemoryStudentStore()


@pytest.fixture
def sql_store(test_settings):
    store = SQLStudentStore(create_db_engine(test_settings))
    store.startup()
    yield store
    store.shutdown()


@pytest.fixture(params=["sql", "memory"])
def store(request, test_settings):
    """Each API test runs once per record store backend."""
    if request.param == "memory":
        yield InMemoryStudentStore()
        return
    store = SQLStudentStore(create_db_engine(test_settings))
    store.startup()
    yield store
    store.shutdown()


@pytest.fixture
def missing_id(store):
    """A well-formed id no record has."""
    return str(uuid.uuid4()) if store.backend == "sql" else "999"


@pytest.fixture
def app(test_settings, store):
    return create_app(settings=test_settings, store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def sample_student():
    return {"name": "Ann", "age": 21, "course": "Physics"}
