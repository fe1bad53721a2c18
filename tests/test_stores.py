import uuid

import pytest

from studentdesk.core.config import Settings
from studentdesk.core.database import create_db_engine
from studentdesk.core.exceptions import InvalidStudentIdError, StoreError
from studentdesk.models.student import next_created_at
from studentdesk.schemas.student import StudentFields
from studentdesk.services.store.factory import build_store
from studentdesk.services.store.memory_store import InMemoryStudentStore
from studentdesk.services.store.sql_store import SQLStudentStore

ANN = StudentFields(name="Ann", age=21, course="Physics")
BEN = StudentFields(name="Ben", age=23, course="History")


# --- InMemoryStudentStore ---

def test_memory_ids_are_sequential_from_one(memory_store):
    first = memory_store.create_student(ANN)
    second = memory_store.create_student(BEN)
    assert (first.id, second.id) == (1, 2)


def test_memory_lists_in_insertion_order(memory_store):
    memory_store.create_student(ANN)
    memory_store.create_student(BEN)
    assert [s.name for s in memory_store.list_students()] == ["Ann", "Ben"]


def test_memory_ids_are_not_reused_after_delete(memory_store):
    first = memory_store.create_student(ANN)
    assert memory_store.delete_student(str(first.id))
    assert memory_store.create_student(BEN).id == 2


def test_memory_unknown_integer_is_not_found(memory_store):
    assert memory_store.get_student("42") is None
    assert memory_store.update_student("42", BEN) is None
    assert memory_store.delete_student("42") is False


def test_memory_non_integer_id_is_invalid(memory_store):
    assert not memory_store.is_valid_id("abc")
    with pytest.raises(InvalidStudentIdError):
        memory_store.get_student("abc")


@pytest.mark.parametrize("raw_id", ["--5", "\u00b2", "\u0665", " 5", "5 ", "1.5", "", "-", "1" * 40])
def test_memory_rejects_ids_int_cannot_read(memory_store, raw_id):
    assert not memory_store.is_valid_id(raw_id)
    with pytest.raises(InvalidStudentIdError):
        memory_store.delete_student(raw_id)


def test_memory_signed_integer_id_is_well_formed(memory_store):
    memory_store.create_student(ANN)
    assert memory_store.get_student("+1").name == "Ann"
    assert memory_store.get_student("-1") is None


def test_memory_update_replaces_fields_and_keeps_id(memory_store):
    created = memory_store.create_student(ANN)
    updated = memory_store.update_student(str(created.id), BEN)
    assert updated.id == created.id
    assert updated.created_at == created.created_at
    assert (updated.name, updated.age, updated.course) == ("Ben", 23, "History")


def test_memory_returned_records_are_copies(memory_store):
    created = memory_store.create_student(ANN)
    created.name = "changed"
    assert memory_store.get_student("1").name == "Ann"


def test_separate_memory_stores_are_isolated():
    one, two = InMemoryStudentStore(), InMemoryStudentStore()
    one.create_student(ANN)
    assert two.list_students() == []
    assert two.create_student(BEN).id == 1


# --- SQLStudentStore ---

def test_sql_ids_are_uuid_strings(sql_store):
    created = sql_store.create_student(ANN)
    assert isinstance(created.id, str)
    assert str(uuid.UUID(created.id)) == created.id
    assert created.created_at is not None


def test_sql_lists_newest_first(sql_store):
    sql_store.create_student(ANN)
    sql_store.create_student(BEN)
    assert [s.name for s in sql_store.list_students()] == ["Ben", "Ann"]


def test_sql_get_round_trip(sql_store):
    created = sql_store.create_student(ANN)
    fetched = sql_store.get_student(created.id)
    assert (fetched.name, fetched.age, fetched.course) == ("Ann", 21, "Physics")


def test_sql_update_keeps_id_and_creation_time(sql_store):
    created = sql_store.create_student(ANN)
    updated = sql_store.update_student(created.id, BEN)
    assert updated.id == created.id
    assert updated.created_at == created.created_at
    assert updated.name == "Ben"


def test_sql_unknown_id_is_not_found(sql_store):
    missing = str(uuid.uuid4())
    assert sql_store.get_student(missing) is None
    assert sql_store.update_student(missing, ANN) is None
    assert sql_store.delete_student(missing) is False


def test_sql_delete(sql_store):
    created = sql_store.create_student(ANN)
    assert sql_store.delete_student(created.id) is True
    assert sql_store.get_student(created.id) is None
    assert sql_store.count() == 0


@pytest.mark.parametrize("raw_id", ["abc", "12", "not-a-uuid-at-all", ""])
def test_sql_malformed_id_is_invalid(sql_store, raw_id):
    assert not sql_store.is_valid_id(raw_id)
    with pytest.raises(InvalidStudentIdError):
        sql_store.delete_student(raw_id)


def test_sql_reports_connection_state(sql_store):
    assert sql_store.is_connected()


def test_sql_unreachable_database(tmp_path):
    url = f"sqlite:///{tmp_path / 'missing' / 'students.db'}"
    store = SQLStudentStore(create_db_engine(Settings(DATABASE_URL=url)))

    store.startup()  # logs, does not raise
    assert not store.is_connected()
    with pytest.raises(StoreError) as exc_info:
        store.list_students()
    assert exc_info.value.message == "Error fetching students"
    assert exc_info.value.status_code == 500


# --- factory ---

def test_build_store_picks_backend():
    assert isinstance(build_store(Settings(STORE_BACKEND="memory")), InMemoryStudentStore)
    sql = build_store(Settings(STORE_BACKEND="sql", DATABASE_URL="sqlite://"))
    assert isinstance(sql, SQLStudentStore)
    sql.shutdown()


def test_creation_times_strictly_increase():
    stamps = [next_created_at() for _ in range(1000)]
    assert all(earlier < later for earlier, later in zip(stamps, stamps[1:]))


def test_sql_lists_many_quick_inserts_newest_first(sql_store):
    names = [f"Student {n}" for n in range(20)]
    for name in names:
        sql_store.create_student(StudentFields(name=name, age=20, course="Physics"))
    assert [s.name for s in sql_store.list_students()] == names[::-1]
