from seed import SAMPLE_STUDENTS, seed_data
from studentdesk.schemas.student import StudentFields


def test_seed_fills_empty_store(sql_store):
    assert seed_data(sql_store) == len(SAMPLE_STUDENTS)
    assert sql_store.count() == len(SAMPLE_STUDENTS)


def test_seed_skips_store_with_data(memory_store):
    memory_store.create_student(StudentFields(name="Ann", age=21, course="Physics"))
    assert seed_data(memory_store) == 0
    assert memory_store.count() == 1
