import logging

from studentdesk.core.config import settings
from studentdesk.core.exceptions import StoreError
from studentdesk.schemas.student import StudentFields
from studentdesk.services.store.base import StudentStore
from studentdesk.services.store.factory import build_store

# Setup logging to see output
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SAMPLE_STUDENTS = [
    StudentFields(name="Ann Lee", age=21, course="Physics"),
    StudentFields(name="Bao Tran", age=22, course="Computer Science"),
    StudentFields(name="Carla Diaz", age=20, course="Mathematics"),
]


def seed_data(store: StudentStore) -> int:
    """
    Insert the sample students when the store is empty.

    Returns the number of students created.
    """
    if store.count():
        logger.info("Store already contains data. Skipping seed.")
        return 0

    logger.info("Seeding data...")
    for fields in SAMPLE_STUDENTS:
        store.create_student(fields)
    logger.info("Data seeded successfully", extra={"context": {"count": len(SAMPLE_STUDENTS)}})
    return len(SAMPLE_STUDENTS)


if __name__ == "__main__":
    store = build_store(settings)
    store.startup()
    try:
        seed_data(store)
    except StoreError as e:
        logger.error(f"Error seeding data: {e}")
        raise SystemExit(1)
    finally:
        store.shutdown()
