from typing import Generator
from student_records.core.database import SessionLocal


def get_db() -> Generator:
    """
    Request-scoped database session.
    Closed after the response; uncommitted work is rolled back on close.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
