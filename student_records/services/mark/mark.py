import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from student_records.core import cache
from student_records.core.cache import cache_manager
from student_records.core.exceptions import NotFoundException, SubjectNotAssignedException
from student_records.core.logging import log_execution_time
from student_records.models.mark import Mark
from student_records.models.student import Student
from student_records.models.subject import Subject
from student_records.schemas import mark as schemas
from student_records.services.student_subject.student_subject import has_subject

logger = logging.getLogger(__name__)


def _marks():
    return cache_manager.region(cache.MARKS)


def _require(db: Session, model, entity_id: int, label: str):
    entity = db.get(model, entity_id)
    if entity is None:
        raise NotFoundException(f"{label} not found with id: {entity_id}")
    return entity


def _average(db: Session, column, entity_id: int) -> Optional[float]:
    value = db.query(func.avg(Mark.value)).filter(column == entity_id).scalar()
    return float(value) if value is not None else None


@log_execution_time
def list_marks(
    db: Session,
    student_id: Optional[int] = None,
    subject_id: Optional[int] = None,
) -> List[schemas.Mark]:
    """Marks filtered by student, subject, both or neither."""
    def load():
        logger.info(f"Fetching marks for student: {student_id}, subject: {subject_id}")
        query = db.query(Mark)
        if student_id is not None and subject_id is not None:
            _require(db, Student, student_id, "Student")
            _require(db, Subject, subject_id, "Subject")
        if student_id is not None:
            query = query.filter(Mark.student_id == student_id)
        if subject_id is not None:
            query = query.filter(Mark.subject_id == subject_id)
        return [schemas.Mark.model_validate(m) for m in query.order_by(Mark.id).all()]

    key = "marks-{}-{}".format(
        student_id if student_id is not None else "all",
        subject_id if subject_id is not None else "all",
    )
    return _marks().read_through(key, load)


def get_mark(db: Session, mark_id: int) -> schemas.Mark:
    def load():
        logger.info(f"Fetching mark by id: {mark_id}")
        return schemas.Mark.model_validate(_require(db, Mark, mark_id, "Mark"))

    return _marks().read_through(str(mark_id), load)


def get_marks_by_value(db: Session, value: int) -> List[schemas.Mark]:
    def load():
        logger.info(f"Fetching marks with value: {value}")
        rows = db.query(Mark).filter(Mark.value == value).order_by(Mark.id).all()
        return [schemas.Mark.model_validate(m) for m in rows]

    return _marks().read_through(f"value-{value}", load)


def average_by_student(db: Session, student_id: int) -> Optional[float]:
    """Mean mark of a student, or None when the student has no marks."""
    def load():
        logger.info(f"Fetching average mark for student: {student_id}")
        return _average(db, Mark.student_id, student_id)

    return _marks().read_through(f"avg-student-{student_id}", load)


def average_by_subject(db: Session, subject_id: int) -> Optional[float]:
    def load():
        logger.info(f"Fetching average mark for subject: {subject_id}")
        return _average(db, Mark.subject_id, subject_id)

    return _marks().read_through(f"avg-subject-{subject_id}", load)


def _evict_marks(student_id: int = None, subject_id: int = None) -> None:
    marks = _marks()
    if student_id is not None:
        marks.evict(f"avg-student-{student_id}")
    if subject_id is not None:
        marks.evict(f"avg-subject-{subject_id}")
    # Listings and aggregates cannot be corrected in place
    marks.clear()


@log_execution_time
def create_mark(db: Session, data: schemas.MarkCreate) -> schemas.Mark:
    """
    Record a mark once the student is known to take the subject.

    Student and subject are re-read by id; a missing association is a
    SubjectNotAssignedException, kept apart from a missing entity.
    """
    logger.info(
        f"Adding mark for student: {data.student_id}, subject: {data.subject_id}, value: {data.value}"
    )
    student = _require(db, Student, data.student_id, "Student")
    subject = _require(db, Subject, data.subject_id, "Subject")

    if not has_subject(db, student.id, subject.id):
        raise SubjectNotAssignedException(student.id, subject.id)

    mark = Mark(value=data.value, student=student, subject=subject)
    db.add(mark)
    db.commit()
    db.refresh(mark)

    _evict_marks(student.id, subject.id)
    return schemas.Mark.model_validate(mark)


def delete_mark(db: Session, mark_id: int) -> None:
    logger.info(f"Deleting mark with id: {mark_id}")
    mark = _require(db, Mark, mark_id, "Mark")
    student_id, subject_id = mark.student_id, mark.subject_id

    db.delete(mark)
    db.commit()
    db.expire_all()

    _evict_marks(student_id, subject_id)


def delete_mark_by_criteria(
    db: Session,
    student_id: int,
    subject_name: str,
    value: int,
    mark_id: Optional[int] = None,
) -> int:
    """
    Delete the marks matching every given field; ``mark_id`` narrows it to one.

    Raises NotFoundException when nothing matched.
    """
    logger.info(
        f"Deleting specific mark for student: {student_id}, subject: {subject_name}, "
        f"value: {value}, id: {mark_id}"
    )
    subject_ids = select(Subject.id).where(Subject.name == subject_name)
    query = db.query(Mark).filter(
        Mark.student_id == student_id,
        Mark.subject_id.in_(subject_ids),
        Mark.value == value,
    )
    if mark_id is not None:
        query = query.filter(Mark.id == mark_id)

    deleted = query.delete(synchronize_session=False)
    if deleted == 0:
        db.rollback()
        raise NotFoundException("Mark not found with the given criteria.")
    db.commit()
    db.expire_all()

    _evict_marks(student_id)
    return deleted
