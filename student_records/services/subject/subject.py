import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from student_records.core import cache
from student_records.core.cache import cache_manager
from student_records.core.exceptions import ConflictException, NotFoundException
from student_records.core.logging import log_execution_time
from student_records.models.subject import Subject
from student_records.schemas import subject as schemas

logger = logging.getLogger(__name__)

NOT_FOUND = "Subject not found with id: {}"


def _subjects():
    return cache_manager.region(cache.SUBJECTS)


@log_execution_time
def list_subjects(db: Session, name: Optional[str] = None, sort: Optional[str] = None) -> List[schemas.Subject]:
    def load():
        logger.info(f"Fetching subjects for name pattern: {name}, sort: {sort}")
        query = db.query(Subject)
        if name is not None:
            query = query.filter(Subject.name.contains(name)).order_by(Subject.id)
        elif sort is not None and sort.lower() == "asc":
            query = query.order_by(Subject.name.asc())
        else:
            query = query.order_by(Subject.id)
        return [schemas.Subject.model_validate(s) for s in query.all()]

    return _subjects().read_through(f"all-{name}-{sort if sort is not None else 'default'}", load)


@log_execution_time
def get_subject(db: Session, subject_id: int) -> schemas.Subject:
    def load():
        logger.info(f"Fetching subject by id: {subject_id}")
        subject = db.get(Subject, subject_id)
        if subject is None:
            raise NotFoundException(NOT_FOUND.format(subject_id))
        return schemas.Subject.model_validate(subject)

    return _subjects().read_through(str(subject_id), load)


@log_execution_time
def get_subject_by_name(db: Session, name: str) -> schemas.Subject:
    def load():
        logger.info(f"Fetching subject by name: {name}")
        subject = db.query(Subject).filter(Subject.name == name).first()
        if subject is None:
            raise NotFoundException(f"Subject not found with name: {name}")
        return schemas.Subject.model_validate(subject)

    return _subjects().read_through(f"name-{name}", load)


def subject_exists(db: Session, name: str) -> bool:
    def load():
        logger.info(f"Checking existence of subject with name: {name}")
        return db.query(Subject.id).filter(Subject.name == name).first() is not None

    return _subjects().read_through(f"exists-{name}", load)


@log_execution_time
def create_subject(db: Session, data: schemas.SubjectCreate) -> schemas.Subject:
    """Persist a subject and seed its id and name keys from the saved row."""
    logger.info(f"Saving subject: {data.name}")
    if db.query(Subject.id).filter(Subject.name == data.name).first() is not None:
        raise ConflictException(f"Subject with name {data.name} already exists")

    subject = Subject(name=data.name)
    db.add(subject)
    db.commit()
    db.refresh(subject)

    result = schemas.Subject.model_validate(subject)
    subjects = _subjects()
    subjects.put(str(result.id), result)
    subjects.put(f"name-{result.name}", result)
    subjects.evict(f"exists-{result.name}")
    subjects.evict_prefix("all-")
    return result


def _delete(db: Session, subject: Subject) -> None:
    subject_id, name = subject.id, subject.name
    # Join rows and marks of the subject are removed along with it
    db.delete(subject)
    db.commit()
    db.expire_all()

    subjects = _subjects()
    subjects.evict(str(subject_id), f"name-{name}", f"exists-{name}")
    subjects.evict_prefix("all-")
    cache_manager.clear(cache.MARKS, cache.STUDENT_SUBJECTS)
    logger.info(f"Subject {subject_id} ({name}) deleted")


def delete_subject(db: Session, subject_id: int) -> None:
    logger.info(f"Deleting subject with id: {subject_id}")
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise NotFoundException(NOT_FOUND.format(subject_id))
    _delete(db, subject)


def delete_subject_by_name(db: Session, name: str) -> None:
    logger.info(f"Deleting subject with name: {name}")
    subject = db.query(Subject).filter(Subject.name == name).first()
    if subject is None:
        raise NotFoundException(f"Subject not found with name: {name}")
    _delete(db, subject)
