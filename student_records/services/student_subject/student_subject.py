import logging
from typing import List

from sqlalchemy.orm import Session, selectinload

from student_records.core import cache
from student_records.core.cache import cache_manager
from student_records.core.exceptions import NotFoundException
from student_records.core.logging import log_execution_time
from student_records.models.mark import Mark
from student_records.models.student import Student
from student_records.models.student_subject import student_subjects
from student_records.models.subject import Subject
from student_records.schemas.student import Student as StudentSchema, StudentWithSubjects
from student_records.schemas.subject import Subject as SubjectSchema, SubjectWithStudents

logger = logging.getLogger(__name__)

STUDENT_NOT_FOUND = "Student not found"
SUBJECT_NOT_FOUND = "Subject not found"


def _region():
    return cache_manager.region(cache.STUDENT_SUBJECTS)


def _resolve(db: Session, student_id: int, subject_id: int):
    student = db.get(Student, student_id)
    if student is None:
        raise NotFoundException(STUDENT_NOT_FOUND, details={"student_id": student_id})
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise NotFoundException(SUBJECT_NOT_FOUND, details={"subject_id": subject_id})
    return student, subject


def _evict_association_views() -> None:
    # Both sides' aggregate views change; not point-evictable
    cache_manager.clear(cache.STUDENT_SUBJECTS, cache.STUDENTS)


def has_subject(db: Session, student_id: int, subject_id: int) -> bool:
    """Whether the association row exists; read from the table, not a loaded collection."""
    row = (
        db.query(student_subjects.c.student_id)
        .filter(
            student_subjects.c.student_id == student_id,
            student_subjects.c.subject_id == subject_id,
        )
        .first()
    )
    return row is not None


def link_subject(db: Session, student: Student, subject: Subject) -> None:
    """
    Association primitive: add the join row without committing or touching
    the cache. Callers own the transaction and the eviction.
    """
    if subject not in student.subjects:
        student.subjects.append(subject)
        db.flush()


@log_execution_time
def add_subject_to_student(db: Session, student_id: int, subject_id: int) -> None:
    logger.info(f"Adding subject {subject_id} to student {student_id}")
    student, subject = _resolve(db, student_id, subject_id)

    link_subject(db, student, subject)
    db.commit()

    _evict_association_views()
    logger.info(f"Subject {subject_id} added to student {student_id}")


@log_execution_time
def remove_subject_from_student(db: Session, student_id: int, subject_id: int) -> None:
    """
    Unlink a subject. Marks for the pair go with it: a mark may only exist
    while its student takes the subject.
    """
    logger.info(f"Removing subject {subject_id} from student {student_id}")
    student, subject = _resolve(db, student_id, subject_id)

    db.query(Mark).filter(
        Mark.student_id == student_id, Mark.subject_id == subject_id
    ).delete(synchronize_session=False)
    if subject in student.subjects:
        student.subjects.remove(subject)
    db.commit()
    # Bulk delete bypassed loaded collections
    db.expire_all()

    _evict_association_views()
    cache_manager.clear(cache.MARKS)
    logger.info(f"Subject {subject_id} removed from student {student_id}")


@log_execution_time
def get_subjects_by_student(db: Session, student_id: int) -> List[SubjectSchema]:
    def load():
        logger.info(f"Fetching subjects for student {student_id}")
        rows = (
            db.query(Subject)
            .join(student_subjects, student_subjects.c.subject_id == Subject.id)
            .filter(student_subjects.c.student_id == student_id)
            .order_by(Subject.id)
            .all()
        )
        return [SubjectSchema.model_validate(s) for s in rows]

    return _region().read_through(f"subjects-{student_id}", load)


@log_execution_time
def get_students_by_subject(db: Session, subject_id: int) -> List[StudentSchema]:
    def load():
        logger.info(f"Fetching students for subject {subject_id}")
        subject = _subject_with_students(db, subject_id)
        return [StudentSchema.model_validate(s) for s in subject.students]

    return _region().read_through(f"students-{subject_id}", load)


@log_execution_time
def get_student_with_subjects(db: Session, student_id: int) -> StudentWithSubjects:
    def load():
        logger.info(f"Fetching student with subjects for ID: {student_id}")
        student = (
            db.query(Student)
            .options(selectinload(Student.subjects))
            .populate_existing()
            .filter(Student.id == student_id)
            .first()
        )
        if student is None:
            raise NotFoundException(STUDENT_NOT_FOUND, details={"student_id": student_id})
        return StudentWithSubjects.model_validate(student)

    return _region().read_through(
        f"student-with-subjects-{student_id}",
        load,
        unless=lambda result: not result.subjects,
    )


@log_execution_time
def get_subject_with_students(db: Session, subject_id: int) -> SubjectWithStudents:
    def load():
        logger.info(f"Fetching subject with students for ID: {subject_id}")
        return SubjectWithStudents.model_validate(_subject_with_students(db, subject_id))

    return _region().read_through(
        f"subject-with-students-{subject_id}",
        load,
        unless=lambda result: not result.students,
    )


def _subject_with_students(db: Session, subject_id: int) -> Subject:
    subject = (
        db.query(Subject)
        .options(selectinload(Subject.students))
        .populate_existing()
        .filter(Subject.id == subject_id)
        .first()
    )
    if subject is None:
        raise NotFoundException(SUBJECT_NOT_FOUND, details={"subject_id": subject_id})
    return subject

