import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from student_records.core import cache
from student_records.core.cache import cache_manager
from student_records.core.exceptions import NotFoundException, SubjectNotAssignedException
from student_records.core.logging import log_execution_time
from student_records.models.group import Group
from student_records.models.mark import Mark
from student_records.models.student import Student
from student_records.models.subject import Subject
from student_records.schemas import student as schemas
from student_records.services.student_subject.student_subject import link_subject

logger = logging.getLogger(__name__)

NOT_FOUND = "Student not found with id: {}"


def _students():
    return cache_manager.region(cache.STUDENTS)


def _find_student(db: Session, student_id: int) -> Student:
    student = db.get(Student, student_id)
    if student is None:
        raise NotFoundException(NOT_FOUND.format(student_id))
    return student


def _order_by_name(query, sort: str):
    if sort.lower() == "desc":
        return query.order_by(Student.name.desc(), Student.id)
    return query.order_by(Student.name.asc(), Student.id)


def evict_student_views(student_id: int, group_ids=()) -> None:
    """
    Drop every cached view a change to one student makes stale.

    Group reads embed their students and relationship reads embed the
    student with its group id, so both regions go as well.
    """
    students = _students()
    students.evict(str(student_id))
    students.evict_prefix("all-")
    for group_id in group_ids:
        if group_id is not None:
            students.evict(f"group-{group_id}")
    cache_manager.clear(cache.GROUPS, cache.STUDENT_SUBJECTS)


@log_execution_time
def list_students(
    db: Session,
    age: Optional[int] = None,
    sort: Optional[str] = None,
    student_id: Optional[int] = None,
) -> List[schemas.Student]:
    """Students filtered by age and sorted by name; a single id short-circuits."""
    def load():
        logger.info(f"Fetching students with age: {age}, sort: {sort}, id: {student_id}")
        if student_id is not None:
            return [schemas.Student.model_validate(_find_student(db, student_id))]

        query = db.query(Student)
        if age is not None:
            query = query.filter(Student.age == age)
        if sort is not None:
            query = _order_by_name(query, sort)
        else:
            query = query.order_by(Student.id)
        return [schemas.Student.model_validate(s) for s in query.all()]

    return _students().read_through(f"all-{age}-{sort}-{student_id}", load)


@log_execution_time
def get_student(db: Session, student_id: int) -> schemas.Student:
    def load():
        logger.info(f"Fetching student by id: {student_id}")
        return schemas.Student.model_validate(_find_student(db, student_id))

    return _students().read_through(str(student_id), load)


def get_students_by_group(db: Session, group_id: int) -> List[schemas.Student]:
    def load():
        logger.info(f"Fetching students of group id: {group_id}")
        rows = db.query(Student).filter(Student.group_id == group_id).order_by(Student.id).all()
        return [schemas.Student.model_validate(s) for s in rows]

    return _students().read_through(f"group-{group_id}", load)


@log_execution_time
def create_student(db: Session, data: schemas.StudentCreate) -> schemas.Student:
    """
    Save a student, its marks and its subject associations.

    The bare row is flushed first so the associations are written against a
    real id, one link at a time. Nothing is persisted if the group, any
    subject, or any mark's subject assignment fails to check out.
    """
    logger.info(f"Saving student: {data.name}")

    if data.group_id is not None and db.get(Group, data.group_id) is None:
        raise NotFoundException(f"Group not found with id: {data.group_id}")

    subject_ids = list(dict.fromkeys(data.subject_ids))
    subjects = {}
    if subject_ids:
        subjects = {s.id: s for s in db.query(Subject).filter(Subject.id.in_(subject_ids)).all()}
        missing = [sid for sid in subject_ids if sid not in subjects]
        if missing:
            raise NotFoundException(
                f"Subjects with ID {missing} not found", details={"missing_ids": missing}
            )

    for mark in data.marks:
        if mark.subject_id not in subject_ids:
            raise SubjectNotAssignedException(
                student_id=None,
                subject_id=mark.subject_id,
                message=f"Mark for subject with ID {mark.subject_id} requires that subject "
                        f"in the student's subject list",
            )

    student = Student(name=data.name, age=data.age, group_id=data.group_id)
    student.marks = [Mark(value=m.value, subject=subjects[m.subject_id]) for m in data.marks]
    db.add(student)
    db.flush()

    for subject_id in subject_ids:
        link_subject(db, student, subjects[subject_id])

    db.commit()
    db.refresh(student)

    result = schemas.Student.model_validate(student)
    students = _students()
    students.put(str(result.id), result)
    students.evict_prefix("all-")
    if result.group_id is not None:
        students.evict(f"group-{result.group_id}")
        cache_manager.clear(cache.GROUPS)
    cache_manager.clear(cache.STUDENT_SUBJECTS, cache.MARKS)
    return result


def update_student(db: Session, student_id: int, data: schemas.StudentUpdate) -> schemas.Student:
    """Apply the supplied name/age; omitted fields keep their value."""
    logger.info(f"Updating student with id: {student_id}")
    student = _find_student(db, student_id)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(student, field, value)
    db.commit()
    db.refresh(student)

    evict_student_views(student_id, group_ids=(student.group_id,))
    logger.info(f"Student with id {student_id} updated")
    return schemas.Student.model_validate(student)


def delete_student(db: Session, student_id: int) -> None:
    """Detach subjects and flush before the delete so the join table stays consistent."""
    logger.info(f"Deleting student with id: {student_id}")
    student = _find_student(db, student_id)
    group_id = student.group_id

    student.subjects.clear()
    db.flush()
    db.delete(student)
    db.commit()

    evict_student_views(student_id, group_ids=(group_id,))
    cache_manager.clear(cache.MARKS)
    logger.info(f"Student with id {student_id} deleted")
