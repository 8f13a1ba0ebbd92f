import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from student_records.core import cache
from student_records.core.cache import cache_manager
from student_records.core.exceptions import ConflictException, NotFoundException
from student_records.core.logging import log_execution_time
from student_records.models.group import Group
from student_records.models.student import Student
from student_records.schemas import group as schemas

logger = logging.getLogger(__name__)


def _groups():
    return cache_manager.region(cache.GROUPS)


def _evict_member_views(student_ids) -> None:
    """Cached students carry their group id; moving them makes those entries stale."""
    if not student_ids:
        return
    students = cache_manager.region(cache.STUDENTS)
    students.evict(*[str(sid) for sid in student_ids])
    students.evict_prefix("all-")
    students.evict_prefix("group-")
    cache_manager.clear(cache.STUDENT_SUBJECTS)


@log_execution_time
def list_groups(db: Session, name: Optional[str] = None, sort: Optional[str] = None) -> List[schemas.Group]:
    """Name-contains filter wins over sorting; ``asc`` sorts by name."""
    def load():
        logger.info(f"Fetching groups with name pattern: {name}, sort: {sort}")
        query = db.query(Group)
        if name is not None:
            query = query.filter(Group.name.contains(name)).order_by(Group.id)
        elif sort is not None and sort.lower() == "asc":
            query = query.order_by(Group.name.asc())
        else:
            query = query.order_by(Group.id)
        return [schemas.Group.model_validate(g) for g in query.all()]

    return _groups().read_through(f"all-{name}-{sort}", load)


@log_execution_time
def get_group(db: Session, group_id: int) -> schemas.Group:
    def load():
        logger.info(f"Fetching group by ID: {group_id}")
        group = db.get(Group, group_id)
        if group is None:
            raise NotFoundException(f"Group not found with id: {group_id}")
        return schemas.Group.model_validate(group)

    return _groups().read_through(str(group_id), load)


@log_execution_time
def get_group_by_name(db: Session, name: str) -> schemas.Group:
    def load():
        logger.info(f"Fetching group by name: {name}")
        group = db.query(Group).filter(Group.name == name).first()
        if group is None:
            raise NotFoundException(f"Group not found with name: {name}")
        return schemas.Group.model_validate(group)

    return _groups().read_through(f"name-{name}", load)


@log_execution_time
def create_group(db: Session, data: schemas.GroupCreate) -> schemas.Group:
    """
    Create a group and move the listed students into it.

    All-or-nothing: if any student id does not resolve, nothing is written
    and the error names every missing id.
    """
    logger.info(f"Adding new group: {data.name}")

    if db.query(Group.id).filter(Group.name == data.name).first() is not None:
        raise ConflictException(f"Group with name {data.name} already exists")

    student_ids = list(dict.fromkeys(data.student_ids))
    students = []
    if student_ids:
        students = db.query(Student).filter(Student.id.in_(student_ids)).order_by(Student.id).all()
        found = {s.id for s in students}
        missing = [sid for sid in student_ids if sid not in found]
        if missing:
            raise NotFoundException(
                f"Students with ID {missing} not found", details={"missing_ids": missing}
            )

    group = Group(name=data.name)
    for student in students:
        student.group = group
    db.add(group)
    db.commit()
    db.refresh(group)

    result = schemas.Group.model_validate(group)
    groups = _groups()
    if students:
        # Former groups of the moved students lost members
        groups.clear()
    groups.put(str(result.id), result)
    groups.put(f"name-{result.name}", result)
    groups.evict_prefix("all-")
    _evict_member_views(student_ids)
    return result


def _evict_group(group: Group) -> None:
    logger.info(f"Evicting all caches for group: id={group.id}, name={group.name}")
    groups = _groups()
    groups.evict(str(group.id), f"name-{group.name}")
    groups.evict_prefix("all-")
    cache_manager.region(cache.STUDENTS).evict(f"group-{group.id}")
    _evict_member_views([s.id for s in group.students])


def _delete(db: Session, group: Group) -> None:
    # Evicted ahead of the delete; members are detached, not removed
    _evict_group(group)
    for student in list(group.students):
        student.group = None
    db.delete(group)
    db.commit()


def delete_group(db: Session, group_id: int) -> None:
    logger.info(f"Deleting group with ID: {group_id}")
    group = db.get(Group, group_id)
    if group is None:
        raise NotFoundException(f"Group with ID {group_id} not found")
    _delete(db, group)


def delete_group_by_name(db: Session, name: str) -> None:
    logger.info(f"Deleting group with name: {name}")
    group = db.query(Group).filter(Group.name == name).first()
    if group is None:
        raise NotFoundException(f"Group with name {name} not found")
    _delete(db, group)
