"""Student service: CRUD and the cache entries each write evicts.

Invariants:
    - get-by-id after create returns the created student; missing id is NotFound
    - create puts the id key and drops every listing key
    - delete clears subject links before removing the row; marks go with it
"""

import pytest

from student_records.core import cache
from student_records.core.cache import cache_manager
from student_records.core.exceptions import NotFoundException, SubjectNotAssignedException
from student_records.models.mark import Mark
from student_records.models.student import Student
from student_records.models.student_subject import student_subjects
from student_records.schemas.group import GroupCreate
from student_records.schemas.student import StudentCreate, StudentUpdate
from student_records.services.group import group as group_service
from student_records.services.student import student as student_service
from student_records.services.student_subject import student_subject as student_subject_service


def _students():
    return cache_manager.region(cache.STUDENTS)


def test_get_after_create(db, make_student):
    created = make_student(name="Alice", age=20)

    fetched = student_service.get_student(db, created.id)

    assert fetched.id == created.id
    assert fetched.name == "Alice"
    assert fetched.age == 20
    assert fetched.group_id is None


def test_get_missing_student_raises(db):
    with pytest.raises(NotFoundException) as exc:
        student_service.get_student(db, 404)
    assert "404" in exc.value.message


def test_create_puts_id_key_and_evicts_listings(db, make_student):
    first = make_student(name="Alice")
    student_service.list_students(db)
    assert "all-None-None-None" in _students()

    second = make_student(name="Bob")

    assert str(second.id) in _students()
    assert "all-None-None-None" not in _students()
    names = [s.name for s in student_service.list_students(db)]
    assert names == [first.name, "Bob"]


def test_empty_listing_is_not_cached(db):
    assert student_service.list_students(db) == []
    assert "all-None-None-None" not in _students()


def test_list_filters_and_sorts(db, make_student):
    make_student(name="Carol", age=20)
    make_student(name="alice", age=21)
    make_student(name="Bob", age=20)

    by_age = student_service.list_students(db, age=20, sort="asc")
    assert [s.name for s in by_age] == ["Bob", "Carol"]

    desc = student_service.list_students(db, sort="DESC")
    assert [s.name for s in desc][0] == "alice"


def test_list_by_id_short_circuits(db, make_student):
    student = make_student(name="Alice")

    result = student_service.list_students(db, age=99, student_id=student.id)

    assert [s.id for s in result] == [student.id]
    with pytest.raises(NotFoundException):
        student_service.list_students(db, student_id=999)


def test_create_links_subjects_and_binds_marks(db, make_subject):
    math = make_subject("Mathematics")
    physics = make_subject("Physics")

    student = student_service.create_student(db, StudentCreate(
        name="Alice",
        age=20,
        subject_ids=[math.id, physics.id],
        marks=[{"value": 9, "subject_id": math.id}],
    ))

    links = db.query(student_subjects).filter(student_subjects.c.student_id == student.id).all()
    assert {row.subject_id for row in links} == {math.id, physics.id}
    mark = db.query(Mark).one()
    assert mark.student_id == student.id
    assert mark.value == 9


def test_create_rejects_mark_for_unlisted_subject(db, make_subject):
    math = make_subject("Mathematics")

    with pytest.raises(SubjectNotAssignedException):
        student_service.create_student(db, StudentCreate(
            name="Alice", age=20, marks=[{"value": 5, "subject_id": math.id}],
        ))
    assert db.query(Student).count() == 0


def test_create_with_unknown_subject_persists_nothing(db, make_subject):
    math = make_subject("Mathematics")

    with pytest.raises(NotFoundException) as exc:
        student_service.create_student(db, StudentCreate(
            name="Alice", age=20, subject_ids=[math.id, 77],
        ))
    assert exc.value.details == {"missing_ids": [77]}
    assert db.query(Student).count() == 0


def test_update_is_partial_and_evicts(db, make_student):
    student = make_student(name="Alice", age=20)
    student_service.get_student(db, student.id)

    updated = student_service.update_student(db, student.id, StudentUpdate(age=22))

    assert updated.name == "Alice"
    assert updated.age == 22
    assert student_service.get_student(db, student.id).age == 22


def test_update_missing_student_raises(db):
    with pytest.raises(NotFoundException):
        student_service.update_student(db, 5, StudentUpdate(name="Nobody"))


def test_delete_removes_links_marks_and_cache(db, make_subject):
    math = make_subject("Mathematics")
    student = student_service.create_student(db, StudentCreate(
        name="Alice", age=20, subject_ids=[math.id], marks=[{"value": 8, "subject_id": math.id}],
    ))
    student_service.get_student(db, student.id)
    student_subject_service.get_subjects_by_student(db, student.id)

    student_service.delete_student(db, student.id)

    assert db.query(student_subjects).count() == 0
    assert db.query(Mark).count() == 0
    assert str(student.id) not in _students()
    assert len(cache_manager.region(cache.STUDENT_SUBJECTS)) == 0
    with pytest.raises(NotFoundException):
        student_service.get_student(db, student.id)


def test_students_by_group(db, make_student):
    alice = make_student(name="Alice")
    make_student(name="Bob")
    group = group_service.create_group(db, GroupCreate(name="CS-101", student_ids=[alice.id]))

    members = student_service.get_students_by_group(db, group.id)

    assert [s.id for s in members] == [alice.id]
    assert f"group-{group.id}" in _students()
