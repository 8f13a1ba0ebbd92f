"""Mark service: the association precondition and fresh aggregates.

Invariants:
    - A mark for a subject the student does not take is rejected with
      SubjectNotAssignedException, not NotFoundException
    - Averages reflect the latest marks right after any add or delete
"""

import pytest

from student_records.core import cache
from student_records.core.cache import cache_manager
from student_records.core.exceptions import NotFoundException, SubjectNotAssignedException
from student_records.schemas.mark import MarkCreate
from student_records.services.mark import mark as mark_service
from student_records.services.student_subject import student_subject as student_subject_service


@pytest.fixture
def enrolled(db, make_student, make_subject):
    """A student taking one subject."""
    student = make_student(name="Alice")
    subject = make_subject("Mathematics")
    student_subject_service.add_subject_to_student(db, student.id, subject.id)
    return student, subject


def _add(db, student_id, subject_id, value):
    return mark_service.create_mark(
        db, MarkCreate(value=value, student_id=student_id, subject_id=subject_id)
    )


def test_mark_requires_assigned_subject(db, make_student, make_subject):
    student = make_student(name="Alice")
    subject = make_subject("Mathematics")

    with pytest.raises(SubjectNotAssignedException) as exc:
        _add(db, student.id, subject.id, 5)
    assert exc.value.code == "SUBJECT_NOT_ASSIGNED"

    student_subject_service.add_subject_to_student(db, student.id, subject.id)
    mark = _add(db, student.id, subject.id, 5)

    assert mark.value == 5
    assert mark_service.get_mark(db, mark.id) == mark


def test_mark_for_unknown_entities_is_not_found(db, enrolled):
    student, subject = enrolled
    with pytest.raises(NotFoundException):
        _add(db, 999, subject.id, 5)
    with pytest.raises(NotFoundException):
        _add(db, student.id, 999, 5)


def test_averages_follow_adds_and_deletes(db, enrolled):
    student, subject = enrolled
    _add(db, student.id, subject.id, 4)
    last = _add(db, student.id, subject.id, 6)
    assert mark_service.average_by_student(db, student.id) == 5.0
    assert mark_service.average_by_subject(db, subject.id) == 5.0
    assert f"avg-student-{student.id}" in cache_manager.region(cache.MARKS)

    _add(db, student.id, subject.id, 8)
    assert mark_service.average_by_student(db, student.id) == 6.0

    mark_service.delete_mark(db, last.id)
    assert mark_service.average_by_student(db, student.id) == 6.0
    assert mark_service.average_by_subject(db, subject.id) == 6.0


def test_average_without_marks_is_none_and_not_cached(db, enrolled):
    student, _ = enrolled
    assert mark_service.average_by_student(db, student.id) is None
    assert f"avg-student-{student.id}" not in cache_manager.region(cache.MARKS)


def test_list_marks_filters(db, make_student, make_subject):
    alice, bob = make_student(name="Alice"), make_student(name="Bob")
    math, physics = make_subject("Mathematics"), make_subject("Physics")
    for student in (alice, bob):
        for subject in (math, physics):
            student_subject_service.add_subject_to_student(db, student.id, subject.id)
    _add(db, alice.id, math.id, 9)
    _add(db, alice.id, physics.id, 7)
    _add(db, bob.id, math.id, 7)

    assert len(mark_service.list_marks(db)) == 3
    assert len(mark_service.list_marks(db, student_id=alice.id)) == 2
    assert len(mark_service.list_marks(db, subject_id=math.id)) == 2
    assert [m.value for m in mark_service.list_marks(db, alice.id, physics.id)] == [7]
    assert len(mark_service.get_marks_by_value(db, 7)) == 2
    assert "marks-all-all" in cache_manager.region(cache.MARKS)


def test_list_marks_with_both_ids_checks_entities(db, enrolled):
    student, _ = enrolled
    with pytest.raises(NotFoundException):
        mark_service.list_marks(db, student_id=student.id, subject_id=404)


def test_new_mark_shows_up_in_cached_listing(db, enrolled):
    student, subject = enrolled
    _add(db, student.id, subject.id, 3)
    assert len(mark_service.list_marks(db, student_id=student.id)) == 1

    _add(db, student.id, subject.id, 4)

    assert len(mark_service.list_marks(db, student_id=student.id)) == 2


def test_delete_by_criteria(db, enrolled):
    student, subject = enrolled
    first = _add(db, student.id, subject.id, 5)
    second = _add(db, student.id, subject.id, 5)

    deleted = mark_service.delete_mark_by_criteria(db, student.id, "Mathematics", 5, mark_id=first.id)

    assert deleted == 1
    assert [m.id for m in mark_service.list_marks(db)] == [second.id]


def test_delete_by_criteria_without_match_is_not_found(db, enrolled):
    student, subject = enrolled
    _add(db, student.id, subject.id, 5)

    with pytest.raises(NotFoundException):
        mark_service.delete_mark_by_criteria(db, student.id, "Mathematics", 6)
    with pytest.raises(NotFoundException):
        mark_service.delete_mark_by_criteria(db, student.id, "Physics", 5)
    assert len(mark_service.list_marks(db)) == 1


def test_delete_missing_mark_is_not_found(db):
    with pytest.raises(NotFoundException):
        mark_service.delete_mark(db, 12)
