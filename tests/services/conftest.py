"""Service test helpers: build entities through the services themselves."""

import pytest

from student_records.schemas.student import StudentCreate
from student_records.schemas.subject import SubjectCreate
from student_records.services.student import student as student_service
from student_records.services.subject import subject as subject_service


@pytest.fixture
def make_student(db):
    def _make(name="Alice", age=20, **extra):
        return student_service.create_student(db, StudentCreate(name=name, age=age, **extra))
    return _make


@pytest.fixture
def make_subject(db):
    def _make(name="Mathematics"):
        return subject_service.create_subject(db, SubjectCreate(name=name))
    return _make
