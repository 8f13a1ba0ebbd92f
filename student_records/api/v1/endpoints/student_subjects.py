from typing import List
from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session
from student_records.api.deps import get_db
from student_records.core.exceptions import NotFoundException
from student_records.schemas.student import Student, StudentWithSubjects
from student_records.schemas.subject import Subject, SubjectWithStudents
from student_records.services.student_subject import student_subject as student_subject_service

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_class=Response)
def add_subject_to_student(
    student_id: int = Query(..., gt=0, alias="studentId"),
    subject_id: int = Query(..., gt=0, alias="subjectId"),
    db: Session = Depends(get_db)
):
    """
    Assign a subject to a student

    - **studentId**: student id (positive)
    - **subjectId**: subject id (positive)
    """
    student_subject_service.add_subject_to_student(db, student_id, subject_id)
    return Response(status_code=status.HTTP_201_CREATED)


@router.delete("", status_code=status.HTTP_200_OK, response_class=Response)
def remove_subject_from_student(
    student_id: int = Query(..., gt=0, alias="studentId"),
    subject_id: int = Query(..., gt=0, alias="subjectId"),
    db: Session = Depends(get_db)
):
    """
    Unassign a subject from a student; marks for that pair are removed too
    """
    student_subject_service.remove_subject_from_student(db, student_id, subject_id)
    return Response(status_code=status.HTTP_200_OK)


@router.get("/{student_id}/subjects", response_model=List[Subject])
def get_subjects_by_student(
    student_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    subjects = student_subject_service.get_subjects_by_student(db, student_id)
    if not subjects:
        raise NotFoundException(f"No subjects found for student with id: {student_id}")
    return subjects


@router.get("/{subject_id}/students", response_model=List[Student])
def get_students_by_subject(
    subject_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    students = student_subject_service.get_students_by_subject(db, subject_id)
    if not students:
        raise NotFoundException(f"No students found for subject with id: {subject_id}")
    return students


@router.get("/student/{student_id}/with-subjects", response_model=StudentWithSubjects)
def get_student_with_subjects(
    student_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    return student_subject_service.get_student_with_subjects(db, student_id)


@router.get("/subject/{subject_id}/with-students", response_model=SubjectWithStudents)
def get_subject_with_students(
    subject_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    return student_subject_service.get_subject_with_students(db, subject_id)
