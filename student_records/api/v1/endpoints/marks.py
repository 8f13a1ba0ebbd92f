from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from student_records.api.deps import get_db
from student_records.core.exceptions import NotFoundException
from student_records.services.mark import mark as mark_service
from student_records.schemas.mark import Mark, MarkCreate

router = APIRouter()


@router.get("/", response_model=List[Mark])
def get_marks(
    student_id: Optional[int] = Query(None, gt=0, alias="studentId"),
    subject_id: Optional[int] = Query(None, gt=0, alias="subjectId"),
    db: Session = Depends(get_db)
):
    """
    List marks

    - **studentId**: only this student's marks
    - **subjectId**: only marks in this subject
    """
    return mark_service.list_marks(db, student_id=student_id, subject_id=subject_id)


@router.get("/value/{value}", response_model=List[Mark])
def get_marks_by_value(
    value: int = Path(..., ge=0),
    db: Session = Depends(get_db)
):
    return mark_service.get_marks_by_value(db, value)


@router.get("/average/student/{student_id}", response_model=float)
def get_average_by_student(
    student_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    average = mark_service.average_by_student(db, student_id)
    if average is None:
        raise NotFoundException(f"No marks found for student with id: {student_id}")
    return average


@router.get("/average/subject/{subject_id}", response_model=float)
def get_average_by_subject(
    subject_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    average = mark_service.average_by_subject(db, subject_id)
    if average is None:
        raise NotFoundException(f"No marks found for subject with id: {subject_id}")
    return average


@router.get("/{mark_id}", response_model=Mark)
def get_mark(
    mark_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    return mark_service.get_mark(db, mark_id)


@router.post("/", response_model=Mark, status_code=status.HTTP_201_CREATED)
def create_mark(
    mark: MarkCreate,
    db: Session = Depends(get_db)
):
    """
    Record a mark

    The student must already have the subject assigned, otherwise the
    request fails with `SUBJECT_NOT_ASSIGNED`.
    """
    return mark_service.create_mark(db, mark)


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
def delete_mark_by_criteria(
    student_id: int = Query(..., gt=0, alias="studentId"),
    subject_name: str = Query(..., min_length=1, alias="subjectName"),
    value: int = Query(..., ge=0),
    id: Optional[int] = Query(None, gt=0),
    db: Session = Depends(get_db)
):
    """
    Delete the mark(s) matching student, subject name and value

    - **id**: narrow the match to a single mark
    """
    mark_service.delete_mark_by_criteria(db, student_id, subject_name, value, mark_id=id)
    return None


@router.delete("/{mark_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_mark(
    mark_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    mark_service.delete_mark(db, mark_id)
    return None
