from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from student_records.api.deps import get_db
from student_records.services.student import student as student_service
from student_records.schemas.student import Student, StudentCreate, StudentUpdate

router = APIRouter()


@router.get("/", response_model=List[Student])
def get_students(
    age: Optional[int] = Query(None, gt=0),
    sort: Optional[str] = Query(None, description="asc or desc, by name"),
    id: Optional[int] = Query(None, gt=0),
    db: Session = Depends(get_db)
):
    """
    List students

    - **age**: only students of this age
    - **sort**: order by name, `asc` or `desc`
    - **id**: return just this student (404 if missing)
    """
    return student_service.list_students(db, age=age, sort=sort, student_id=id)


@router.get("/group/{group_id}", response_model=List[Student])
def get_students_by_group(
    group_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    """
    Students belonging to a group
    """
    return student_service.get_students_by_group(db, group_id)


@router.get("/{student_id}", response_model=Student)
def get_student(
    student_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    """
    Get one student by ID
    """
    return student_service.get_student(db, student_id)


@router.post("/", response_model=Student, status_code=status.HTTP_201_CREATED)
def create_student(
    student: StudentCreate,
    db: Session = Depends(get_db)
):
    """
    Create a student

    Body:
    - **name**, **age** (required)
    - **group_id**: existing group (optional)
    - **subject_ids**: subjects to assign (optional)
    - **marks**: initial marks, each for one of **subject_ids** (optional)
    """
    return student_service.create_student(db, student)


@router.put("/{student_id}", response_model=Student)
def update_student(
    student: StudentUpdate,
    student_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    """
    Update a student's name and/or age
    """
    return student_service.update_student(db, student_id, student)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(
    student_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    """
    Delete a student together with its marks and subject assignments
    """
    student_service.delete_student(db, student_id)
    return None
