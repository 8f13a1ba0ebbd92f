from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from student_records.api.deps import get_db
from student_records.services.subject import subject as subject_service
from student_records.schemas.subject import Subject, SubjectCreate

router = APIRouter()


@router.get("/", response_model=List[Subject])
def get_subjects(
    name: Optional[str] = Query(None, description="substring of the subject name"),
    sort: Optional[str] = Query(None, description="asc to order by name"),
    db: Session = Depends(get_db)
):
    return subject_service.list_subjects(db, name=name, sort=sort)


@router.get("/exists/{name}", response_model=bool)
def subject_exists(name: str, db: Session = Depends(get_db)):
    return subject_service.subject_exists(db, name)


@router.get("/name/{name}", response_model=Subject)
def get_subject_by_name(name: str, db: Session = Depends(get_db)):
    return subject_service.get_subject_by_name(db, name)


@router.get("/{subject_id}", response_model=Subject)
def get_subject(
    subject_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    return subject_service.get_subject(db, subject_id)


@router.post("/", response_model=Subject, status_code=status.HTTP_201_CREATED)
def create_subject(
    subject: SubjectCreate,
    db: Session = Depends(get_db)
):
    """
    Create a subject

    - **name**: unique subject name
    """
    return subject_service.create_subject(db, subject)


@router.delete("/name/{name}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subject_by_name(name: str, db: Session = Depends(get_db)):
    subject_service.delete_subject_by_name(db, name)
    return None


@router.delete("/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subject(
    subject_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    subject_service.delete_subject(db, subject_id)
    return None
