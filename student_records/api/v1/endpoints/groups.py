from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from student_records.api.deps import get_db
from student_records.services.group import group as group_service
from student_records.schemas.group import Group, GroupCreate

router = APIRouter()


@router.get("/", response_model=List[Group])
def get_groups(
    name: Optional[str] = Query(None, description="substring of the group name"),
    sort: Optional[str] = Query(None, description="asc to order by name"),
    db: Session = Depends(get_db)
):
    return group_service.list_groups(db, name=name, sort=sort)


@router.get("/name/{name}", response_model=Group)
def get_group_by_name(name: str, db: Session = Depends(get_db)):
    return group_service.get_group_by_name(db, name)


@router.get("/{group_id}", response_model=Group)
def get_group(
    group_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    return group_service.get_group(db, group_id)


@router.post("/", response_model=Group, status_code=status.HTTP_201_CREATED)
def create_group(
    group: GroupCreate,
    db: Session = Depends(get_db)
):
    """
    Create a group

    - **name**: unique group name
    - **student_ids**: students moved into the group; all must exist or nothing is saved
    """
    return group_service.create_group(db, group)


@router.delete("/name/{name}", status_code=status.HTTP_204_NO_CONTENT)
def delete_group_by_name(name: str, db: Session = Depends(get_db)):
    group_service.delete_group_by_name(db, name)
    return None


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_group(
    group_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    group_service.delete_group(db, group_id)
    return None
