from typing import List, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class StudentBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    age: int = Field(..., gt=0, lt=150)


class StudentMarkCreate(BaseModel):
    """Mark submitted together with a new student; bound to it on save."""
    value: int = Field(..., ge=0)
    subject_id: int = Field(..., gt=0, validation_alias=AliasChoices("subject_id", "subjectId"))


class StudentCreate(StudentBase):
    group_id: Optional[int] = Field(None, gt=0, validation_alias=AliasChoices("group_id", "groupId"))
    subject_ids: List[int] = Field(
        default_factory=list, validation_alias=AliasChoices("subject_ids", "subjectIds")
    )
    marks: List[StudentMarkCreate] = Field(default_factory=list)


class StudentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    age: Optional[int] = Field(None, gt=0, lt=150)


class StudentSummary(StudentBase):
    id: int

    model_config = ConfigDict(from_attributes=True)


class Student(StudentSummary):
    group_id: Optional[int] = None


class StudentWithSubjects(Student):
    subjects: List["Subject"] = []


from student_records.schemas.subject import Subject  # noqa: E402

StudentWithSubjects.model_rebuild()
