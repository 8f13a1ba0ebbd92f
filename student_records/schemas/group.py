from typing import List
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from student_records.schemas.student import StudentSummary


class GroupBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class GroupCreate(GroupBase):
    student_ids: List[int] = Field(
        default_factory=list, validation_alias=AliasChoices("student_ids", "studentIds")
    )


class Group(GroupBase):
    id: int
    students: List[StudentSummary] = []

    model_config = ConfigDict(from_attributes=True)
