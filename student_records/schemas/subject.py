from typing import List
from pydantic import BaseModel, ConfigDict, Field


class SubjectBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class SubjectCreate(SubjectBase):
    pass


class Subject(SubjectBase):
    id: int

    model_config = ConfigDict(from_attributes=True)


class SubjectWithStudents(Subject):
    students: List["Student"] = []


from student_records.schemas.student import Student  # noqa: E402

SubjectWithStudents.model_rebuild()
