from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class MarkBase(BaseModel):
    value: int = Field(..., ge=0)


class MarkCreate(MarkBase):
    student_id: int = Field(..., gt=0, validation_alias=AliasChoices("student_id", "studentId"))
    subject_id: int = Field(..., gt=0, validation_alias=AliasChoices("subject_id", "subjectId"))


class Mark(MarkBase):
    id: int
    student_id: int
    subject_id: int

    model_config = ConfigDict(from_attributes=True)
