from sqlalchemy import Column, ForeignKey, Integer, Table
from student_records.core.database import Base


# Join table for the Student <-> Subject association; no attributes of its own
student_subjects = Table(
    "student_subjects",
    Base.metadata,
    Column("student_id", Integer, ForeignKey("students.id", ondelete="CASCADE"), primary_key=True),
    Column("subject_id", Integer, ForeignKey("subjects.id", ondelete="CASCADE"), primary_key=True),
)
