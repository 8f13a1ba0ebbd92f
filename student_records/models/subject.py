from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from student_records.core.database import Base
from student_records.models.student_subject import student_subjects


class Subject(Base):
    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)

    students = relationship(
        "Student", secondary=student_subjects, back_populates="subjects", order_by="Student.id"
    )
    marks = relationship("Mark", back_populates="subject", cascade="all")
