from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from student_records.core.database import Base
from student_records.models.student_subject import student_subjects


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    age = Column(Integer, nullable=False)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="SET NULL"), nullable=True, index=True)

    group = relationship("Group", back_populates="students")
    marks = relationship("Mark", back_populates="student", cascade="all, delete-orphan")
    subjects = relationship("Subject", secondary=student_subjects, back_populates="students")
