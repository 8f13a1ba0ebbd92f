from sqlalchemy import Column, ForeignKey, Integer
from sqlalchemy.orm import relationship
from student_records.core.database import Base


class Mark(Base):
    __tablename__ = "marks"

    id = Column(Integer, primary_key=True, index=True)
    value = Column(Integer, nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)

    student = relationship("Student", back_populates="marks")
    subject = relationship("Subject", back_populates="marks")
