from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from student_records.core.database import Base


class Group(Base):
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)

    # Students outlive their group: deleting a group nulls their group_id
    students = relationship("Student", back_populates="group", order_by="Student.id")
