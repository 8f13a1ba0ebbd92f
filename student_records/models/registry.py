"""Import every model so Base.metadata and the mapper registry are complete."""
from student_records.models.student_subject import student_subjects
from student_records.models.group import Group
from student_records.models.subject import Subject
from student_records.models.student import Student
from student_records.models.mark import Mark

__all__ = ["student_subjects", "Group", "Subject", "Student", "Mark"]
