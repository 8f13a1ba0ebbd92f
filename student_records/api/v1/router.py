from fastapi import APIRouter
from student_records.api.v1.endpoints import groups
from student_records.api.v1.endpoints import marks
from student_records.api.v1.endpoints import student_subjects
from student_records.api.v1.endpoints import students
from student_records.api.v1.endpoints import subjects

api_router = APIRouter()

api_router.include_router(
    students.router,
    prefix="/students",
    tags=["students"]
)

api_router.include_router(
    groups.router,
    prefix="/groups",
    tags=["groups"]
)

api_router.include_router(
    subjects.router,
    prefix="/subjects",
    tags=["subjects"]
)

api_router.include_router(
    marks.router,
    prefix="/marks",
    tags=["marks"]
)

api_router.include_router(
    student_subjects.router,
    prefix="/student-subjects",
    tags=["student-subjects"]
)
