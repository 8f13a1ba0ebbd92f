import logging
from student_records.core.database import SessionLocal
import student_records.models.registry  # noqa: F401
from student_records.models.group import Group
from student_records.models.mark import Mark
from student_records.models.student import Student
from student_records.models.subject import Subject

# Setup logging to see output
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_data():
    """
    Seed demo groups, subjects, students, subject assignments and marks.
    Skipped when the database already holds students.
    """
    db = SessionLocal()
    try:
        if db.query(Student).first():
            logger.info("Database already contains data. Skipping seed.")
            return

        logger.info("Seeding data...")

        math = Subject(name="Mathematics")
        physics = Subject(name="Physics")
        history = Subject(name="History")
        group_a = Group(name="CS-101")
        group_b = Group(name="CS-102")

        students = [
            Student(name="Alice Novak", age=19, group=group_a, subjects=[math, physics]),
            Student(name="Boris Petrov", age=20, group=group_a, subjects=[math, history]),
            Student(name="Chen Li", age=21, group=group_b, subjects=[physics]),
        ]
        # Marks only for subjects each student takes
        students[0].marks = [Mark(value=9, subject=math), Mark(value=7, subject=physics)]
        students[1].marks = [Mark(value=6, subject=math), Mark(value=8, subject=history)]
        students[2].marks = [Mark(value=10, subject=physics)]

        db.add_all(students)
        db.commit()

        logger.info("✅ Data seeded successfully!")

    except Exception as e:
        logger.error(f"❌ Error seeding data: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_data()
