"""initial schema: groups, subjects, students, student_subjects, marks

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "groups",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
    )
    op.create_index("ix_groups_id", "groups", ["id"])
    op.create_index("ix_groups_name", "groups", ["name"], unique=True)

    op.create_table(
        "subjects",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
    )
    op.create_index("ix_subjects_id", "subjects", ["id"])
    op.create_index("ix_subjects_name", "subjects", ["name"], unique=True)

    op.create_table(
        "students",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("group_id", sa.Integer(), sa.ForeignKey("groups.id", ondelete="SET NULL"), nullable=True),
    )
    op.create_index("ix_students_id", "students", ["id"])
    op.create_index("ix_students_group_id", "students", ["group_id"])

    op.create_table(
        "student_subjects",
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("students.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("subject_id", sa.Integer(), sa.ForeignKey("subjects.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "marks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("value", sa.Integer(), nullable=False),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.Column("subject_id", sa.Integer(), sa.ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False),
    )
    op.create_index("ix_marks_id", "marks", ["id"])
    op.create_index("ix_marks_value", "marks", ["value"])
    op.create_index("ix_marks_student_id", "marks", ["student_id"])
    op.create_index("ix_marks_subject_id", "marks", ["subject_id"])


def downgrade() -> None:
    op.drop_table("marks")
    op.drop_table("student_subjects")
    op.drop_table("students")
    op.drop_table("subjects")
    op.drop_table("groups")
