# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial schema: users, courses, lessons, tests, questions, attempts,
enrollments and lesson progress.

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-01-30
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create all engine tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint("role IN ('student', 'instructor')", name="ck_users_role"),
    )

    op.create_table(
        "courses",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("instructor_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_courses"),
        sa.ForeignKeyConstraint(
            ["instructor_id"], ["users.id"], name="fk_courses_instructor_id_users"
        ),
        sa.CheckConstraint(
            "status IN ('draft', 'published', 'archived')", name="ck_courses_status"
        ),
    )
    op.create_index("ix_courses_instructor_id", "courses", ["instructor_id"])

    op.create_table(
        "lessons",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("lesson_type", sa.String(20), nullable=False, server_default="text"),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("video_url", sa.String(1024), nullable=True),
        sa.Column("document_url", sa.String(1024), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_lessons"),
        sa.ForeignKeyConstraint(
            ["course_id"], ["courses.id"], name="fk_lessons_course_id_courses"
        ),
        sa.CheckConstraint(
            "lesson_type IN ('video', 'text', 'document', 'mixed')",
            name="ck_lessons_lesson_type",
        ),
    )
    op.create_index("ix_lessons_course_id", "lessons", ["course_id"])

    op.create_table(
        "tests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("time_limit_minutes", sa.Integer(), nullable=True),
        sa.Column("max_attempts", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("passing_score", sa.Float(), nullable=False, server_default="70"),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_tests"),
        sa.ForeignKeyConstraint(
            ["course_id"], ["courses.id"], name="fk_tests_course_id_courses"
        ),
        sa.CheckConstraint("max_attempts > 0", name="ck_tests_max_attempts_positive"),
        sa.CheckConstraint(
            "passing_score >= 0 AND passing_score <= 100",
            name="ck_tests_passing_score_range",
        ),
    )
    op.create_index("ix_tests_course_id", "tests", ["course_id"])

    op.create_table(
        "questions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("test_id", sa.Integer(), nullable=False),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column("question_type", sa.String(20), nullable=False),
        sa.Column("options", JSON, nullable=True),
        sa.Column("correct_answer", sa.Text(), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_questions"),
        sa.ForeignKeyConstraint(
            ["test_id"], ["tests.id"], name="fk_questions_test_id_tests"
        ),
        sa.CheckConstraint("points > 0", name="ck_questions_points_positive"),
        sa.CheckConstraint(
            "question_type IN ('multiple_choice', 'true_false', 'short_answer')",
            name="ck_questions_question_type",
        ),
    )
    op.create_index("ix_questions_test_id", "questions", ["test_id"])

    op.create_table(
        "test_attempts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("test_id", sa.Integer(), nullable=False),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("attempt_number", sa.Integer(), nullable=False),
        sa.Column("score", sa.Float(), nullable=True),
        sa.Column("answers", JSON, nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_passed", sa.Boolean(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_test_attempts"),
        sa.ForeignKeyConstraint(
            ["test_id"], ["tests.id"], name="fk_test_attempts_test_id_tests"
        ),
        sa.ForeignKeyConstraint(
            ["student_id"], ["users.id"], name="fk_test_attempts_student_id_users"
        ),
        sa.UniqueConstraint(
            "test_id", "student_id", "attempt_number",
            name="uq_test_attempts_test_student_number",
        ),
        sa.CheckConstraint(
            "attempt_number > 0", name="ck_test_attempts_attempt_number_positive"
        ),
        sa.CheckConstraint(
            "(score IS NULL AND is_passed IS NULL AND completed_at IS NULL) OR "
            "(score IS NOT NULL AND is_passed IS NOT NULL AND completed_at IS NOT NULL)",
            name="ck_test_attempts_completion_atomic",
        ),
    )
    op.create_index("ix_test_attempts_test_id", "test_attempts", ["test_id"])
    op.create_index("ix_test_attempts_student_id", "test_attempts", ["student_id"])

    op.create_table(
        "enrollments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("progress_percentage", sa.Float(), nullable=False, server_default="0"),
        sa.Column("enrolled_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_enrollments"),
        sa.ForeignKeyConstraint(
            ["student_id"], ["users.id"], name="fk_enrollments_student_id_users"
        ),
        sa.ForeignKeyConstraint(
            ["course_id"], ["courses.id"], name="fk_enrollments_course_id_courses"
        ),
        sa.UniqueConstraint(
            "student_id", "course_id", name="uq_enrollments_student_course"
        ),
        sa.CheckConstraint(
            "status IN ('active', 'completed', 'dropped')", name="ck_enrollments_status"
        ),
        sa.CheckConstraint(
            "progress_percentage >= 0 AND progress_percentage <= 100",
            name="ck_enrollments_progress_percentage_range",
        ),
    )
    op.create_index("ix_enrollments_student_id", "enrollments", ["student_id"])
    op.create_index("ix_enrollments_course_id", "enrollments", ["course_id"])

    op.create_table(
        "lesson_progress",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("lesson_id", sa.Integer(), nullable=False),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_lesson_progress"),
        sa.ForeignKeyConstraint(
            ["student_id"], ["users.id"], name="fk_lesson_progress_student_id_users"
        ),
        sa.ForeignKeyConstraint(
            ["lesson_id"], ["lessons.id"], name="fk_lesson_progress_lesson_id_lessons"
        ),
        sa.UniqueConstraint(
            "student_id", "lesson_id", name="uq_lesson_progress_student_lesson"
        ),
    )
    op.create_index("ix_lesson_progress_student_id", "lesson_progress", ["student_id"])
    op.create_index("ix_lesson_progress_lesson_id", "lesson_progress", ["lesson_id"])


def downgrade() -> None:
    """Drop all engine tables."""
    op.drop_table("lesson_progress")
    op.drop_table("enrollments")
    op.drop_table("test_attempts")
    op.drop_table("questions")
    op.drop_table("tests")
    op.drop_table("lessons")
    op.drop_table("courses")
    op.drop_table("users")
