# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for database models.

Tests model definitions, constraints, and helper properties.
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, UniqueConstraint

from learnhub.infrastructure.database.models import (
    Base,
    Course,
    Enrollment,
    Lesson,
    LessonProgress,
    Question,
    Test,
    TestAttempt,
    TimestampMixin,
    User,
)


def _constraint_names(model, kind) -> set[str]:
    return {c.name for c in model.__table__.constraints if isinstance(c, kind)}


class TestBase:
    """Test base model functionality."""

    def test_base_inherits_declarative_base(self):
        """Verify Base is a declarative base."""
        assert hasattr(Base, "metadata")
        assert hasattr(Base, "registry")

    def test_timestamp_mixin_has_created_at(self):
        """Verify TimestampMixin has created_at field."""
        assert hasattr(TimestampMixin, "created_at")
        assert hasattr(TimestampMixin, "updated_at")

    def test_all_tables_registered(self):
        assert set(Base.metadata.tables) == {
            "users",
            "courses",
            "lessons",
            "tests",
            "questions",
            "test_attempts",
            "enrollments",
            "lesson_progress",
        }


class TestUserModel:
    """Test the User model."""

    def test_is_student(self):
        assert User(role="student").is_student is True
        assert User(role="instructor").is_student is False

    def test_full_name(self):
        user = User(first_name="Ada", last_name="Lovelace")

        assert user.full_name == "Ada Lovelace"

    def test_role_constraint(self):
        assert "ck_users_role" in _constraint_names(User, CheckConstraint)


class TestAssessmentModels:
    """Test tests, questions and attempts."""

    def test_test_defaults(self):
        assert Test.__table__.c.max_attempts.default.arg == 3
        assert Test.__table__.c.passing_score.default.arg == 70.0

    def test_question_points_default(self):
        assert Question.__table__.c.points.default.arg == 1

    def test_attempt_number_is_unique_per_student_and_test(self):
        assert "uq_test_attempts_test_student_number" in _constraint_names(
            TestAttempt, UniqueConstraint
        )

    def test_attempt_completion_constraint(self):
        assert "ck_test_attempts_completion_atomic" in _constraint_names(
            TestAttempt, CheckConstraint
        )

    def test_attempt_is_completed(self):
        attempt = TestAttempt(completed_at=None)
        assert attempt.is_completed is False

        attempt.completed_at = datetime.now(timezone.utc)
        assert attempt.is_completed is True


class TestProgressModels:
    """Test courses, lessons, enrollments and lesson progress."""

    def test_lesson_belongs_to_course(self):
        fk = next(iter(Lesson.__table__.c.course_id.foreign_keys))
        assert fk.column.table is Course.__table__

    def test_course_lessons_are_never_loaded_implicitly(self):
        assert Course.lessons.property.lazy == "raise"

    def test_enrollment_unique_per_student_and_course(self):
        assert "uq_enrollments_student_course" in _constraint_names(
            Enrollment, UniqueConstraint
        )

    def test_enrollment_defaults(self):
        assert Enrollment.__table__.c.status.default.arg == "active"
        assert Enrollment.__table__.c.progress_percentage.default.arg == 0.0

    def test_progress_percentage_range_constraint(self):
        assert "ck_enrollments_progress_percentage_range" in _constraint_names(
            Enrollment, CheckConstraint
        )

    def test_lesson_progress_unique_per_student_and_lesson(self):
        assert "uq_lesson_progress_student_lesson" in _constraint_names(
            LessonProgress, UniqueConstraint
        )
