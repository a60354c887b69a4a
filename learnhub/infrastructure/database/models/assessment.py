# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessment models: tests, questions and test attempts.

A TestAttempt is either in progress (completed_at is NULL) or completed.
score, is_passed and completed_at are written together, exactly once, by
the submission path; the attempt is immutable afterwards.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from learnhub.infrastructure.database.models.base import Base, JSONType, TimestampMixin
from learnhub.utils.datetime import utc_now


class Test(Base, TimestampMixin):
    """A graded test attached to a course."""

    __test__ = False
    __tablename__ = "tests"
    __table_args__ = (
        CheckConstraint("max_attempts > 0", name="max_attempts_positive"),
        CheckConstraint(
            "passing_score >= 0 AND passing_score <= 100", name="passing_score_range"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    time_limit_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    passing_score: Mapped[float] = mapped_column(Float, nullable=False, default=70.0)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    questions: Mapped[list["Question"]] = relationship(
        back_populates="test",
        order_by="Question.order_index",
        lazy="raise",
    )


class Question(Base):
    """A question belonging to a test."""

    __tablename__ = "questions"
    __table_args__ = (
        CheckConstraint("points > 0", name="points_positive"),
        CheckConstraint(
            "question_type IN ('multiple_choice', 'true_false', 'short_answer')",
            name="question_type",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    test_id: Mapped[int] = mapped_column(
        ForeignKey("tests.id"), nullable=False, index=True
    )
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    question_type: Mapped[str] = mapped_column(String(20), nullable=False)
    # JSON array of option strings for multiple choice
    options: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)
    correct_answer: Mapped[str] = mapped_column(Text, nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    test: Mapped[Test] = relationship(back_populates="questions", lazy="raise")


class TestAttempt(Base):
    """One student's attempt at a test.

    attempt_number is 1-based per (test, student); the unique constraint
    turns a concurrent over-allocation into an IntegrityError instead of
    an extra row.
    """

    __test__ = False
    __tablename__ = "test_attempts"
    __table_args__ = (
        UniqueConstraint(
            "test_id", "student_id", "attempt_number",
            name="uq_test_attempts_test_student_number",
        ),
        CheckConstraint("attempt_number > 0", name="attempt_number_positive"),
        CheckConstraint(
            "(score IS NULL AND is_passed IS NULL AND completed_at IS NULL) OR "
            "(score IS NOT NULL AND is_passed IS NOT NULL AND completed_at IS NOT NULL)",
            name="completion_atomic",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    test_id: Mapped[int] = mapped_column(
        ForeignKey("tests.id"), nullable=False, index=True
    )
    student_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    attempt_number: Mapped[int] = mapped_column(Integer, nullable=False)
    score: Mapped[float | None] = mapped_column(Float, nullable=True)
    # question id (as string) -> submitted answer
    answers: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_passed: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    @property
    def is_completed(self) -> bool:
        """Whether the attempt has been submitted and graded."""
        return self.completed_at is not None
