# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models for LearnHub.

Importing this package registers every table on Base.metadata.
"""

from learnhub.infrastructure.database.models.assessment import Question, Test, TestAttempt
from learnhub.infrastructure.database.models.base import Base, TimestampMixin
from learnhub.infrastructure.database.models.course import Course, Lesson
from learnhub.infrastructure.database.models.enrollment import Enrollment, LessonProgress
from learnhub.infrastructure.database.models.user import User

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "Course",
    "Lesson",
    "Test",
    "Question",
    "TestAttempt",
    "Enrollment",
    "LessonProgress",
]
