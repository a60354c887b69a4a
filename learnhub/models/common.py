# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared enumerations mirrored by the database check constraints."""

from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator

from learnhub.utils.datetime import ensure_utc


class UserRole(str, Enum):
    """Role of a platform user."""

    STUDENT = "student"
    INSTRUCTOR = "instructor"


class EnrollmentStatus(str, Enum):
    """Lifecycle status of an enrollment."""

    ACTIVE = "active"
    COMPLETED = "completed"
    DROPPED = "dropped"


class QuestionType(str, Enum):
    """Supported question types."""

    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    SHORT_ANSWER = "short_answer"


# Datetimes read back from SQLite are naive; responses are always UTC-aware.
UTCDateTime = Annotated[datetime, AfterValidator(ensure_utc)]
