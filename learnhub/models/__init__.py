# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic request and response models for the LearnHub API."""

from learnhub.models.assessment import (
    AttemptListResponse,
    AttemptResponse,
    StartAttemptRequest,
    SubmitAttemptRequest,
)
from learnhub.models.common import EnrollmentStatus, QuestionType, UserRole
from learnhub.models.enrollment import (
    EnrollmentListResponse,
    EnrollmentResponse,
    EnrollRequest,
)
from learnhub.models.progress import (
    CompleteLessonRequest,
    LessonProgressListResponse,
    LessonProgressResponse,
)

__all__ = [
    "AttemptListResponse",
    "AttemptResponse",
    "StartAttemptRequest",
    "SubmitAttemptRequest",
    "EnrollmentStatus",
    "QuestionType",
    "UserRole",
    "EnrollmentListResponse",
    "EnrollmentResponse",
    "EnrollRequest",
    "CompleteLessonRequest",
    "LessonProgressListResponse",
    "LessonProgressResponse",
]
