# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request and response models for lesson progress."""

from pydantic import BaseModel, ConfigDict, Field

from learnhub.models.common import UTCDateTime


class CompleteLessonRequest(BaseModel):
    """Request to mark a lesson as completed for a student."""

    student_id: int = Field(gt=0)
    lesson_id: int = Field(gt=0)


class LessonProgressResponse(BaseModel):
    """Completion state of one lesson for one student."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    lesson_id: int
    is_completed: bool
    completed_at: UTCDateTime | None = None
    created_at: UTCDateTime


class LessonProgressListResponse(BaseModel):
    """Response for lesson progress list endpoints."""

    progress: list[LessonProgressResponse]
    total: int
