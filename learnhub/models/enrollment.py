# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request and response models for course enrollments."""

from pydantic import BaseModel, ConfigDict, Field

from learnhub.models.common import EnrollmentStatus, UTCDateTime


class EnrollRequest(BaseModel):
    """Request to enroll a student in a course."""

    student_id: int = Field(gt=0)
    course_id: int = Field(gt=0)


class EnrollmentResponse(BaseModel):
    """A student's enrollment in a course."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    course_id: int
    status: EnrollmentStatus
    progress_percentage: float
    enrolled_at: UTCDateTime
    completed_at: UTCDateTime | None = None


class EnrollmentListResponse(BaseModel):
    """Response for enrollment list endpoint."""

    enrollments: list[EnrollmentResponse]
    total: int
