# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request and response models for test attempts."""

from pydantic import BaseModel, ConfigDict, Field

from learnhub.models.common import UTCDateTime


class StartAttemptRequest(BaseModel):
    """Request to start a new attempt at a test."""

    test_id: int = Field(gt=0)
    student_id: int = Field(gt=0)


class SubmitAttemptRequest(BaseModel):
    """Submitted answers keyed by question id."""

    answers: dict[str, str] = Field(
        default_factory=dict,
        description="Map of question id (as string) to the submitted answer",
    )


class AttemptResponse(BaseModel):
    """A test attempt, in progress or completed."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    test_id: int
    student_id: int
    attempt_number: int
    score: float | None = None
    answers: dict[str, str] = Field(default_factory=dict)
    started_at: UTCDateTime
    completed_at: UTCDateTime | None = None
    is_passed: bool | None = None


class AttemptListResponse(BaseModel):
    """Response for attempt list endpoints."""

    attempts: list[AttemptResponse]
    total: int
