# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Test attempt API endpoints.

This module provides endpoints for the attempt lifecycle:
- POST /attempts - Start an attempt
- POST /attempts/{attempt_id}/submit - Submit answers for grading
- GET /attempts/{attempt_id} - Get an attempt
- GET /attempts?student_id=&test_id= - List a student's attempts at a test
- GET /tests/{test_id}/attempts - List all attempts at a test
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.api.dependencies import get_db
from learnhub.domains.assessment import AttemptService
from learnhub.domains.exceptions import (
    AlreadySubmittedError,
    EmptyTestError,
    LimitExceededError,
    NotFoundError,
)
from learnhub.models.assessment import (
    AttemptListResponse,
    AttemptResponse,
    StartAttemptRequest,
    SubmitAttemptRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_attempt_service(db: AsyncSession) -> AttemptService:
    """Create attempt service instance.

    Args:
        db: Database session.

    Returns:
        AttemptService instance.
    """
    return AttemptService(db=db)


@router.post(
    "/attempts",
    response_model=AttemptResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start attempt",
    description="Start a new attempt at a test, within the test's attempt limit.",
)
async def start_attempt(
    data: StartAttemptRequest,
    db: AsyncSession = Depends(get_db),
) -> AttemptResponse:
    """Start a new test attempt.

    Args:
        data: Test and student identifiers.
        db: Database session.

    Returns:
        The in-progress attempt.

    Raises:
        HTTPException: If test/student not found or the limit is reached.
    """
    service = _get_attempt_service(db)

    try:
        attempt = await service.start_attempt(data.test_id, data.student_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except LimitExceededError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)

    return AttemptResponse.model_validate(attempt)


@router.post(
    "/attempts/{attempt_id}/submit",
    response_model=AttemptResponse,
    summary="Submit attempt",
    description="Grade the submitted answers and complete the attempt.",
)
async def submit_attempt(
    attempt_id: int,
    data: SubmitAttemptRequest,
    db: AsyncSession = Depends(get_db),
) -> AttemptResponse:
    """Submit an attempt.

    Args:
        attempt_id: Attempt identifier.
        data: Submitted answers.
        db: Database session.

    Returns:
        The completed, graded attempt.

    Raises:
        HTTPException: If not found, already submitted or the test is empty.
    """
    service = _get_attempt_service(db)

    try:
        attempt = await service.submit_attempt(attempt_id, data.answers)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except AlreadySubmittedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    except EmptyTestError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message
        )

    return AttemptResponse.model_validate(attempt)


@router.get(
    "/attempts/{attempt_id}",
    response_model=AttemptResponse,
    summary="Get attempt",
)
async def get_attempt(
    attempt_id: int,
    db: AsyncSession = Depends(get_db),
) -> AttemptResponse:
    """Get an attempt by id."""
    service = _get_attempt_service(db)

    try:
        attempt = await service.get_attempt(attempt_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return AttemptResponse.model_validate(attempt)


@router.get(
    "/attempts",
    response_model=AttemptListResponse,
    summary="List student attempts",
)
async def list_student_attempts(
    student_id: int = Query(..., gt=0),
    test_id: int = Query(..., gt=0),
    db: AsyncSession = Depends(get_db),
) -> AttemptListResponse:
    """List a student's attempts at a test, oldest first."""
    service = _get_attempt_service(db)
    attempts = await service.list_attempts_by_student(student_id, test_id)

    return AttemptListResponse(
        attempts=[AttemptResponse.model_validate(a) for a in attempts],
        total=len(attempts),
    )


@router.get(
    "/tests/{test_id}/attempts",
    response_model=AttemptListResponse,
    summary="List test attempts",
)
async def list_test_attempts(
    test_id: int,
    db: AsyncSession = Depends(get_db),
) -> AttemptListResponse:
    """List every attempt at a test, oldest first."""
    service = _get_attempt_service(db)
    attempts = await service.list_attempts_by_test(test_id)

    return AttemptListResponse(
        attempts=[AttemptResponse.model_validate(a) for a in attempts],
        total=len(attempts),
    )
