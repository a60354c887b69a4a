# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson progress API endpoints.

This module provides endpoints for lesson completion:
- POST /lessons/complete - Complete a lesson and update the enrollment
- GET /students/{student_id}?course_id= - List a student's lesson progress
- GET /lessons/{lesson_id} - List progress on a lesson
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.api.dependencies import get_db
from learnhub.domains.exceptions import NotFoundError
from learnhub.domains.progress import LessonCompletionService
from learnhub.models.progress import (
    CompleteLessonRequest,
    LessonProgressListResponse,
    LessonProgressResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_completion_service(db: AsyncSession) -> LessonCompletionService:
    """Create lesson completion service instance."""
    return LessonCompletionService(db=db)


@router.post(
    "/lessons/complete",
    response_model=LessonProgressResponse,
    summary="Complete lesson",
    description="Mark a lesson completed and recompute the enrollment's progress.",
)
async def complete_lesson(
    data: CompleteLessonRequest,
    db: AsyncSession = Depends(get_db),
) -> LessonProgressResponse:
    """Complete a lesson for a student.

    Args:
        data: Student and lesson identifiers.
        db: Database session.

    Returns:
        The lesson progress record.

    Raises:
        HTTPException: If the lesson or the enrollment is not found.
    """
    service = _get_completion_service(db)

    try:
        progress = await service.complete_lesson(data.student_id, data.lesson_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return LessonProgressResponse.model_validate(progress)


@router.get(
    "/students/{student_id}",
    response_model=LessonProgressListResponse,
    summary="List student progress",
)
async def list_student_progress(
    student_id: int,
    course_id: int | None = Query(None, gt=0),
    db: AsyncSession = Depends(get_db),
) -> LessonProgressListResponse:
    """List a student's lesson progress, optionally within one course."""
    service = _get_completion_service(db)
    rows = await service.list_progress_by_student(student_id, course_id)

    return LessonProgressListResponse(
        progress=[LessonProgressResponse.model_validate(p) for p in rows],
        total=len(rows),
    )


@router.get(
    "/lessons/{lesson_id}",
    response_model=LessonProgressListResponse,
    summary="List lesson progress",
)
async def list_lesson_progress(
    lesson_id: int,
    db: AsyncSession = Depends(get_db),
) -> LessonProgressListResponse:
    """List every student's progress on a lesson."""
    service = _get_completion_service(db)
    rows = await service.list_progress_by_lesson(lesson_id)

    return LessonProgressListResponse(
        progress=[LessonProgressResponse.model_validate(p) for p in rows],
        total=len(rows),
    )
