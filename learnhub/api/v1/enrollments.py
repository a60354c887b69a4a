# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment API endpoints.

Student enrollment endpoints:
- POST /enrollments - Enroll a student in a course
- GET /enrollments/{student_id}/{course_id} - Get enrollment details
- POST /enrollments/{student_id}/{course_id}/drop - Drop an enrollment
- GET /students/{student_id}/enrollments - List a student's enrollments
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.api.dependencies import get_db
from learnhub.domains.enrollment import EnrollmentService
from learnhub.domains.exceptions import (
    AlreadyEnrolledError,
    EnrollmentCompletedError,
    InvalidRoleError,
    NotFoundError,
)
from learnhub.models.common import EnrollmentStatus
from learnhub.models.enrollment import (
    EnrollmentListResponse,
    EnrollmentResponse,
    EnrollRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_enrollment_service(db: AsyncSession) -> EnrollmentService:
    """Create enrollment service instance."""
    return EnrollmentService(db=db)


@router.post(
    "/enrollments",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll student",
    description="Enroll a student in a course.",
)
async def enroll_student(
    data: EnrollRequest,
    db: AsyncSession = Depends(get_db),
) -> EnrollmentResponse:
    """Enroll a student in a course.

    Args:
        data: Enrollment request.
        db: Database session.

    Returns:
        Enrollment response.

    Raises:
        HTTPException: If the user is not a student, the student or course
            is not found, or the student is already enrolled.
    """
    logger.info(
        "Enrolling student: student=%s, course=%s",
        data.student_id,
        data.course_id,
    )

    service = _get_enrollment_service(db)

    # InvalidRoleError first: a non-student is also a StudentNotFoundError
    try:
        enrollment = await service.enroll_student(data.student_id, data.course_id)
    except InvalidRoleError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except AlreadyEnrolledError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)

    return EnrollmentResponse.model_validate(enrollment)


@router.get(
    "/enrollments/{student_id}/{course_id}",
    response_model=EnrollmentResponse,
    summary="Get enrollment",
)
async def get_enrollment(
    student_id: int,
    course_id: int,
    db: AsyncSession = Depends(get_db),
) -> EnrollmentResponse:
    """Get a student's enrollment in a course."""
    service = _get_enrollment_service(db)

    try:
        enrollment = await service.get_enrollment(student_id, course_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return EnrollmentResponse.model_validate(enrollment)


@router.post(
    "/enrollments/{student_id}/{course_id}/drop",
    response_model=EnrollmentResponse,
    summary="Drop enrollment",
)
async def drop_enrollment(
    student_id: int,
    course_id: int,
    db: AsyncSession = Depends(get_db),
) -> EnrollmentResponse:
    """Drop a student's enrollment in a course."""
    service = _get_enrollment_service(db)

    try:
        enrollment = await service.drop_enrollment(student_id, course_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except EnrollmentCompletedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)

    return EnrollmentResponse.model_validate(enrollment)


@router.get(
    "/students/{student_id}/enrollments",
    response_model=EnrollmentListResponse,
    summary="List student enrollments",
)
async def list_student_enrollments(
    student_id: int,
    status_filter: EnrollmentStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
) -> EnrollmentListResponse:
    """List a student's enrollments, newest first."""
    service = _get_enrollment_service(db)
    enrollments = await service.list_enrollments_by_student(
        student_id,
        status=status_filter.value if status_filter else None,
    )

    return EnrollmentListResponse(
        enrollments=[EnrollmentResponse.model_validate(e) for e in enrollments],
        total=len(enrollments),
    )
