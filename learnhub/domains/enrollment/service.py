# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for managing student course enrollments.

This module provides the EnrollmentService class for:
- Student enrollment in courses
- Enrollment lookup and listing
- Dropping an enrollment
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.domains.exceptions import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    EnrollmentCompletedError,
    EnrollmentNotFoundError,
    NotAStudentError,
    StudentNotFoundError,
)
from learnhub.infrastructure.database.models import Course, Enrollment, User
from learnhub.infrastructure.database.repositories import (
    CourseRepository,
    EnrollmentRepository,
    UserRepository,
)
from learnhub.models.common import EnrollmentStatus
from learnhub.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Service for managing student enrollments.

    New enrollments start active at 0%; afterwards only the progress
    cascade and drop_enrollment change them.

    Attributes:
        db: Async database session.
        users: User repository.
        courses: Course repository.
        enrollments: Enrollment repository.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize enrollment service.

        Args:
            db: Async database session.
        """
        self.db = db
        self.users = UserRepository(db)
        self.courses = CourseRepository(db)
        self.enrollments = EnrollmentRepository(db)

    async def enroll_student(self, student_id: int, course_id: int) -> Enrollment:
        """Enroll a student in a course.

        Args:
            student_id: Student identifier.
            course_id: Course identifier.

        Returns:
            The created enrollment.

        Raises:
            StudentNotFoundError: If student not found.
            NotAStudentError: If user is not a student.
            CourseNotFoundError: If course not found.
            AlreadyEnrolledError: If student already enrolled.
        """
        await self._get_student(student_id)
        await self._get_course(course_id)

        existing = await self.enrollments.get(student_id, course_id)
        if existing:
            raise self._already_enrolled(student_id, course_id)

        enrollment = Enrollment(
            student_id=student_id,
            course_id=course_id,
            status=EnrollmentStatus.ACTIVE.value,
            progress_percentage=0.0,
            enrolled_at=utc_now(),
            completed_at=None,
        )
        self.enrollments.add(enrollment)

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise self._already_enrolled(student_id, course_id) from e

        await self.db.refresh(enrollment)

        logger.info(
            "Enrolled student: student=%s, course=%s, enrollment=%s",
            student_id,
            course_id,
            enrollment.id,
        )

        return enrollment

    async def get_enrollment(
        self,
        student_id: int,
        course_id: int,
        for_update: bool = False,
    ) -> Enrollment:
        """Get specific enrollment details.

        Args:
            student_id: Student identifier.
            course_id: Course identifier.
            for_update: Lock the row for the rest of the transaction.

        Raises:
            EnrollmentNotFoundError: If student not enrolled.
        """
        enrollment = await self.enrollments.get(student_id, course_id, for_update=for_update)
        if not enrollment:
            raise EnrollmentNotFoundError(
                f"Enrollment not found for student {student_id} in course {course_id}",
                details={"student_id": student_id, "course_id": course_id},
            )
        return enrollment

    async def list_enrollments_by_student(
        self,
        student_id: int,
        status: str | None = None,
    ) -> list[Enrollment]:
        """List a student's enrollments, newest first.

        Args:
            student_id: Student identifier.
            status: Optional status filter (active, completed, dropped).

        Returns:
            List of enrollments.
        """
        return await self.enrollments.list_by_student(student_id, status)

    async def drop_enrollment(self, student_id: int, course_id: int) -> Enrollment:
        """Drop a student's enrollment in a course.

        Dropping an already dropped enrollment is a no-op. The row is
        locked before its status is checked, so a drop and a lesson
        completion on the same enrollment serialize.

        Args:
            student_id: Student identifier.
            course_id: Course identifier.

        Returns:
            Updated enrollment.

        Raises:
            EnrollmentNotFoundError: If student not enrolled.
            EnrollmentCompletedError: If the enrollment is completed.
        """
        enrollment = await self.get_enrollment(student_id, course_id, for_update=True)

        if enrollment.status == EnrollmentStatus.DROPPED.value:
            return enrollment

        if enrollment.status == EnrollmentStatus.COMPLETED.value:
            raise EnrollmentCompletedError(
                f"Enrollment for student {student_id} in course {course_id} "
                "is already completed",
                details={"student_id": student_id, "course_id": course_id},
            )

        enrollment.status = EnrollmentStatus.DROPPED.value

        await self.db.commit()
        await self.db.refresh(enrollment)

        logger.info(
            "Dropped enrollment: student=%s, course=%s, progress=%.2f",
            student_id,
            course_id,
            enrollment.progress_percentage,
        )

        return enrollment

    async def _get_student(self, student_id: int) -> User:
        """Get student user by ID.

        Raises:
            StudentNotFoundError: If not found.
            NotAStudentError: If not a student.
        """
        user = await self.users.get(student_id)
        if not user:
            raise StudentNotFoundError(
                f"Student with id {student_id} not found",
                details={"student_id": student_id},
            )
        if not user.is_student:
            raise NotAStudentError(
                f"User {student_id} is not a student",
                details={"student_id": student_id, "role": user.role},
            )
        return user

    async def _get_course(self, course_id: int) -> Course:
        """Get course by ID.

        Raises:
            CourseNotFoundError: If not found.
        """
        course = await self.courses.get(course_id)
        if not course:
            raise CourseNotFoundError(
                f"Course with id {course_id} not found",
                details={"course_id": course_id},
            )
        return course

    @staticmethod
    def _already_enrolled(student_id: int, course_id: int) -> AlreadyEnrolledError:
        return AlreadyEnrolledError(
            f"Student {student_id} is already enrolled in course {course_id}",
            details={"student_id": student_id, "course_id": course_id},
        )
