# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson completion service.

This module provides the LessonCompletionService class for:
- Marking a lesson completed for a student (idempotent upsert)
- Cascading the completion into the enrollment's progress and status
- Listing lesson progress by student and by lesson
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.domains.exceptions import EnrollmentNotFoundError, LessonNotFoundError
from learnhub.domains.progress.cascade import ProgressCascade
from learnhub.infrastructure.database.models import Lesson, LessonProgress
from learnhub.infrastructure.database.repositories import (
    EnrollmentRepository,
    LessonProgressRepository,
    LessonRepository,
)
from learnhub.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class LessonCompletionService:
    """Service for lesson completion events.

    Attributes:
        db: Async database session.
        lessons: Lesson repository.
        enrollments: Enrollment repository.
        progress: Lesson progress repository.
        cascade: Enrollment progress cascade.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize lesson completion service.

        Args:
            db: Async database session.
        """
        self.db = db
        self.lessons = LessonRepository(db)
        self.enrollments = EnrollmentRepository(db)
        self.progress = LessonProgressRepository(db)
        self.cascade = ProgressCascade(db)

    async def complete_lesson(self, student_id: int, lesson_id: int) -> LessonProgress:
        """Mark a lesson completed and update the student's enrollment.

        The enrollment row is locked before the progress upsert so
        completions for the same (student, course) are serialized.

        Args:
            student_id: Student identifier.
            lesson_id: Lesson identifier.

        Returns:
            The created or refreshed LessonProgress.

        Raises:
            LessonNotFoundError: If the lesson does not exist.
            EnrollmentNotFoundError: If the student is not enrolled in
                the lesson's course.
        """
        lesson = await self._get_lesson(lesson_id)
        course_id = lesson.course_id

        enrollment = await self.enrollments.get(student_id, course_id, for_update=True)
        if not enrollment:
            raise EnrollmentNotFoundError(
                f"Enrollment not found for student {student_id} in course {course_id}",
                details={"student_id": student_id, "course_id": course_id},
            )

        now = utc_now()
        progress = await self.progress.mark_completed(student_id, lesson_id, now)
        await self.cascade.apply(enrollment, now=now)

        await self.db.commit()
        await self.db.refresh(progress)

        logger.info(
            "Completed lesson: student=%s, lesson=%s, course=%s, progress=%.2f, status=%s",
            student_id,
            lesson_id,
            course_id,
            enrollment.progress_percentage,
            enrollment.status,
        )

        return progress

    async def list_progress_by_student(
        self,
        student_id: int,
        course_id: int | None = None,
    ) -> list[LessonProgress]:
        """List a student's lesson progress, optionally within one course."""
        return await self.progress.list_by_student(student_id, course_id)

    async def list_progress_by_lesson(self, lesson_id: int) -> list[LessonProgress]:
        """List every student's progress on a lesson."""
        return await self.progress.list_by_lesson(lesson_id)

    async def _get_lesson(self, lesson_id: int) -> Lesson:
        """Get lesson by ID.

        Raises:
            LessonNotFoundError: If not found.
        """
        lesson = await self.lessons.get(lesson_id)
        if not lesson:
            raise LessonNotFoundError(
                f"Lesson with id {lesson_id} not found",
                details={"lesson_id": lesson_id},
            )
        return lesson
