# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progress cascade: roll lesson completions up into the enrollment.

The enrollment's progress_percentage is always recomputed from the
lesson_progress rows, never incremented, so repeating a completion can
not inflate it. Status moves to completed when every lesson of the
course is complete; it is never moved back.
"""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.infrastructure.database.models import Enrollment
from learnhub.infrastructure.database.repositories import (
    LessonProgressRepository,
    LessonRepository,
)
from learnhub.models.common import EnrollmentStatus
from learnhub.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def compute_progress_percentage(completed: int, total: int) -> float:
    """Compute completion percentage of a course.

    Args:
        completed: Completed lessons of the course.
        total: Lessons in the course.

    Returns:
        Percentage in [0, 100]; 0 for a course without lessons.
    """
    if total <= 0:
        return 0.0
    return min(completed, total) * 100 / total


class ProgressCascade:
    """Recomputes an enrollment aggregate from lesson completions.

    Attributes:
        lessons: Lesson repository.
        progress: Lesson progress repository.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.lessons = LessonRepository(db)
        self.progress = LessonProgressRepository(db)

    async def apply(
        self,
        enrollment: Enrollment,
        now: datetime | None = None,
    ) -> Enrollment:
        """Recompute progress and status of an enrollment in place.

        The caller owns the transaction and should hold a lock on the
        enrollment row; nothing is committed here.

        Args:
            enrollment: Enrollment to update.
            now: Completion timestamp to use if the course completes.

        Returns:
            The updated enrollment.
        """
        total = await self.lessons.count_by_course(enrollment.course_id)
        completed = await self.progress.count_completed_in_course(
            enrollment.student_id, enrollment.course_id
        )

        enrollment.progress_percentage = compute_progress_percentage(completed, total)

        if total > 0 and completed >= total:
            if enrollment.status != EnrollmentStatus.COMPLETED.value:
                enrollment.status = EnrollmentStatus.COMPLETED.value
                enrollment.completed_at = now or utc_now()
                logger.info(
                    "Completed enrollment: student=%s, course=%s",
                    enrollment.student_id,
                    enrollment.course_id,
                )

        logger.debug(
            "Recomputed progress: student=%s, course=%s, completed=%d/%d, percentage=%.2f",
            enrollment.student_id,
            enrollment.course_id,
            completed,
            total,
            enrollment.progress_percentage,
        )

        return enrollment
