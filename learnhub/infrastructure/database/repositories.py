# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Repositories over the LearnHub schema.

Each repository wraps the AsyncSession handed to the owning service and
exposes the narrow set of queries the engine needs. Repositories never
commit; the service that owns the unit of work does.

Example:
    attempts = AttemptRepository(db)
    used = await attempts.count_for_student(test_id=7, student_id=3)
"""

from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.infrastructure.database.models import (
    Course,
    Enrollment,
    Lesson,
    LessonProgress,
    Question,
    Test,
    TestAttempt,
    User,
)


class TestRepository:
    """Read access to tests."""

    __test__ = False

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, test_id: int) -> Test | None:
        result = await self.db.execute(select(Test).where(Test.id == test_id))
        return result.scalar_one_or_none()


class QuestionRepository:
    """Read access to the questions of a test."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_by_test(self, test_id: int) -> list[Question]:
        """List a test's questions in presentation order."""
        query = (
            select(Question)
            .where(Question.test_id == test_id)
            .order_by(Question.order_index, Question.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())


class UserRepository:
    """Read access to users."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, user_id: int) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()


class CourseRepository:
    """Read access to courses."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, course_id: int) -> Course | None:
        result = await self.db.execute(select(Course).where(Course.id == course_id))
        return result.scalar_one_or_none()


class LessonRepository:
    """Read access to lessons."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, lesson_id: int) -> Lesson | None:
        result = await self.db.execute(select(Lesson).where(Lesson.id == lesson_id))
        return result.scalar_one_or_none()

    async def count_by_course(self, course_id: int) -> int:
        query = (
            select(func.count())
            .select_from(Lesson)
            .where(Lesson.course_id == course_id)
        )
        result = await self.db.execute(query)
        return result.scalar_one()


class EnrollmentRepository:
    """Access to enrollments keyed by (student, course)."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(
        self,
        student_id: int,
        course_id: int,
        for_update: bool = False,
    ) -> Enrollment | None:
        """Get the enrollment of a student in a course.

        Args:
            student_id: Student identifier.
            course_id: Course identifier.
            for_update: Lock the row until the transaction ends and reload
                it over any copy already in the session. SQLite has no row
                locks and ignores the lock.

        Returns:
            Enrollment if found, None otherwise.
        """
        query = select(Enrollment).where(
            Enrollment.student_id == student_id,
            Enrollment.course_id == course_id,
        )
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)

        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_by_student(
        self,
        student_id: int,
        status: str | None = None,
    ) -> list[Enrollment]:
        query = select(Enrollment).where(Enrollment.student_id == student_id)
        if status:
            query = query.where(Enrollment.status == status)
        query = query.order_by(Enrollment.enrolled_at.desc(), Enrollment.id.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    def add(self, enrollment: Enrollment) -> None:
        self.db.add(enrollment)


class AttemptRepository:
    """Access to test attempts."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, attempt_id: int) -> TestAttempt | None:
        result = await self.db.execute(
            select(TestAttempt).where(TestAttempt.id == attempt_id)
        )
        return result.scalar_one_or_none()

    async def count_for_student(self, test_id: int, student_id: int) -> int:
        """Count every attempt (in progress or completed) a student has made."""
        query = (
            select(func.count())
            .select_from(TestAttempt)
            .where(
                TestAttempt.test_id == test_id,
                TestAttempt.student_id == student_id,
            )
        )
        result = await self.db.execute(query)
        return result.scalar_one()

    async def list_by_student(self, student_id: int, test_id: int) -> list[TestAttempt]:
        query = (
            select(TestAttempt)
            .where(
                TestAttempt.student_id == student_id,
                TestAttempt.test_id == test_id,
            )
            .order_by(TestAttempt.started_at, TestAttempt.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_by_test(self, test_id: int) -> list[TestAttempt]:
        query = (
            select(TestAttempt)
            .where(TestAttempt.test_id == test_id)
            .order_by(TestAttempt.started_at, TestAttempt.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    def add(self, attempt: TestAttempt) -> None:
        self.db.add(attempt)

    async def complete(
        self,
        attempt_id: int,
        answers: dict[str, str],
        score: float,
        is_passed: bool,
        completed_at: datetime,
    ) -> bool:
        """Write the terminal state of an attempt if it is still in progress.

        The completed_at IS NULL guard makes the read-then-write of the
        submission a single statement.

        Args:
            attempt_id: Attempt identifier.
            answers: Submitted answer map, stored as given.
            score: Graded score in [0, 100].
            is_passed: Pass verdict.
            completed_at: Completion timestamp.

        Returns:
            True if this call completed the attempt, False if it was
            already completed.
        """
        stmt = (
            update(TestAttempt)
            .where(
                TestAttempt.id == attempt_id,
                TestAttempt.completed_at.is_(None),
            )
            .values(
                answers=answers,
                score=score,
                is_passed=is_passed,
                completed_at=completed_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1


class LessonProgressRepository:
    """Access to per-student lesson completion rows."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, student_id: int, lesson_id: int) -> LessonProgress | None:
        query = select(LessonProgress).where(
            LessonProgress.student_id == student_id,
            LessonProgress.lesson_id == lesson_id,
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def mark_completed(
        self,
        student_id: int,
        lesson_id: int,
        completed_at: datetime,
    ) -> LessonProgress:
        """Upsert the progress row for (student, lesson) as completed.

        An existing row is updated in place, refreshing completed_at.
        The row is flushed so aggregate queries in the same transaction
        see it.

        Args:
            student_id: Student identifier.
            lesson_id: Lesson identifier.
            completed_at: Completion timestamp.

        Returns:
            The created or updated LessonProgress.
        """
        progress = await self.get(student_id, lesson_id)
        if progress is None:
            progress = LessonProgress(
                student_id=student_id,
                lesson_id=lesson_id,
                is_completed=True,
                completed_at=completed_at,
            )
            self.db.add(progress)
        else:
            progress.is_completed = True
            progress.completed_at = completed_at

        await self.db.flush()
        return progress

    async def count_completed_in_course(self, student_id: int, course_id: int) -> int:
        """Count a student's completed lessons that belong to a course."""
        query = (
            select(func.count(LessonProgress.id))
            .join(Lesson, Lesson.id == LessonProgress.lesson_id)
            .where(
                LessonProgress.student_id == student_id,
                LessonProgress.is_completed.is_(True),
                Lesson.course_id == course_id,
            )
        )
        result = await self.db.execute(query)
        return result.scalar_one()

    async def list_by_student(
        self,
        student_id: int,
        course_id: int | None = None,
    ) -> list[LessonProgress]:
        query = select(LessonProgress).where(LessonProgress.student_id == student_id)
        if course_id is not None:
            query = query.join(Lesson, Lesson.id == LessonProgress.lesson_id).where(
                Lesson.course_id == course_id
            )
        query = query.order_by(LessonProgress.created_at, LessonProgress.id)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_by_lesson(self, lesson_id: int) -> list[LessonProgress]:
        query = (
            select(LessonProgress)
            .where(LessonProgress.lesson_id == lesson_id)
            .order_by(LessonProgress.created_at, LessonProgress.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())
