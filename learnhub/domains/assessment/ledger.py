# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Attempt ledger: creation of test attempts under the attempt cap.

Every attempt gets a 1-based attempt_number per (test, student), backed
by a unique constraint. Two concurrent starts that read the same count
race for the same number; the loser gets an IntegrityError, rolls back
and recounts, so the number of rows never exceeds max_attempts.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.domains.exceptions import (
    LimitExceededError,
    NotAStudentError,
    StudentNotFoundError,
    TestNotFoundError,
)
from learnhub.infrastructure.database.models import Test, TestAttempt, User
from learnhub.infrastructure.database.repositories import (
    AttemptRepository,
    TestRepository,
    UserRepository,
)
from learnhub.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class AttemptLedger:
    """Gatekeeper for attempt creation.

    Attributes:
        db: Async database session.
        tests: Test repository.
        users: User repository.
        attempts: Attempt repository.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the attempt ledger.

        Args:
            db: Async database session.
        """
        self.db = db
        self.tests = TestRepository(db)
        self.users = UserRepository(db)
        self.attempts = AttemptRepository(db)

    async def start_attempt(self, test_id: int, student_id: int) -> TestAttempt:
        """Start a new attempt for a student.

        Args:
            test_id: Test identifier.
            student_id: Student identifier.

        Returns:
            The created, in-progress attempt.

        Raises:
            TestNotFoundError: If the test does not exist.
            StudentNotFoundError: If the student does not exist or is
                not a student (NotAStudentError).
            LimitExceededError: If every allowed attempt has been used.
        """
        test = await self.get_test(test_id)
        await self.get_student(student_id)

        max_attempts = test.max_attempts

        # Each IntegrityError means another start took the number we read,
        # so the count grows on every pass and the loop ends at the cap.
        for _ in range(max_attempts + 1):
            used = await self.attempts.count_for_student(test_id, student_id)
            if used >= max_attempts:
                logger.info(
                    "Attempt limit reached: test=%s, student=%s, max=%d",
                    test_id,
                    student_id,
                    max_attempts,
                )
                raise LimitExceededError(
                    f"Maximum attempts ({max_attempts}) exceeded for this test",
                    details={
                        "test_id": test_id,
                        "student_id": student_id,
                        "max_attempts": max_attempts,
                    },
                )

            attempt = TestAttempt(
                test_id=test_id,
                student_id=student_id,
                attempt_number=used + 1,
                score=None,
                answers={},
                started_at=utc_now(),
                completed_at=None,
                is_passed=None,
            )
            self.attempts.add(attempt)

            try:
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                logger.warning(
                    "Attempt number taken concurrently, retrying: test=%s, student=%s, number=%d",
                    test_id,
                    student_id,
                    used + 1,
                )
                continue

            await self.db.refresh(attempt)

            logger.info(
                "Started attempt: attempt=%s, test=%s, student=%s, number=%d/%d",
                attempt.id,
                test_id,
                student_id,
                attempt.attempt_number,
                max_attempts,
            )
            return attempt

        raise LimitExceededError(
            f"Maximum attempts ({max_attempts}) exceeded for this test",
            details={
                "test_id": test_id,
                "student_id": student_id,
                "max_attempts": max_attempts,
            },
        )

    async def count_attempts(self, test_id: int, student_id: int) -> int:
        """Count the attempts a student has used on a test."""
        return await self.attempts.count_for_student(test_id, student_id)

    async def remaining_attempts(self, test: Test, student_id: int) -> int:
        """Get how many attempts a student has left on a test.

        Args:
            test: The test.
            student_id: Student identifier.

        Returns:
            Remaining attempts, never negative.
        """
        used = await self.attempts.count_for_student(test.id, student_id)
        return max(0, test.max_attempts - used)

    async def get_test(self, test_id: int) -> Test:
        """Get test by ID.

        Raises:
            TestNotFoundError: If not found.
        """
        test = await self.tests.get(test_id)
        if not test:
            raise TestNotFoundError(
                f"Test with id {test_id} not found",
                details={"test_id": test_id},
            )
        return test

    async def get_student(self, student_id: int) -> User:
        """Get a student user by ID.

        Raises:
            StudentNotFoundError: If no user exists.
            NotAStudentError: If the user is not a student.
        """
        user = await self.users.get(student_id)
        if not user:
            raise StudentNotFoundError(
                f"Student with id {student_id} not found",
                details={"student_id": student_id},
            )
        if not user.is_student:
            raise NotAStudentError(
                f"Student with id {student_id} not found",
                details={"student_id": student_id, "role": user.role},
            )
        return user
