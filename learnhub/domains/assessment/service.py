# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Attempt service for starting, submitting and reading test attempts.

This module provides the AttemptService class for:
- Starting attempts under the per-test attempt cap
- Grading and completing a submission exactly once
- Reading attempts by id, by student and test, and by test
"""

import logging
from collections.abc import Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.domains.assessment.grader import grade
from learnhub.domains.assessment.ledger import AttemptLedger
from learnhub.domains.assessment.question_bank import QuestionBank
from learnhub.domains.exceptions import AlreadySubmittedError, AttemptNotFoundError
from learnhub.infrastructure.database.models import TestAttempt
from learnhub.infrastructure.database.repositories import AttemptRepository
from learnhub.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class AttemptService:
    """Service orchestrating the test attempt lifecycle.

    An attempt is in progress from start_attempt until submit_attempt
    completes it; completion is terminal.

    Attributes:
        db: Async database session.
        ledger: Attempt ledger enforcing the attempt cap.
        question_bank: Source of the question set to grade against.
        attempts: Attempt repository.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize attempt service.

        Args:
            db: Async database session.
        """
        self.db = db
        self.ledger = AttemptLedger(db)
        self.question_bank = QuestionBank(db)
        self.attempts = AttemptRepository(db)

    async def start_attempt(self, test_id: int, student_id: int) -> TestAttempt:
        """Start a new attempt at a test.

        Args:
            test_id: Test identifier.
            student_id: Student identifier.

        Returns:
            The created in-progress attempt.

        Raises:
            TestNotFoundError: If the test does not exist.
            StudentNotFoundError: If the student does not exist or is not a student.
            LimitExceededError: If the attempt cap has been reached.
        """
        return await self.ledger.start_attempt(test_id, student_id)

    async def submit_attempt(
        self,
        attempt_id: int,
        answers: Mapping[str, str],
    ) -> TestAttempt:
        """Grade and complete an attempt.

        The stored answers are replaced by the submitted map.

        Args:
            attempt_id: Attempt identifier.
            answers: Submitted answers keyed by question id as a string.

        Returns:
            The completed attempt.

        Raises:
            AttemptNotFoundError: If the attempt does not exist.
            AlreadySubmittedError: If the attempt is already completed.
            TestNotFoundError: If the owning test no longer exists.
            EmptyTestError: If the test has no questions.
        """
        attempt = await self.get_attempt(attempt_id)
        if attempt.completed_at is not None:
            raise self._already_submitted(attempt_id)

        test = await self.ledger.get_test(attempt.test_id)
        questions = await self.question_bank.get_questions(test.id)

        result = grade(questions, answers, test_id=test.id)
        is_passed = result.is_passed(test.passing_score)

        completed = await self.attempts.complete(
            attempt_id,
            answers=dict(answers),
            score=result.score,
            is_passed=is_passed,
            completed_at=utc_now(),
        )
        if not completed:
            await self.db.rollback()
            logger.warning("Concurrent submission rejected: attempt=%s", attempt_id)
            raise self._already_submitted(attempt_id)

        await self.db.commit()
        await self.db.refresh(attempt)

        logger.info(
            "Submitted attempt: attempt=%s, test=%s, student=%s, score=%.2f, passed=%s",
            attempt_id,
            attempt.test_id,
            attempt.student_id,
            result.score,
            is_passed,
        )

        return attempt

    async def get_attempt(self, attempt_id: int) -> TestAttempt:
        """Get attempt by ID.

        Raises:
            AttemptNotFoundError: If not found.
        """
        attempt = await self.attempts.get(attempt_id)
        if not attempt:
            raise AttemptNotFoundError(
                f"Test attempt with id {attempt_id} not found",
                details={"attempt_id": attempt_id},
            )
        return attempt

    async def list_attempts_by_student(
        self,
        student_id: int,
        test_id: int,
    ) -> list[TestAttempt]:
        """List a student's attempts at a test, oldest first."""
        return await self.attempts.list_by_student(student_id, test_id)

    async def list_attempts_by_test(self, test_id: int) -> list[TestAttempt]:
        """List every attempt at a test, oldest first."""
        return await self.attempts.list_by_test(test_id)

    @staticmethod
    def _already_submitted(attempt_id: int) -> AlreadySubmittedError:
        return AlreadySubmittedError(
            f"Test attempt {attempt_id} has already been submitted",
            details={"attempt_id": attempt_id},
        )
