# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Read-only access to the ordered question set of a test."""

from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.infrastructure.database.models import Question
from learnhub.infrastructure.database.repositories import QuestionRepository


class QuestionBank:
    """Ordered question sets for grading.

    Attributes:
        questions: Question repository.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.questions = QuestionRepository(db)

    async def get_questions(self, test_id: int) -> list[Question]:
        """Get a test's questions ordered by order_index.

        Args:
            test_id: Test identifier.

        Returns:
            The questions, possibly empty.
        """
        return await self.questions.list_by_test(test_id)
