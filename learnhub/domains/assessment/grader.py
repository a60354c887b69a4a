# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Answer grading for test attempts.

Grading is a pure function of the question set and the submitted answer
map: an answer is correct when it equals the question's correct_answer
after trimming surrounding whitespace and ignoring case. There is no
partial credit. The pass threshold is applied by the caller.

Example:
    >>> result = grade(questions, {"1": " Paris ", "2": "TRUE"})
    >>> result.score
    100.0
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from learnhub.domains.exceptions import EmptyTestError

logger = logging.getLogger(__name__)


class GradableQuestion(Protocol):
    """The question fields grading needs."""

    id: int
    correct_answer: str
    points: int


@dataclass(frozen=True)
class GradeResult:
    """Outcome of grading one submission.

    Attributes:
        score: Percentage of available points earned, in [0, 100].
        earned_points: Points of the correctly answered questions.
        total_points: Points of all questions.
        correct_question_ids: Ids of the correctly answered questions.
        ignored_keys: Submitted keys that match no question.
    """

    score: float
    earned_points: int
    total_points: int
    correct_question_ids: tuple[int, ...]
    ignored_keys: tuple[str, ...] = ()

    def is_passed(self, passing_score: float) -> bool:
        """Apply a pass threshold to the score."""
        return self.score >= passing_score


def normalize_answer(answer: str) -> str:
    """Normalize an answer for comparison."""
    return answer.strip().casefold()


def grade(
    questions: Sequence[GradableQuestion],
    answers: Mapping[str, str],
    test_id: int | None = None,
) -> GradeResult:
    """Grade a submitted answer map against a question set.

    Args:
        questions: The test's questions.
        answers: Submitted answers keyed by question id as a string.
            Missing questions are graded incorrect.
        test_id: Owning test, used in error messages and logs.

    Returns:
        GradeResult with the score and per-question breakdown.

    Raises:
        EmptyTestError: If the question set is empty.
    """
    if not questions:
        raise EmptyTestError(
            f"No questions found for test {test_id}",
            details={"test_id": test_id},
        )

    total_points = 0
    earned_points = 0
    correct: list[int] = []

    for question in questions:
        total_points += question.points
        submitted = answers.get(str(question.id))
        if submitted is None:
            continue
        if normalize_answer(submitted) == normalize_answer(question.correct_answer):
            earned_points += question.points
            correct.append(question.id)

    known_keys = {str(question.id) for question in questions}
    ignored = tuple(sorted(key for key in answers if key not in known_keys))
    if ignored:
        logger.info(
            "Ignoring answers for unknown questions: test=%s, keys=%s",
            test_id,
            ", ".join(ignored),
        )

    score = earned_points * 100 / total_points

    return GradeResult(
        score=score,
        earned_points=earned_points,
        total_points=total_points,
        correct_question_ids=tuple(correct),
        ignored_keys=ignored,
    )
