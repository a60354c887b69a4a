# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessment domain package.

This package provides the test attempt lifecycle:
- AttemptLedger: attempt creation under the attempt cap
- Grader: pure scoring of submitted answers
- AttemptService: start, submit and read attempts
"""

from learnhub.domains.assessment.grader import GradeResult, grade, normalize_answer
from learnhub.domains.assessment.ledger import AttemptLedger
from learnhub.domains.assessment.question_bank import QuestionBank
from learnhub.domains.assessment.service import AttemptService

__all__ = [
    "AttemptLedger",
    "AttemptService",
    "GradeResult",
    "QuestionBank",
    "grade",
    "normalize_answer",
]
