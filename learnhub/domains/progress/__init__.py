# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progress domain package.

This package provides lesson completion and the cascade that keeps each
enrollment's progress percentage and status in step with it.
"""

from learnhub.domains.progress.cascade import ProgressCascade, compute_progress_percentage
from learnhub.domains.progress.service import LessonCompletionService

__all__ = [
    "LessonCompletionService",
    "ProgressCascade",
    "compute_progress_percentage",
]
