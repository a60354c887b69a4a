# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Modules:
    attempts: Test attempt endpoints (start, submit, read).
    progress: Lesson completion and progress endpoints.
    enrollments: Course enrollment endpoints.
"""

from fastapi import APIRouter

from learnhub.api.v1 import attempts, enrollments, progress

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(attempts.router, tags=["Attempts"])
router.include_router(progress.router, prefix="/progress", tags=["Progress"])
router.include_router(enrollments.router, tags=["Enrollments"])

__all__ = ["router"]
