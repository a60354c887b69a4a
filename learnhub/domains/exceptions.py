# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Custom exceptions for the assessment and progress engine.

This module defines the exception hierarchy for engine operations:
- EngineError: Base exception for all engine errors
- NotFoundError: A referenced entity does not exist
- LimitExceededError: The attempt cap for a test has been reached
- AlreadySubmittedError: A completed attempt was submitted again
- EmptyTestError: A test with no questions cannot be graded
- InvalidRoleError: The user does not have the required role
- AlreadyEnrolledError: The student is already enrolled in the course
- EnrollmentCompletedError: A completed enrollment cannot be dropped
"""

from typing import Any


class EngineError(Exception):
    """Base exception for all engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with the offending identifiers.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize engine error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class NotFoundError(EngineError):
    """Raised when a referenced entity does not exist."""

    pass


class TestNotFoundError(NotFoundError):
    """Raised when a test is not found."""

    __test__ = False


class StudentNotFoundError(NotFoundError):
    """Raised when a student is not found."""

    pass


class AttemptNotFoundError(NotFoundError):
    """Raised when a test attempt is not found."""

    pass


class LessonNotFoundError(NotFoundError):
    """Raised when a lesson is not found."""

    pass


class CourseNotFoundError(NotFoundError):
    """Raised when a course is not found."""

    pass


class EnrollmentNotFoundError(NotFoundError):
    """Raised when a student has no enrollment in a course."""

    pass


class LimitExceededError(EngineError):
    """Raised when a student has used every attempt allowed for a test."""

    pass


class AlreadySubmittedError(EngineError):
    """Raised when an already completed attempt is submitted again."""

    pass


class EmptyTestError(EngineError):
    """Raised when grading a test that has no questions."""

    pass


class InvalidRoleError(EngineError):
    """Raised when a user does not have the role an operation requires."""

    pass


class NotAStudentError(StudentNotFoundError, InvalidRoleError):
    """Raised when the user exists but is not a student.

    Callers that only know about missing students see a StudentNotFoundError;
    callers that care about roles can catch InvalidRoleError.
    """

    pass


class AlreadyEnrolledError(EngineError):
    """Raised when a student is already enrolled in a course."""

    pass


class EnrollmentCompletedError(EngineError):
    """Raised when dropping an enrollment that is already completed."""

    pass
