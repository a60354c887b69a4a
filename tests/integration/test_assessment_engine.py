# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for attempts, grading and the progress cascade.

These run the domain services against a real database so the unique
constraints, the conditional completion update and the aggregate
queries are exercised as deployed.
"""

import pytest
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from learnhub.domains.assessment import AttemptService
from learnhub.domains.enrollment import EnrollmentService
from learnhub.domains.exceptions import (
    AlreadyEnrolledError,
    AlreadySubmittedError,
    AttemptNotFoundError,
    EmptyTestError,
    EnrollmentCompletedError,
    EnrollmentNotFoundError,
    LimitExceededError,
    NotAStudentError,
)
from learnhub.domains.progress import LessonCompletionService, ProgressCascade
from learnhub.infrastructure.database.models import (
    Enrollment,
    Lesson,
    LessonProgress,
    TestAttempt,
)
from learnhub.infrastructure.database.repositories import AttemptRepository
from learnhub.utils.datetime import utc_now

pytestmark = pytest.mark.integration


class TestAttemptLifecycle:
    """Attempts against a two-question test (10 points each, pass at 70)."""

    @pytest.mark.asyncio
    async def test_all_correct_passes(self, db_session, seed):
        student = await seed.user()
        course = await seed.course()
        test = await seed.test(course, questions=[("Paris", 10), ("4", 10)])
        q1, q2 = await seed.question_ids(test.id)
        service = AttemptService(db_session)

        attempt = await service.start_attempt(test.id, student.id)
        submitted = await service.submit_attempt(
            attempt.id, {str(q1): "paris", str(q2): " 4 "}
        )

        assert submitted.score == 100.0
        assert submitted.is_passed is True
        assert submitted.completed_at is not None
        assert submitted.answers == {str(q1): "paris", str(q2): " 4 "}

    @pytest.mark.asyncio
    async def test_half_correct_fails(self, db_session, seed):
        student = await seed.user()
        course = await seed.course()
        test = await seed.test(course, questions=[("Paris", 10), ("4", 10)])
        q1, q2 = await seed.question_ids(test.id)
        service = AttemptService(db_session)

        attempt = await service.start_attempt(test.id, student.id)
        submitted = await service.submit_attempt(
            attempt.id, {str(q1): "Paris", str(q2): "5"}
        )

        assert submitted.score == 50.0
        assert submitted.is_passed is False

    @pytest.mark.asyncio
    async def test_attempt_numbers_are_sequential(self, db_session, seed):
        student = await seed.user()
        course = await seed.course()
        test = await seed.test(course, questions=[("a", 1)], max_attempts=3)
        service = AttemptService(db_session)

        numbers = [
            (await service.start_attempt(test.id, student.id)).attempt_number
            for _ in range(3)
        ]

        assert numbers == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_cap_of_one_rejects_second_start(self, db_session, seed):
        student = await seed.user()
        course = await seed.course()
        test = await seed.test(course, questions=[("a", 1)], max_attempts=1)
        service = AttemptService(db_session)

        await service.start_attempt(test.id, student.id)

        with pytest.raises(LimitExceededError) as exc_info:
            await service.start_attempt(test.id, student.id)

        assert "1" in str(exc_info.value)
        assert await service.ledger.count_attempts(test.id, student.id) == 1

    @pytest.mark.asyncio
    async def test_completed_attempts_count_toward_cap(self, db_session, seed):
        student = await seed.user()
        course = await seed.course()
        test = await seed.test(course, questions=[("a", 1)], max_attempts=2)
        (qid,) = await seed.question_ids(test.id)
        service = AttemptService(db_session)

        first = await service.start_attempt(test.id, student.id)
        await service.submit_attempt(first.id, {str(qid): "a"})
        await service.start_attempt(test.id, student.id)

        assert await service.ledger.remaining_attempts(test, student.id) == 0
        with pytest.raises(LimitExceededError):
            await service.start_attempt(test.id, student.id)

    @pytest.mark.asyncio
    async def test_cap_is_per_student(self, db_session, seed):
        alice = await seed.user()
        bob = await seed.user()
        course = await seed.course()
        test = await seed.test(course, questions=[("a", 1)], max_attempts=1)
        service = AttemptService(db_session)

        await service.start_attempt(test.id, alice.id)
        attempt = await service.start_attempt(test.id, bob.id)

        assert attempt.attempt_number == 1

    @pytest.mark.asyncio
    async def test_instructor_cannot_start_attempt(self, db_session, seed):
        instructor = await seed.user("instructor")
        course = await seed.course()
        test = await seed.test(course, questions=[("a", 1)])
        service = AttemptService(db_session)

        with pytest.raises(NotAStudentError):
            await service.start_attempt(test.id, instructor.id)

    @pytest.mark.asyncio
    async def test_second_submission_is_rejected(self, db_session, seed):
        student = await seed.user()
        course = await seed.course()
        test = await seed.test(course, questions=[("Paris", 10), ("4", 10)])
        q1, q2 = await seed.question_ids(test.id)
        service = AttemptService(db_session)

        attempt = await service.start_attempt(test.id, student.id)
        attempt_id = attempt.id
        await service.submit_attempt(attempt_id, {str(q1): "Paris", str(q2): "4"})

        with pytest.raises(AlreadySubmittedError):
            await service.submit_attempt(attempt_id, {str(q1): "x", str(q2): "y"})

        stored = await db_session.get(TestAttempt, attempt_id, populate_existing=True)
        assert stored.score == 100.0
        assert stored.is_passed is True
        assert stored.answers == {str(q1): "Paris", str(q2): "4"}

    @pytest.mark.asyncio
    async def test_lost_completion_race_keeps_first_result(self, db_session, seed):
        student = await seed.user()
        course = await seed.course()
        test = await seed.test(course, questions=[("Paris", 10), ("4", 10)])
        q1, q2 = await seed.question_ids(test.id)
        service = AttemptService(db_session)

        attempt = await service.start_attempt(test.id, student.id)
        attempt_id = attempt.id

        # Another request completes the attempt; the loaded instance stays stale.
        completed = await AttemptRepository(db_session).complete(
            attempt_id,
            answers={str(q1): "Paris"},
            score=50.0,
            is_passed=False,
            completed_at=utc_now(),
        )
        await db_session.commit()
        assert completed is True

        with pytest.raises(AlreadySubmittedError):
            await service.submit_attempt(attempt_id, {str(q1): "Paris", str(q2): "4"})

        stored = await db_session.get(TestAttempt, attempt_id, populate_existing=True)
        assert stored.score == 50.0
        assert stored.is_passed is False
        assert stored.answers == {str(q1): "Paris"}

    @pytest.mark.asyncio
    async def test_submit_unknown_attempt(self, db_session):
        service = AttemptService(db_session)

        with pytest.raises(AttemptNotFoundError):
            await service.submit_attempt(99999, {})

    @pytest.mark.asyncio
    async def test_submit_to_test_without_questions(self, db_session, seed):
        student = await seed.user()
        course = await seed.course()
        test = await seed.test(course, questions=[])
        service = AttemptService(db_session)

        attempt = await service.start_attempt(test.id, student.id)
        attempt_id = attempt.id

        with pytest.raises(EmptyTestError):
            await service.submit_attempt(attempt_id, {})

        stored = await db_session.get(TestAttempt, attempt_id, populate_existing=True)
        assert stored.completed_at is None
        assert stored.score is None

    @pytest.mark.asyncio
    async def test_list_attempts(self, db_session, seed):
        alice = await seed.user()
        bob = await seed.user()
        course = await seed.course()
        test = await seed.test(course, questions=[("a", 1)])
        service = AttemptService(db_session)

        await service.start_attempt(test.id, alice.id)
        await service.start_attempt(test.id, alice.id)
        await service.start_attempt(test.id, bob.id)

        by_alice = await service.list_attempts_by_student(alice.id, test.id)
        by_test = await service.list_attempts_by_test(test.id)

        assert [a.attempt_number for a in by_alice] == [1, 2]
        assert len(by_test) == 3


class TestAttemptConstraints:
    """Storage-level guarantees backing the attempt ledger."""

    @pytest.mark.asyncio
    async def test_duplicate_attempt_number_rejected(self, db_session, seed):
        student = await seed.user()
        course = await seed.course()
        test = await seed.test(course, questions=[("a", 1)])
        test_id, student_id = test.id, student.id

        db_session.add(TestAttempt(test_id=test_id, student_id=student_id, attempt_number=1))
        await db_session.commit()

        db_session.add(TestAttempt(test_id=test_id, student_id=student_id, attempt_number=1))
        with pytest.raises(IntegrityError):
            await db_session.commit()
        await db_session.rollback()

        count = await AttemptRepository(db_session).count_for_student(test_id, student_id)
        assert count == 1

    @pytest.mark.asyncio
    async def test_complete_only_succeeds_once(self, db_session, seed):
        student = await seed.user()
        course = await seed.course()
        test = await seed.test(course, questions=[("a", 1)])
        attempt = TestAttempt(test_id=test.id, student_id=student.id, attempt_number=1)
        db_session.add(attempt)
        await db_session.commit()

        repo = AttemptRepository(db_session)
        first = await repo.complete(
            attempt.id, answers={}, score=0.0, is_passed=False, completed_at=utc_now()
        )
        second = await repo.complete(
            attempt.id, answers={}, score=100.0, is_passed=True, completed_at=utc_now()
        )
        await db_session.commit()

        assert first is True
        assert second is False


class TestLessonCompletion:
    """Lesson completion and the enrollment progress cascade."""

    @pytest.mark.asyncio
    async def test_two_lesson_course_completes(self, db_session, seed):
        student = await seed.user()
        course = await seed.course(lessons=2)
        enrollment = await seed.enrollment(student, course)
        lessons = await _lesson_ids(db_session, course.id)
        service = LessonCompletionService(db_session)

        await service.complete_lesson(student.id, lessons[0])
        await db_session.refresh(enrollment)
        assert enrollment.progress_percentage == 50.0
        assert enrollment.status == "active"
        assert enrollment.completed_at is None

        await service.complete_lesson(student.id, lessons[1])
        await db_session.refresh(enrollment)
        assert enrollment.progress_percentage == 100.0
        assert enrollment.status == "completed"
        assert enrollment.completed_at is not None

    @pytest.mark.asyncio
    async def test_repeat_completion_is_idempotent(self, db_session, seed):
        student = await seed.user()
        course = await seed.course(lessons=1)
        enrollment = await seed.enrollment(student, course)
        (lesson_id,) = await _lesson_ids(db_session, course.id)
        service = LessonCompletionService(db_session)

        await service.complete_lesson(student.id, lesson_id)
        await db_session.refresh(enrollment)
        first_completed_at = enrollment.completed_at

        await service.complete_lesson(student.id, lesson_id)
        await db_session.refresh(enrollment)

        rows = await db_session.execute(
            select(func.count(LessonProgress.id)).where(
                LessonProgress.student_id == student.id,
                LessonProgress.lesson_id == lesson_id,
            )
        )
        assert rows.scalar_one() == 1
        assert enrollment.progress_percentage == 100.0
        assert enrollment.status == "completed"
        assert enrollment.completed_at == first_completed_at

    @pytest.mark.asyncio
    async def test_not_enrolled_writes_nothing(self, db_session, seed):
        student = await seed.user()
        course = await seed.course(lessons=1)
        (lesson_id,) = await _lesson_ids(db_session, course.id)
        service = LessonCompletionService(db_session)

        with pytest.raises(EnrollmentNotFoundError):
            await service.complete_lesson(student.id, lesson_id)

        assert await service.list_progress_by_lesson(lesson_id) == []

    @pytest.mark.asyncio
    async def test_dropped_enrollment_completes_with_course(self, db_session, seed):
        student = await seed.user()
        course = await seed.course(lessons=1)
        enrollment = await seed.enrollment(student, course, status="dropped")
        (lesson_id,) = await _lesson_ids(db_session, course.id)

        await LessonCompletionService(db_session).complete_lesson(student.id, lesson_id)
        await db_session.refresh(enrollment)

        assert enrollment.status == "completed"
        assert enrollment.progress_percentage == 100.0

    @pytest.mark.asyncio
    async def test_progress_is_per_student(self, db_session, seed):
        alice = await seed.user()
        bob = await seed.user()
        course = await seed.course(lessons=4)
        alice_enrollment = await seed.enrollment(alice, course)
        bob_enrollment = await seed.enrollment(bob, course)
        lessons = await _lesson_ids(db_session, course.id)
        service = LessonCompletionService(db_session)

        await service.complete_lesson(alice.id, lessons[0])
        await service.complete_lesson(alice.id, lessons[1])
        await service.complete_lesson(bob.id, lessons[0])
        await db_session.refresh(alice_enrollment)
        await db_session.refresh(bob_enrollment)

        assert alice_enrollment.progress_percentage == 50.0
        assert bob_enrollment.progress_percentage == 25.0

    @pytest.mark.asyncio
    async def test_lessons_of_other_courses_do_not_count(self, db_session, seed):
        student = await seed.user()
        course = await seed.course(lessons=2)
        other = await seed.course(lessons=1)
        enrollment = await seed.enrollment(student, course)
        await seed.enrollment(student, other)
        (other_lesson,) = await _lesson_ids(db_session, other.id)
        service = LessonCompletionService(db_session)

        await service.complete_lesson(student.id, other_lesson)
        await db_session.refresh(enrollment)

        assert enrollment.progress_percentage == 0.0
        progress = await service.list_progress_by_student(student.id, course_id=course.id)
        assert progress == []
        assert len(await service.list_progress_by_student(student.id)) == 1

    @pytest.mark.asyncio
    async def test_course_without_lessons_stays_at_zero(self, db_session, seed):
        student = await seed.user()
        course = await seed.course(lessons=0)
        enrollment = await seed.enrollment(student, course)

        await ProgressCascade(db_session).apply(enrollment)
        await db_session.commit()

        assert enrollment.progress_percentage == 0.0
        assert enrollment.status == "active"


class TestEnrollmentFlow:
    """Enrollment registration against the real schema."""

    @pytest.mark.asyncio
    async def test_enroll_then_duplicate(self, db_session, seed):
        student = await seed.user()
        course = await seed.course()
        service = EnrollmentService(db_session)

        enrollment = await service.enroll_student(student.id, course.id)

        assert enrollment.status == "active"
        assert enrollment.progress_percentage == 0.0
        with pytest.raises(AlreadyEnrolledError):
            await service.enroll_student(student.id, course.id)

    @pytest.mark.asyncio
    async def test_drop_then_list_by_status(self, db_session, seed):
        student = await seed.user()
        first = await seed.course()
        second = await seed.course()
        service = EnrollmentService(db_session)
        await service.enroll_student(student.id, first.id)
        await service.enroll_student(student.id, second.id)

        dropped = await service.drop_enrollment(student.id, first.id)
        active = await service.list_enrollments_by_student(student.id, status="active")

        assert dropped.status == "dropped"
        assert [e.course_id for e in active] == [second.id]


    @pytest.mark.asyncio
    async def test_drop_sees_completion_made_elsewhere(self, db_session, seed):
        student = await seed.user()
        course = await seed.course()
        enrollment = await seed.enrollment(student, course)
        student_id, course_id = student.id, course.id

        # Another request completes the course; the session copy stays active.
        await db_session.execute(
            update(Enrollment)
            .where(Enrollment.id == enrollment.id)
            .values(status="completed", progress_percentage=100.0, completed_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        await db_session.commit()
        assert enrollment.status == "active"

        with pytest.raises(EnrollmentCompletedError):
            await EnrollmentService(db_session).drop_enrollment(student_id, course_id)

        assert enrollment.status == "completed"


async def _lesson_ids(db_session, course_id: int) -> list[int]:
    result = await db_session.execute(
        select(Lesson.id).where(Lesson.course_id == course_id).order_by(Lesson.order_index)
    )
    return list(result.scalars().all())
