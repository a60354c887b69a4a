# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest fixtures for integration tests.

Provides a schema-initialized database, sessions and seed helpers. The
database defaults to in-memory SQLite; set TEST_DATABASE_URL to run
against PostgreSQL.
"""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from learnhub.infrastructure.database.connection import (
    create_engine_for_url,
    create_sessionmaker,
)
from learnhub.infrastructure.database.models import (
    Base,
    Course,
    Enrollment,
    Lesson,
    Question,
    Test,
    User,
)


@pytest.fixture(scope="session")
def db_url() -> str:
    """Get database URL for tests."""
    return os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest_asyncio.fixture(scope="function")
async def db_engine(db_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine with a fresh schema."""
    engine = create_engine_for_url(db_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory configured like the application's."""
    return create_sessionmaker(db_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create async session for integration tests."""
    async with session_factory() as session:
        yield session
        await session.rollback()


class Seeder:
    """Creates rows the engine only reads (users, courses, lessons, tests)."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._counter = 0

    async def _save(self, obj):
        self.session.add(obj)
        await self.session.commit()
        await self.session.refresh(obj)
        return obj

    async def user(self, role: str = "student") -> User:
        self._counter += 1
        return await self._save(
            User(
                email=f"{role}{self._counter}@learnhub.test",
                password_hash="x",
                first_name=role.title(),
                last_name=str(self._counter),
                role=role,
            )
        )

    async def course(self, lessons: int = 0) -> Course:
        instructor = await self.user("instructor")
        course = await self._save(
            Course(
                title="Course",
                description="",
                instructor_id=instructor.id,
                status="published",
            )
        )
        for index in range(lessons):
            await self.lesson(course, order_index=index + 1)
        return course

    async def lesson(self, course: Course, order_index: int = 1) -> Lesson:
        return await self._save(
            Lesson(course_id=course.id, title=f"Lesson {order_index}", order_index=order_index)
        )

    async def test(
        self,
        course: Course,
        questions: list[tuple[str, int]] | None = None,
        max_attempts: int = 3,
        passing_score: float = 70.0,
    ) -> Test:
        test = await self._save(
            Test(
                course_id=course.id,
                title="Quiz",
                max_attempts=max_attempts,
                passing_score=passing_score,
            )
        )
        for index, (answer, points) in enumerate(questions or []):
            await self._save(
                Question(
                    test_id=test.id,
                    question_text=f"Question {index + 1}",
                    question_type="short_answer",
                    correct_answer=answer,
                    points=points,
                    order_index=index + 1,
                )
            )
        return test

    async def enrollment(self, student: User, course: Course, status: str = "active") -> Enrollment:
        return await self._save(
            Enrollment(student_id=student.id, course_id=course.id, status=status)
        )

    async def question_ids(self, test_id: int) -> list[int]:
        result = await self.session.execute(
            select(Question.id).where(Question.test_id == test_id).order_by(Question.order_index)
        )
        return list(result.scalars().all())


@pytest.fixture
def seed(db_session: AsyncSession) -> Seeder:
    """Seeder sharing the test session."""
    return Seeder(db_session)
