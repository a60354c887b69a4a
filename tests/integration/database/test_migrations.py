# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for database migrations.

Runs the migration runner against a file-backed SQLite database.
"""

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine

from learnhub.infrastructure.database.migrations.runner import (
    MIGRATIONS,
    get_migration_status,
    run_migrations,
)

pytestmark = pytest.mark.integration


@pytest.fixture
def migration_db_url(tmp_path) -> str:
    """URL of an empty SQLite database file."""
    return f"sqlite+aiosqlite:///{tmp_path / 'migrations.db'}"


async def _inspect(db_url: str, fn):
    engine = create_async_engine(db_url)
    try:
        async with engine.connect() as conn:
            return await conn.run_sync(lambda sync_conn: fn(inspect(sync_conn)))
    finally:
        await engine.dispose()


class TestMigrationRunner:
    """Test the programmatic migration runner."""

    @pytest.mark.asyncio
    async def test_fresh_database_applies_all(self, migration_db_url):
        applied = await run_migrations(migration_db_url)

        assert applied == MIGRATIONS

    @pytest.mark.asyncio
    async def test_initial_migration_creates_tables(self, migration_db_url):
        await run_migrations(migration_db_url)

        tables = await _inspect(migration_db_url, lambda i: i.get_table_names())

        expected_tables = [
            "users",
            "courses",
            "lessons",
            "tests",
            "questions",
            "test_attempts",
            "enrollments",
            "lesson_progress",
            "alembic_version",
        ]
        for table in expected_tables:
            assert table in tables, f"Table {table} not found"

    @pytest.mark.asyncio
    async def test_test_attempts_columns(self, migration_db_url):
        await run_migrations(migration_db_url)

        columns = await _inspect(
            migration_db_url,
            lambda i: {col["name"] for col in i.get_columns("test_attempts")},
        )

        assert columns == {
            "id",
            "test_id",
            "student_id",
            "attempt_number",
            "score",
            "answers",
            "started_at",
            "completed_at",
            "is_passed",
        }

    @pytest.mark.asyncio
    async def test_attempt_number_unique_constraint(self, migration_db_url):
        await run_migrations(migration_db_url)

        constraints = await _inspect(
            migration_db_url,
            lambda i: i.get_unique_constraints("test_attempts"),
        )

        assert any(
            set(c["column_names"]) == {"test_id", "student_id", "attempt_number"}
            for c in constraints
        )

    @pytest.mark.asyncio
    async def test_second_run_is_noop(self, migration_db_url):
        await run_migrations(migration_db_url)

        assert await run_migrations(migration_db_url) == []

    @pytest.mark.asyncio
    async def test_status_before_and_after(self, migration_db_url):
        before = await get_migration_status(migration_db_url)
        await run_migrations(migration_db_url)
        after = await get_migration_status(migration_db_url)

        assert before["current_version"] is None
        assert before["pending_count"] == len(MIGRATIONS)
        assert before["is_up_to_date"] is False
        assert after["current_version"] == MIGRATIONS[-1]
        assert after["is_up_to_date"] is True
