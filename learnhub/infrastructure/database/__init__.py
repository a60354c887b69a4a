# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for LearnHub.

This package provides the SQLAlchemy async connection lifecycle, the ORM
models, the repositories used by the domain services and the schema
migrations.

Example:
    from learnhub.infrastructure.database import init_database, get_session

    await init_database(settings)

    async with get_session() as session:
        result = await session.execute(select(Enrollment))
"""

from learnhub.infrastructure.database.connection import (
    DatabaseError,
    close_database,
    create_engine_for_url,
    create_sessionmaker,
    get_engine,
    get_session,
    get_sessionmaker,
    init_database,
)

__all__ = [
    "DatabaseError",
    "close_database",
    "create_engine_for_url",
    "create_sessionmaker",
    "get_engine",
    "get_session",
    "get_sessionmaker",
    "init_database",
]
