# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for LearnHub.

Example:
    >>> from learnhub.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.database.url)
"""

from learnhub.core.config.settings import (
    APISettings,
    CORSSettings,
    DatabaseSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "DatabaseSettings",
    "APISettings",
    "CORSSettings",
]
