# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""LearnHub HTTP API.

Example:
    uvicorn learnhub.api.app:create_app --factory
"""
