# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services for LearnHub.

- assessment: attempt lifecycle and grading
- progress: lesson completion and the enrollment progress cascade
- enrollment: student enrollment in courses
"""
