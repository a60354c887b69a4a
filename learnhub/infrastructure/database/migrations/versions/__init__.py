# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Schema revisions.

Contains migrations for:
- Users, courses and lessons
- Tests, questions and test attempts
- Enrollments and lesson progress
"""
