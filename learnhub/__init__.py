"""LearnHub Backend.

E-learning platform backend: course enrollment, lesson progress tracking,
and the assessment engine that bounds, grades and scores test attempts.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
