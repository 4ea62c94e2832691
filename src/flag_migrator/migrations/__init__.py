# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Flag schema migrations.

Each supported record shape has a converter module in this directory
(v0.py for legacy flags, v1.py for current ones). Shape detection and
dispatch live in manager.py.
"""

from .manager import (
    CONVERTERS,
    FlagShape,
    NormalizationResult,
    detect_shape,
    normalize,
    normalize_flag,
)

__all__ = [
    'CONVERTERS',
    'FlagShape',
    'NormalizationResult',
    'detect_shape',
    'normalize',
    'normalize_flag',
]
