# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Convert feature flag files between formats and to the current flag schema."""

from .errors import (
    DecodeError,
    EncodeError,
    FlagMigrationError,
    MalformedFlagError,
    UnsupportedFormat,
)
from .formats import Format, decode, encode
from .migrations import FlagShape, normalize, normalize_flag
from .migrator import FlagMigrator, MigrationResult, migrate
from .models import CanonicalFlag, Experimentation, Rule, ScheduledStep

__all__ = [
    'CanonicalFlag',
    'DecodeError',
    'EncodeError',
    'Experimentation',
    'FlagMigrationError',
    'FlagMigrator',
    'FlagShape',
    'Format',
    'MalformedFlagError',
    'MigrationResult',
    'Rule',
    'ScheduledStep',
    'UnsupportedFormat',
    'decode',
    'encode',
    'migrate',
    'normalize',
    'normalize_flag',
]
