# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Errors raised by the flag migration pipeline."""

from typing import Optional


class FlagMigrationError(Exception):
    """Base class for every error the migration core raises."""
    pass


class UnsupportedFormat(FlagMigrationError):
    """Raised when a format tag is not one of toml, json or yaml."""

    def __init__(self, tag: Optional[str]):
        self.tag = tag
        super().__init__(f"invalid format {tag!r}, expected one of: toml, json, yaml")


class DecodeError(FlagMigrationError):
    """Raised when the input bytes cannot be parsed in the declared format."""

    def __init__(
        self,
        format_name: str,
        detail: str,
        line: Optional[int] = None,
        column: Optional[int] = None
    ):
        self.format_name = format_name
        self.detail = detail
        self.line = line
        self.column = column

        location = ""
        if line is not None:
            location = f" (line {line}" + (f", column {column})" if column is not None else ")")
        super().__init__(f"cannot decode {format_name} input{location}: {detail}")


class MalformedFlagError(FlagMigrationError):
    """Raised when a present flag field has a type that cannot be coerced."""

    def __init__(self, flag_name: str, field: str, detail: str):
        self.flag_name = flag_name
        self.field = field
        self.detail = detail
        super().__init__(f"flag {flag_name!r}: invalid field {field!r}: {detail}")


class EncodeError(FlagMigrationError):
    """Raised when the output format cannot represent a value of the model."""

    def __init__(self, format_name: str, detail: str):
        self.format_name = format_name
        self.detail = detail
        super().__init__(f"cannot encode {format_name} output: {detail}")
