# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""End-to-end flag file migration: decode, normalize every flag, encode."""

import logging
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from .formats import Format, decode, encode
from .migrations import FlagShape, normalize
from .models import CanonicalFlag

logger = logging.getLogger(__name__)


class MigrationResult(BaseModel):
    """Output of a successful migration."""
    output: bytes
    flags: Dict[str, CanonicalFlag] = Field(default_factory=dict)
    shapes: Dict[str, FlagShape] = Field(default_factory=dict)
    warnings: List[Tuple[str, str]] = Field(
        default_factory=list,
        description="(flag name, message) pairs reported during normalization"
    )


class FlagMigrator:
    """Converts a whole flag file from one format to another.

    Either every flag converts and the full output is produced, or the first
    error is raised and nothing is produced.
    """

    def __init__(
        self,
        input_format: Union[Format, str],
        output_format: Optional[Union[Format, str]] = None
    ):
        # Input is strict, output falls back to YAML
        self.input_format = Format.parse(input_format)
        self.output_format = Format.for_output(output_format)

    def normalize_all(self, data: bytes) -> MigrationResult:
        """Decode and normalize without encoding; `output` is left empty."""
        records = decode(data, self.input_format)
        logger.debug("Decoded %d flag(s) from %s input", len(records), self.input_format.value)

        result = MigrationResult(output=b"")
        for name, record in records.items():
            normalized = normalize(record, name)
            result.flags[name] = normalized.flag
            result.shapes[name] = normalized.shape
            result.warnings.extend((name, message) for message in normalized.warnings)
            logger.debug("Normalized flag %r from %s shape", name, normalized.shape.value)

        return result

    def run(self, data: bytes) -> MigrationResult:
        """
        Migrate a flag file.

        Args:
            data: Raw content of the input file

        Returns:
            MigrationResult with the encoded output

        Raises:
            DecodeError: If the input cannot be parsed
            MalformedFlagError: If any flag has a field of the wrong type
            EncodeError: If the output format cannot represent a value
        """
        result = self.normalize_all(data)
        result.output = encode(result.flags, self.output_format)
        logger.debug(
            "Encoded %d flag(s) as %s (%d bytes)",
            len(result.flags), self.output_format.value, len(result.output)
        )
        return result


def migrate(
    data: bytes,
    input_format: Union[Format, str],
    output_format: Optional[Union[Format, str]] = None
) -> bytes:
    """
    Convert a flag file to another format and to the current flag schema.

    Args:
        data: Raw content of the input file
        input_format: toml, json or yaml (case-insensitive)
        output_format: toml or json; anything else yields YAML

    Returns:
        Encoded output
    """
    return FlagMigrator(input_format, output_format).run(data).output
