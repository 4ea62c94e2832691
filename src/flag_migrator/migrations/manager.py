# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Flag schema normalization.

Detects which schema a raw flag record was written in and converts it to the
canonical model. Normalization is a pure function: diagnostics are returned
as warnings and never influence the produced flag.
"""

from enum import Enum
from typing import Any, Callable, Dict, List

from pydantic import BaseModel, Field

from ..errors import MalformedFlagError
from ..models import CanonicalFlag
from . import v0, v1
from .helpers import stringify_keys


class FlagShape(str, Enum):
    """Recognized flag record shapes."""
    V0 = "v0"  # true/false/default values with a single rule
    V1 = "v1"  # named variations with targeting rules


class NormalizationResult(BaseModel):
    """Outcome of normalizing one flag."""
    flag: CanonicalFlag
    shape: FlagShape
    warnings: List[str] = Field(default_factory=list)


Converter = Callable[[Dict[str, Any], str, List[str]], CanonicalFlag]

CONVERTERS: Dict[FlagShape, Converter] = {
    FlagShape.V0: v0.convert,
    FlagShape.V1: v1.convert,
}

SHAPE_MARKER = 'converter'


def detect_shape(record: Dict[str, Any], flag_name: str) -> FlagShape:
    """
    Decide which shape a record uses.

    An explicit `converter` marker wins. Otherwise a record with legacy keys
    and no `variations` is v0, and anything else is v1.

    Raises:
        MalformedFlagError: If the marker names an unknown shape
    """
    marker = record.get(SHAPE_MARKER)
    if marker is not None:
        try:
            return FlagShape(str(marker).lower())
        except ValueError:
            raise MalformedFlagError(
                flag_name,
                SHAPE_MARKER,
                f"unknown schema {marker!r}, expected one of: "
                + ", ".join(shape.value for shape in FlagShape)
            ) from None

    if 'variations' not in record and any(key in record for key in v0.LEGACY_KEYS):
        return FlagShape.V0
    return FlagShape.V1


def normalize(record: Any, flag_name: str) -> NormalizationResult:
    """
    Normalize one raw record to the canonical schema.

    Fields set to null are treated as absent. Non-string mapping keys, such
    as unquoted YAML `1:` or `true:`, are read as their text.

    Args:
        record: Raw record as decoded from the input file
        flag_name: Name of the flag, used in errors and warnings

    Returns:
        NormalizationResult with the flag, its detected shape and warnings

    Raises:
        MalformedFlagError: If a present field has an unusable type
    """
    if not isinstance(record, dict):
        raise MalformedFlagError(
            flag_name, '<flag>', f"expected a mapping, got {type(record).__name__}"
        )

    record = {
        key: value
        for key, value in stringify_keys(record).items()
        if value is not None
    }
    shape = detect_shape(record, flag_name)

    warnings: List[str] = []
    if shape is FlagShape.V1:
        legacy = [key for key in v0.LEGACY_KEYS if key in record]
        if legacy:
            warnings.append(
                "ignored legacy fields next to a v1 definition: " + ", ".join(legacy)
            )

    flag = CONVERTERS[shape](record, flag_name, warnings)
    return NormalizationResult(flag=flag, shape=shape, warnings=warnings)


def normalize_flag(record: Any, flag_name: str) -> CanonicalFlag:
    """Normalize one raw record, dropping the warnings."""
    return normalize(record, flag_name).flag
