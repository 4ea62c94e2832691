# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Reader for flags already in the current (v1) schema.

The v1 layout is the canonical one, so this converter only picks the known
keys, normalizes the content version and lets the model fill defaults:
- trackEvents defaults to true
- disable defaults to false
- variations, targeting and scheduledRollout default to empty
- experimentation stays unset when absent
"""

from typing import Any, Dict, List

from ..models import CanonicalFlag
from .helpers import build, coerce_version, require_list, unknown_keys
from .v0 import LEGACY_KEYS

WIRE_KEYS = (
    'trackEvents',
    'disable',
    'version',
    'bucketingKey',
    'variations',
    'targeting',
    'defaultRule',
    'scheduledRollout',
    'experimentation',
    'metadata',
)


def convert(record: Dict[str, Any], flag_name: str, warnings: List[str]) -> CanonicalFlag:
    """
    Read a v1 record into a canonical flag.

    Args:
        record: Raw record (None values already dropped)
        flag_name: Name of the flag, used in error messages
        warnings: Receives one message per ignored field

    Returns:
        Canonical flag
    """
    payload = {key: value for key, value in record.items() if key in WIRE_KEYS}

    if 'version' in payload:
        payload['version'] = coerce_version(payload['version'], flag_name)

    if 'scheduledRollout' in payload:
        steps = require_list(payload['scheduledRollout'], flag_name, 'scheduledRollout')
        payload['scheduledRollout'] = [
            _read_step(step, flag_name, index) for index, step in enumerate(steps)
        ]

    warnings.extend(unknown_keys(record, WIRE_KEYS + LEGACY_KEYS + ('converter',)))
    return build(CanonicalFlag, payload, flag_name)


def _read_step(step: Any, flag_name: str, index: int) -> Any:
    # Non-mapping steps are left for the model to reject with the right path
    if isinstance(step, dict) and step.get('version') is not None:
        step = dict(step)
        step['version'] = coerce_version(
            step['version'], flag_name, f"scheduledRollout[{index}].version"
        )
    return step
