# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Conversion of legacy (v0) flags to the current schema.

Changes in v1:
- The fixed true/false/default values became named variations
- The single `rule` query and `percentage` became targeting rules
- `rollout.progressive` became a progressiveRollout on a rule
- `rollout.experimentation` moved to the top-level `experimentation`
- `rollout.scheduled.steps` moved to `scheduledRollout`

This conversion:
- Creates the variations True, False and Default from true, false and default
- Creates a `legacyRuleV0` targeting rule when `rule` is set, splitting
  matching contexts between True and False by `percentage`, and serves
  Default to everything else
- Without a rule, puts the percentage split on the default rule
- Keeps trackEvents, disable, version and bucketingKey from the flag root
"""

from typing import Any, Dict, List, Optional

from ..errors import MalformedFlagError
from ..models import CanonicalFlag
from .helpers import (
    build,
    coerce_number,
    coerce_version,
    require_list,
    require_mapping,
    unknown_keys,
)

LEGACY_KEYS = ('true', 'false', 'default', 'percentage', 'rule', 'rollout')
ROOT_KEYS = ('trackEvents', 'disable', 'version', 'bucketingKey', 'metadata')
ROLLOUT_KEYS = ('progressive', 'experimentation', 'scheduled')
STEP_KEYS = ('true', 'false', 'default', 'percentage', 'rule', 'date')

LEGACY_RULE_NAME = 'legacyRuleV0'
LEGACY_DEFAULT_RULE_NAME = 'legacyDefaultRule'

TRUE_VARIATION = 'True'
FALSE_VARIATION = 'False'
DEFAULT_VARIATION = 'Default'

_VARIATION_KEYS = (
    ('true', TRUE_VARIATION),
    ('false', FALSE_VARIATION),
    ('default', DEFAULT_VARIATION),
)


def convert(record: Dict[str, Any], flag_name: str, warnings: List[str]) -> CanonicalFlag:
    """
    Convert a v0 record into a canonical flag.

    Args:
        record: Raw record (None values already dropped)
        flag_name: Name of the flag, used in error messages
        warnings: Receives one message per ignored field

    Returns:
        Canonical flag
    """
    rollout = require_mapping(record.get('rollout', {}), flag_name, 'rollout')
    warnings.extend(unknown_keys(record, LEGACY_KEYS + ROOT_KEYS + ('converter',)))
    warnings.extend(unknown_keys(rollout, ROLLOUT_KEYS, prefix='rollout.'))

    progressive = None
    if rollout.get('progressive') is not None:
        progressive = _progressive_rollout(rollout['progressive'], flag_name)

    payload = _convert_values(record, flag_name, progressive, with_defaults=True)
    payload.update(_root_fields(record, flag_name))

    if rollout.get('experimentation') is not None:
        window = require_mapping(rollout['experimentation'], flag_name, 'rollout.experimentation')
        payload['experimentation'] = {'start': window.get('start'), 'end': window.get('end')}

    if rollout.get('scheduled') is not None:
        scheduled = require_mapping(rollout['scheduled'], flag_name, 'rollout.scheduled')
        steps = require_list(scheduled.get('steps', []), flag_name, 'rollout.scheduled.steps')
        payload['scheduledRollout'] = [
            _convert_step(step, flag_name, f"rollout.scheduled.steps[{index}]", warnings)
            for index, step in enumerate(steps)
        ]

    return build(CanonicalFlag, payload, flag_name)


def _root_fields(record: Dict[str, Any], flag_name: str, field_prefix: str = '') -> Dict[str, Any]:
    fields = {key: record[key] for key in ROOT_KEYS if key in record}
    if 'version' in fields:
        fields['version'] = coerce_version(fields['version'], flag_name, f"{field_prefix}version")
    return fields


def _convert_values(
    record: Dict[str, Any],
    flag_name: str,
    progressive: Optional[Dict[str, Any]],
    with_defaults: bool,
    field_prefix: str = ''
) -> Dict[str, Any]:
    """
    Convert the value and targeting part of a v0 record.

    Scheduled steps only carry what they change, so they are converted
    without defaults: a step that only sets `true` yields only variations.
    """
    payload: Dict[str, Any] = {}

    variations = {
        variation: record[key]
        for key, variation in _VARIATION_KEYS
        if key in record
    }
    if variations or with_defaults:
        payload['variations'] = variations

    query = record.get('rule')
    if query is not None and not isinstance(query, str):
        raise MalformedFlagError(
            flag_name, f"{field_prefix}rule", f"expected a string, got {type(query).__name__}"
        )

    percentage = 0.0
    if record.get('percentage') is not None:
        percentage = coerce_number(record['percentage'], flag_name, f"{field_prefix}percentage")

    touches_targeting = query is not None or 'percentage' in record or progressive is not None
    if not (with_defaults or touches_targeting):
        return payload

    split_rule: Dict[str, Any] = {}
    if progressive is not None:
        split_rule['progressiveRollout'] = progressive
    else:
        split_rule['percentage'] = {
            TRUE_VARIATION: percentage,
            FALSE_VARIATION: 100 - percentage,
        }

    if query:
        payload['targeting'] = [{'name': LEGACY_RULE_NAME, 'query': query, **split_rule}]
        payload['defaultRule'] = {'name': LEGACY_DEFAULT_RULE_NAME, 'variation': DEFAULT_VARIATION}
    else:
        payload['defaultRule'] = {'name': LEGACY_DEFAULT_RULE_NAME, **split_rule}

    return payload


def _progressive_rollout(progressive: Any, flag_name: str) -> Dict[str, Any]:
    """Ramp from the False variation to the True variation over the release ramp."""
    progressive = require_mapping(progressive, flag_name, 'rollout.progressive')
    percentage = require_mapping(
        progressive.get('percentage', {}), flag_name, 'rollout.progressive.percentage'
    )
    ramp = require_mapping(
        progressive.get('releaseRamp', {}), flag_name, 'rollout.progressive.releaseRamp'
    )

    initial = 0.0
    if percentage.get('initial') is not None:
        initial = coerce_number(percentage['initial'], flag_name, 'rollout.progressive.percentage.initial')
    end = 100.0
    if percentage.get('end') is not None:
        end = coerce_number(percentage['end'], flag_name, 'rollout.progressive.percentage.end')

    return {
        'initial': {'variation': FALSE_VARIATION, 'percentage': initial, 'date': ramp.get('start')},
        'end': {'variation': TRUE_VARIATION, 'percentage': end, 'date': ramp.get('end')},
    }


def _convert_step(step: Any, flag_name: str, field: str, warnings: List[str]) -> Dict[str, Any]:
    step = require_mapping(step, flag_name, field)
    step = {key: value for key, value in step.items() if value is not None}
    prefix = f"{field}."
    warnings.extend(unknown_keys(step, STEP_KEYS + ROOT_KEYS, prefix=prefix))

    payload = _convert_values(step, flag_name, None, with_defaults=False, field_prefix=prefix)
    payload.update(_root_fields(step, flag_name, field_prefix=prefix))
    if 'date' in step:
        payload['date'] = step['date']
    return payload
