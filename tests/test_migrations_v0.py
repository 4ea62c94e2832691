# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Tests for the legacy (v0) flag conversion."""

from datetime import datetime, timezone

import pytest

from flag_migrator.errors import MalformedFlagError
from flag_migrator.formats import decode
from flag_migrator.migrations import normalize, normalize_flag
from flag_migrator.migrations.v0 import LEGACY_DEFAULT_RULE_NAME, LEGACY_RULE_NAME
from helpers.flag_helpers import v0_record

JAN_1 = datetime(2024, 1, 1, tzinfo=timezone.utc)
JAN_5 = datetime(2024, 1, 5, tzinfo=timezone.utc)


def test_values_become_variations():
    flag = normalize_flag(v0_record(true="blue", false="red", default="grey"), "f")
    assert flag.variations == {"True": "blue", "False": "red", "Default": "grey"}


def test_only_present_values_become_variations():
    flag = normalize_flag({"true": 1, "false": 0}, "f")
    assert flag.variations == {"True": 1, "False": 0}


def test_rule_becomes_targeting_rule():
    flag = normalize_flag(v0_record(), "f")

    assert len(flag.rules) == 1
    rule = flag.rules[0]
    assert rule.name == LEGACY_RULE_NAME
    assert rule.query == 'key eq "random-key"'
    assert rule.percentage == {"True": 20, "False": 80}
    assert rule.progressive_rollout is None

    assert flag.default_rule.name == LEGACY_DEFAULT_RULE_NAME
    assert flag.default_rule.variation == "Default"
    assert flag.default_rule.percentage is None


def test_without_rule_default_rule_splits_traffic():
    record = v0_record(percentage=35)
    del record["rule"]
    flag = normalize_flag(record, "f")

    assert flag.rules == []
    assert flag.default_rule.name == LEGACY_DEFAULT_RULE_NAME
    assert flag.default_rule.percentage == {"True": 35, "False": 65}


def test_empty_rule_is_treated_as_no_rule():
    flag = normalize_flag(v0_record(rule=""), "f")
    assert flag.rules == []
    assert flag.default_rule.percentage == {"True": 20, "False": 80}


def test_missing_percentage_serves_false():
    flag = normalize_flag({"true": True, "false": False, "default": False}, "f")
    assert flag.default_rule.percentage == {"True": 0, "False": 100}


def test_root_fields_are_kept():
    flag = normalize_flag(
        v0_record(trackEvents=False, disable=True, version="0.1", bucketingKey="teamId"),
        "f"
    )
    assert flag.track_events is False
    assert flag.disabled is True
    assert flag.version == "0.1"
    assert flag.bucketing_key == "teamId"


def test_progressive_rollout_replaces_percentage():
    record = v0_record(rollout={
        "progressive": {
            "percentage": {"initial": 10, "end": 90},
            "releaseRamp": {"start": "2024-01-01T00:00:00Z", "end": "2024-01-05T00:00:00Z"},
        }
    })
    flag = normalize_flag(record, "f")

    rule = flag.rules[0]
    assert rule.percentage is None
    ramp = rule.progressive_rollout
    assert ramp.initial.variation == "False"
    assert ramp.initial.percentage == 10
    assert ramp.initial.date == JAN_1
    assert ramp.end.variation == "True"
    assert ramp.end.percentage == 90
    assert ramp.end.date == JAN_5


def test_progressive_rollout_defaults_to_full_ramp():
    record = v0_record(rollout={"progressive": {"releaseRamp": {"start": "2024-01-01T00:00:00Z"}}})
    del record["rule"]
    flag = normalize_flag(record, "f")

    ramp = flag.default_rule.progressive_rollout
    assert ramp.initial.percentage == 0
    assert ramp.end.percentage == 100
    assert ramp.end.date is None


def test_experimentation_moves_to_top_level():
    record = v0_record(rollout={
        "experimentation": {"start": "2024-01-01T00:00:00Z", "end": "2024-01-05T00:00:00Z"}
    })
    flag = normalize_flag(record, "f")
    assert flag.experimentation.start == JAN_1
    assert flag.experimentation.end == JAN_5


def test_no_experimentation_stays_unset():
    assert normalize_flag(v0_record(), "f").experimentation is None


def test_scheduled_steps():
    record = v0_record(rollout={
        "scheduled": {
            "steps": [
                {"date": "2024-01-01T00:00:00Z", "true": "new"},
                {"date": "2024-01-05T00:00:00Z", "percentage": 100, "rule": 'beta eq true'},
                {"date": "2024-01-05T00:00:00Z", "disable": True, "version": 2},
            ]
        }
    })
    flag = normalize_flag(record, "f")

    first, second, third = flag.scheduled
    assert first.date == JAN_1
    assert first.variations == {"True": "new"}
    assert first.rules is None
    assert first.default_rule is None

    assert second.rules[0].query == "beta eq true"
    assert second.rules[0].percentage == {"True": 100, "False": 0}
    assert second.default_rule.variation == "Default"

    assert third.disabled is True
    assert third.version == 2
    assert third.variations is None


def test_unknown_fields_are_warned_about():
    result = normalize(v0_record(description="x", rollout={"canary": {}}), "f")
    assert "ignored unknown field 'description'" in result.warnings
    assert "ignored unknown field 'rollout.canary'" in result.warnings


@pytest.mark.parametrize("record,field", [
    (v0_record(percentage="half"), "percentage"),
    (v0_record(percentage=True), "percentage"),
    (v0_record(rule=["a"]), "rule"),
    (v0_record(rollout="soon"), "rollout"),
    (v0_record(rollout={"experimentation": "now"}), "rollout.experimentation"),
    (v0_record(rollout={"scheduled": {"steps": {}}}), "rollout.scheduled.steps"),
    (v0_record(rollout={"scheduled": {"steps": ["x"]}}), "rollout.scheduled.steps[0]"),
    (v0_record(rollout={"progressive": {"percentage": {"end": "all"}}}),
     "rollout.progressive.percentage.end"),
    (v0_record(version=[1]), "version"),
])
def test_malformed_fields(record, field):
    with pytest.raises(MalformedFlagError) as exc_info:
        normalize_flag(record, "legacy")
    assert exc_info.value.flag_name == "legacy"
    assert exc_info.value.field == field


def test_unquoted_yaml_boolean_keys():
    """YAML reads `true:` as a boolean key; it still names the legacy field."""
    records = decode(b"f1:\n  true: A\n  false: B\n  default: C\n  percentage: 10\n", "yaml")
    result = normalize(records["f1"], "f1")

    assert result.warnings == []
    assert result.flag.variations == {"True": "A", "False": "B", "Default": "C"}
    assert result.flag.default_rule.percentage == {"True": 10, "False": 90}


def test_unknown_scheduled_step_fields_are_warned_about():
    record = v0_record(rollout={
        "scheduled": {
            "steps": [
                {"date": "2024-01-01T00:00:00Z", "true": "new", "rollout": {"progressive": {}}},
            ]
        }
    })
    result = normalize(record, "f")

    assert "ignored unknown field 'rollout.scheduled.steps[0].rollout'" in result.warnings
    assert result.flag.scheduled[0].variations == {"True": "new"}
