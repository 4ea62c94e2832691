# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Shared pytest fixtures."""

import pytest

from flag_migrator.config import OUTPUT_FORMAT_ENV
from helpers.flag_helpers import sample_flags, v0_record, v1_record


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """
    Isolate tests from the caller's environment and config files.

    Runs every test from an empty working directory.
    """
    monkeypatch.delenv(OUTPUT_FORMAT_ENV, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def canonical_flags():
    """
    Canonical flags covering every field.

    Returns:
        Mapping of flag name to CanonicalFlag
    """
    return sample_flags()


@pytest.fixture
def legacy_flags():
    """
    Raw legacy (v0) records.

    Returns:
        Mapping of flag name to raw record
    """
    no_rule = v0_record(percentage=50)
    del no_rule["rule"]
    return {
        "with-rule": v0_record(),
        "no-rule": no_rule,
    }


@pytest.fixture
def current_flags():
    """
    Raw v1 records.

    Returns:
        Mapping of flag name to raw record
    """
    return {
        "beta": v1_record(),
        "dark-mode": v1_record(disable=True, version=2),
    }
