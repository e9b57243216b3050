"""Behavioural tests for value filters and injection rules using pytest-bdd."""

from __future__ import annotations

from pathlib import Path

from pytest_bdd import scenario

from tests.steps.common import *  # noqa: F403
from tests.steps.filters import *  # noqa: F403

FEATURES_DIR = Path(__file__).resolve().parent.parent / "features"


@scenario(
    str(FEATURES_DIR / "value_filters.feature"),
    "redacting values that match a pattern",
)
def test_redact_matching_values() -> None:
    """Matching values are replaced and others untouched."""


@scenario(
    str(FEATURES_DIR / "value_filters.feature"),
    "removing values that match a pattern",
)
def test_remove_matching_values() -> None:
    """Matching variables are deleted."""


@scenario(
    str(FEATURES_DIR / "value_filters.feature"),
    "failing the build on a prohibited value",
)
def test_fail_on_prohibited_value() -> None:
    """A prohibited value aborts with the offending key."""


@scenario(
    str(FEATURES_DIR / "value_filters.feature"),
    "excluded runs are left alone",
)
def test_excluded_run_untouched() -> None:
    """An exclusion turns the filter off for that job."""


@scenario(
    str(FEATURES_DIR / "value_filters.feature"),
    "injecting a fixed variable",
)
def test_inject_fixed_variable() -> None:
    """Static injection overwrites the variable."""
