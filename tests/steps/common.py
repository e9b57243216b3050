# ruff: noqa: S101
"""pytest-bdd steps shared by the filter and externalization features."""

from __future__ import annotations

import typing as t

import pytest
from pytest_bdd import given, parsers, then

if t.TYPE_CHECKING:  # pragma: no cover - typing only
    from env_filters.diagnostics import RecordingSink


@pytest.fixture
def env_vars() -> dict[str, str]:
    """Return the environment snapshot a scenario builds up."""
    return {}


@given(parsers.cfparse('an environment with "{key}" set to "{value}"'))
def set_variable(env_vars: dict[str, str], key: str, value: str) -> None:
    """Add *key* to the scenario's environment."""
    env_vars[key] = value


@then(parsers.cfparse('the diagnostics mention "{text}"'))
def diagnostics_mention(sink: RecordingSink, text: str) -> None:
    """Assert some diagnostic line contains *text*."""
    assert text in sink.text


@then("there are no diagnostics")
def no_diagnostics(sink: RecordingSink) -> None:
    """Assert nothing was written to the diagnostic sink."""
    assert sink.lines == []
