"""Global test configuration and shared fixtures."""

from __future__ import annotations

import typing as t
from pathlib import Path

import pytest

from env_filters.config import Settings
from env_filters.context import RunIdentity
from env_filters.diagnostics import RecordingSink
from env_filters.fs_retry import RetryConfig


class StepSubject:
    """Minimal categorised subject standing in for a host build step."""

    def __init__(self, category: str) -> None:
        self.category = category

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"StepSubject({self.category!r})"


@pytest.fixture
def sink() -> RecordingSink:
    """Return a sink that keeps diagnostic lines in memory."""
    return RecordingSink()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create and return a job workspace directory."""
    ws = tmp_path / "p"
    ws.mkdir()
    return ws


@pytest.fixture
def fast_settings() -> Settings:
    """Settings that do not sleep between deletion attempts."""
    return Settings(unlink_retry=RetryConfig(max_attempts=2, retry_delay=0))


@pytest.fixture
def step_subject() -> StepSubject:
    """Return a categorised subject in the ``shell`` category."""
    return StepSubject("shell")


@pytest.fixture
def make_run() -> t.Callable[..., RunIdentity]:
    """Return a factory for run identities."""

    def factory(job_name: str = "p", build_number: int = 1) -> RunIdentity:
        return RunIdentity(job_name=job_name, build_number=build_number)

    return factory
