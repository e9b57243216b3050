# ruff: noqa: S101
"""pytest-bdd steps that drive the externalize-to-file wrapper."""

from __future__ import annotations

import dataclasses as dc
import typing as t
from pathlib import Path

from pytest_bdd import given, parsers, then, when

from env_filters.env2file import Env2FileWrapper
from env_filters.errors import FatalSetupError

if t.TYPE_CHECKING:  # pragma: no cover - typing only
    from env_filters.config import Settings
    from env_filters.diagnostics import RecordingSink


@dc.dataclass(slots=True)
class StepOutcome:
    """What the wrapped step observed and how it ended."""

    seen_env: dict[str, str] = dc.field(default_factory=dict)
    seen_files: dict[str, str] = dc.field(default_factory=dict)
    step_error: Exception | None = None
    setup_error: FatalSetupError | None = None


class StepFailedError(RuntimeError):
    """Raised by the simulated step to model a failing build."""


@given(parsers.cfparse('a workspace for job "{job}"'), target_fixture="job_workspace")
def create_workspace(tmp_path: Path, job: str) -> Path:
    """Create the job's workspace directory."""
    ws = tmp_path / job
    ws.mkdir()
    return ws


@given("no workspace", target_fixture="job_workspace")
def no_workspace() -> None:
    """Model an agent without a usable workspace."""
    return None


@given(
    parsers.cfparse('variables "{names}" are externalized'),
    target_fixture="wrapper",
)
def externalize(names: str, fast_settings: Settings) -> Env2FileWrapper:
    """Configure the wrapper with comma-separated variable names."""
    return Env2FileWrapper(
        [n.strip() for n in names.split(",")], settings=fast_settings
    )


def _run_step(
    wrapper: Env2FileWrapper,
    env_vars: dict[str, str],
    job_workspace: Path | None,
    sink: RecordingSink,
    *,
    fail: bool,
) -> StepOutcome:
    outcome = StepOutcome()
    try:
        with wrapper.session(env_vars, job_workspace, sink) as session:
            outcome.seen_env = dict(session.environment)
            for name, path in session.env_overrides.items():
                outcome.seen_files[name] = Path(path).read_text(encoding="utf-8")
            if fail:
                msg = "step exited with status 1"
                raise StepFailedError(msg)
    except FatalSetupError as exc:
        outcome.setup_error = exc
    except StepFailedError as exc:
        outcome.step_error = exc
    return outcome


@when("the wrapped step runs", target_fixture="outcome")
def run_step(
    wrapper: Env2FileWrapper,
    env_vars: dict[str, str],
    job_workspace: Path | None,
    sink: RecordingSink,
) -> StepOutcome:
    """Run a step that only inspects its environment."""
    return _run_step(wrapper, env_vars, job_workspace, sink, fail=False)


@when("the wrapped step fails", target_fixture="outcome")
def run_failing_step(
    wrapper: Env2FileWrapper,
    env_vars: dict[str, str],
    job_workspace: Path | None,
    sink: RecordingSink,
) -> StepOutcome:
    """Run a step that fails after reading its environment."""
    return _run_step(wrapper, env_vars, job_workspace, sink, fail=True)


@then(
    parsers.cfparse('the step saw "{name}" pointing at a file containing "{value}"')
)
def saw_file(outcome: StepOutcome, name: str, value: str) -> None:
    """Assert the variable was a path to a file holding *value*."""
    assert outcome.seen_env[name].endswith(f"{name}.txt")
    assert outcome.seen_files[name] == value


@then(parsers.cfparse('the step saw "{name}" unset'))
def saw_unset(outcome: StepOutcome, name: str) -> None:
    """Assert the variable was absent inside the step."""
    assert name not in outcome.seen_env
    assert outcome.seen_files == {}


@then("the temporary directory is empty")
def temp_dir_empty(job_workspace: Path) -> None:
    """Assert no externalized file outlived the step."""
    tmp = job_workspace.with_name(f"{job_workspace.name}@tmp")
    assert list(tmp.iterdir()) == []


@then("the step failure is reported")
def step_failure_reported(outcome: StepOutcome) -> None:
    """Assert the step's own error surfaced unchanged."""
    assert isinstance(outcome.step_error, StepFailedError)


@then(parsers.cfparse('setup fails with "{message}"'))
def setup_fails(outcome: StepOutcome, message: str) -> None:
    """Assert setup aborted with *message*."""
    assert outcome.setup_error is not None
    assert message in str(outcome.setup_error)
