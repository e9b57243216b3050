"""Externalize environment variables to files for the span of one execution.

:class:`Env2FileWrapper` writes the value of each configured variable to
``<workspace>@tmp/<NAME>.txt`` and points the variable at that file, so
tools that expect a credential *file* can consume a credential *value*.
Setup returns an :class:`ExternalizationRecord` listing every written file;
teardown deletes them. :class:`ExternalizedEnvironment` pairs the two around
a ``with`` block so the files are removed on every exit path.
"""

from __future__ import annotations

import contextlib
import dataclasses as dc
import enum
import json
import logging
import typing as t
from pathlib import Path

from ._path_utils import resolve_against, workspace_temp_dir
from ._validators import validate_path_component
from .config import Settings, load_settings
from .environment import merge_overrides, temporary_env
from .errors import ExternalizedFileDeletionError, FatalSetupError, LifecycleError
from .fs_retry import DEFAULT_UNLINK_RETRY, RetryConfig, retry_unlink

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    import os
    import types

    from .diagnostics import DiagnosticSink

logger = logging.getLogger(__name__)

CleanupError = tuple[str, BaseException]

Workspace: t.TypeAlias = "os.PathLike[str] | str"


class ExternalizationRecordDict(t.TypedDict):
    """Typed dictionary shape for a serialized externalization record."""

    paths: list[str]


@dc.dataclass(frozen=True, slots=True)
class ExternalizationRecord:
    """The files one setup call wrote, in the order they were written.

    Only path strings are held, so a record can be serialized and handed to
    a different process for teardown.
    """

    paths: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        """Return ``True`` when there is anything to clean up."""
        return bool(self.paths)

    def to_dict(self) -> ExternalizationRecordDict:
        """Return a JSON-serializable mapping."""
        return ExternalizationRecordDict(paths=list(self.paths))

    @classmethod
    def from_dict(cls, data: ExternalizationRecordDict) -> ExternalizationRecord:
        """Construct a record from a JSON-compatible mapping."""
        paths = data.get("paths", [])
        if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
            msg = "Externalization record 'paths' must be a list of strings"
            raise ValueError(msg)
        return cls(paths=tuple(paths))

    def to_json(self) -> str:
        """Serialize the record to a JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> ExternalizationRecord:
        """Parse a record previously produced by :meth:`to_json`."""
        return cls.from_dict(json.loads(text))


@dc.dataclass(frozen=True, slots=True)
class SetupResult:
    """Overrides to apply for the wrapped execution, and what to delete after."""

    env_overrides: dict[str, str]
    record: ExternalizationRecord


class WrapperPhase(enum.StrEnum):
    """Lifecycle phases of :class:`ExternalizedEnvironment`."""

    IDLE = "IDLE"
    SETUP_RUNNING = "SETUP_RUNNING"
    SETUP_COMPLETE = "SETUP_COMPLETE"
    SETUP_FAILED = "SETUP_FAILED"
    TEARDOWN_RUNNING = "TEARDOWN_RUNNING"
    TEARDOWN_COMPLETE = "TEARDOWN_COMPLETE"


def _deletion_error(path: Path, exc: Exception) -> ExternalizedFileDeletionError:
    return ExternalizedFileDeletionError(str(path), exc)


def tear_down(
    record: ExternalizationRecord,
    workspace: Workspace | None,
    sink: DiagnosticSink,
    *,
    retry: RetryConfig = DEFAULT_UNLINK_RETRY,
) -> list[CleanupError]:
    """Delete every file in *record*, continuing past individual failures.

    Paths are resolved against *workspace*; recorded paths are absolute so a
    missing workspace does not prevent cleanup. Failures are written to
    *sink*, logged, and returned rather than raised so they never change the
    verdict of the execution being cleaned up after.
    """
    cleanup_errors: list[CleanupError] = []
    for path in record.paths:
        target = resolve_against(workspace, path)
        try:
            removed = retry_unlink(
                target, config=retry, logger=logger, exc_factory=_deletion_error
            )
        except OSError as exc:
            logger.warning("Failed to delete externalized file %s: %s", target, exc)
            sink.println(str(exc))
            cleanup_errors.append((str(exc), exc))
            continue
        if removed:
            logger.debug("Deleted externalized file %s", target)
        else:
            logger.debug("Externalized file %s was already gone", target)

    if cleanup_errors:
        messages = "; ".join(msg for msg, _ in cleanup_errors)
        logger.error("Teardown left files behind: %s", messages)
    return cleanup_errors


class Env2FileWrapper:
    """Save the values of selected environment variables to files."""

    def __init__(
        self, variables: t.Iterable[str], *, settings: Settings | None = None
    ) -> None:
        names = list(variables)
        for name in names:
            validate_path_component(name, name="variable name")
        self._variables = names
        self.settings = settings if settings is not None else load_settings()

    @classmethod
    def from_text(
        cls, text: str, *, settings: Settings | None = None
    ) -> Env2FileWrapper:
        """Build a wrapper from newline-separated variable names."""
        names = [line.strip() for line in text.strip().splitlines()]
        return cls([name for name in names if name], settings=settings)

    @property
    def variables(self) -> list[str]:
        """Return the configured variable names, in order."""
        return list(self._variables)

    @property
    def variables_conjoined(self) -> str:
        """Return the variable names as newline-separated text."""
        return "\n".join(self._variables)

    def _temp_dir(self, workspace: Workspace | None) -> Path:
        """Return the scoped temporary directory, creating it if needed."""
        if workspace is None:
            msg = "no workspace"
            raise FatalSetupError(msg)
        try:
            tmp = workspace_temp_dir(
                Path(workspace).absolute(), self.settings.workspace_combinator
            )
        except ValueError:
            msg = "no workspace"
            raise FatalSetupError(msg) from None
        try:
            tmp.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            msg = f"Could not create temporary directory {tmp}: {exc}"
            raise FatalSetupError(msg) from exc
        return tmp

    def _write_all(
        self,
        environment: t.Mapping[str, str],
        workspace: Workspace | None,
        sink: DiagnosticSink,
        paths: list[str],
    ) -> dict[str, str]:
        """Write each present variable, appending written paths to *paths*.

        A file that was created before its write failed is still appended so
        teardown removes it.
        """
        overrides: dict[str, str] = {}
        tmp: Path | None = None
        for variable in self._variables:
            value = environment.get(variable)
            if value is None:
                logger.debug("%s is not set; nothing to externalize", variable)
                continue
            try:
                data = value.encode("utf-8")
            except UnicodeEncodeError as exc:
                msg = f"Could not encode {variable} as UTF-8: {exc}"
                raise FatalSetupError(msg) from exc
            if tmp is None:
                tmp = self._temp_dir(workspace)
            output = tmp / f"{variable}.txt"
            path = str(output)
            try:
                output.write_bytes(data)
            except BaseException as exc:
                if output.exists():
                    paths.append(path)
                if not isinstance(exc, OSError):
                    raise
                msg = f"Could not write {variable} to {output}: {exc}"
                raise FatalSetupError(msg) from exc
            paths.append(path)
            overrides[variable] = path
            sink.println(f"Wrote {variable} to {path}")
        return overrides

    def set_up(
        self,
        environment: t.Mapping[str, str],
        workspace: Workspace | None,
        sink: DiagnosticSink,
    ) -> SetupResult:
        """Write configured variables to files and return their overrides.

        Raises
        ------
        FatalSetupError
            When a value cannot be encoded, or the scoped directory or a file
            cannot be written. The exception's ``record`` lists files written
            before the failure.
        BaseException
            Anything else, such as ``KeyboardInterrupt``, propagates
            unchanged after the files written so far have been deleted.
        """
        paths: list[str] = []
        try:
            overrides = self._write_all(environment, workspace, sink, paths)
        except FatalSetupError as exc:
            exc.record = ExternalizationRecord(tuple(paths))
            raise
        except BaseException:
            if paths:
                self.tear_down(ExternalizationRecord(tuple(paths)), workspace, sink)
            raise
        return SetupResult(
            env_overrides=overrides, record=ExternalizationRecord(tuple(paths))
        )

    def tear_down(
        self,
        record: ExternalizationRecord,
        workspace: Workspace | None,
        sink: DiagnosticSink,
    ) -> list[CleanupError]:
        """Delete the files listed in *record*; see :func:`tear_down`."""
        return tear_down(record, workspace, sink, retry=self.settings.unlink_retry)

    def session(
        self,
        environment: t.Mapping[str, str],
        workspace: Workspace | None,
        sink: DiagnosticSink,
        *,
        export: bool = False,
    ) -> ExternalizedEnvironment:
        """Return a context manager pairing :meth:`set_up` and :meth:`tear_down`."""
        return ExternalizedEnvironment(
            self, environment, workspace, sink, export=export
        )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"Env2FileWrapper({self._variables!r})"


class ExternalizedEnvironment:
    """Run a block with externalized variables and always delete the files.

    Teardown runs exactly once, after the block finishes, however it
    finishes. Cleanup failures are reported through the sink and
    ``cleanup_errors`` and never replace the block's own outcome. With
    ``export=True`` the overrides are also applied to ``os.environ`` while
    the block runs.
    """

    def __init__(
        self,
        wrapper: Env2FileWrapper,
        environment: t.Mapping[str, str],
        workspace: Workspace | None,
        sink: DiagnosticSink,
        *,
        export: bool = False,
    ) -> None:
        self._wrapper = wrapper
        self._base = dict(environment)
        self._workspace = workspace
        self._sink = sink
        self._export = export
        self._exit_stack = contextlib.ExitStack()
        self.phase = WrapperPhase.IDLE
        self.record = ExternalizationRecord()
        self.env_overrides: dict[str, str] = {}
        self.environment: dict[str, str] = dict(self._base)
        self.cleanup_errors: list[CleanupError] = []

    def __enter__(self) -> ExternalizedEnvironment:
        """Run setup, tearing down any partial output if it fails."""
        if self.phase is not WrapperPhase.IDLE:
            msg = f"Cannot set up externalized environment in phase {self.phase}"
            raise LifecycleError(msg)

        self.phase = WrapperPhase.SETUP_RUNNING
        try:
            result = self._wrapper.set_up(self._base, self._workspace, self._sink)
        except BaseException as exc:
            self.phase = WrapperPhase.SETUP_FAILED
            if isinstance(exc, FatalSetupError) and exc.record is not None:
                self.record = exc.record
            self.tear_down()
            raise

        self.record = result.record
        self.env_overrides = result.env_overrides
        self.environment = merge_overrides(self._base, result.env_overrides)
        self.phase = WrapperPhase.SETUP_COMPLETE
        if self._export:
            self._exit_stack.enter_context(temporary_env(result.env_overrides))
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        """Restore any exported variables, then delete the written files.

        Teardown is skipped when the block already ran it by hand.
        """
        try:
            self._exit_stack.close()
        finally:
            if self.phase is not WrapperPhase.TEARDOWN_COMPLETE:
                self.tear_down()

    def tear_down(self) -> list[CleanupError]:
        """Delete the recorded files. May only run once per session."""
        if self.phase in (WrapperPhase.IDLE, WrapperPhase.SETUP_RUNNING):
            msg = f"Cannot tear down externalized environment in phase {self.phase}"
            raise LifecycleError(msg)
        if self.phase in (
            WrapperPhase.TEARDOWN_RUNNING,
            WrapperPhase.TEARDOWN_COMPLETE,
        ):
            msg = "Externalized environment has already been torn down"
            raise LifecycleError(msg)

        self.phase = WrapperPhase.TEARDOWN_RUNNING
        try:
            self.cleanup_errors = self._wrapper.tear_down(
                self.record, self._workspace, self._sink
            )
        finally:
            self.phase = WrapperPhase.TEARDOWN_COMPLETE
        return self.cleanup_errors


__all__ = [
    "CleanupError",
    "Env2FileWrapper",
    "ExternalizationRecord",
    "ExternalizationRecordDict",
    "ExternalizedEnvironment",
    "SetupResult",
    "WrapperPhase",
    "tear_down",
]
