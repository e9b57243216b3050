"""Line-oriented diagnostic sinks handed to rules and the file wrapper.

A sink is the build-visible audit stream: each call to :meth:`println`
records one human-readable event. It is distinct from the module loggers,
which carry developer-facing traces.
"""

from __future__ import annotations

import logging
import sys
import typing as t


@t.runtime_checkable
class DiagnosticSink(t.Protocol):
    """Append-only text stream receiving one diagnostic event per line."""

    def println(self, line: str) -> None:
        """Append *line* to the stream."""
        ...


class StreamSink:
    """Write diagnostic lines to a text stream such as a build console."""

    def __init__(self, stream: t.TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def println(self, line: str) -> None:
        """Write *line* followed by a newline and flush."""
        self._stream.write(f"{line}\n")
        self._stream.flush()


class RecordingSink:
    """Keep diagnostic lines in memory."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def println(self, line: str) -> None:
        """Store *line*."""
        self.lines.append(line)

    @property
    def text(self) -> str:
        """Return the recorded lines joined as console output."""
        return "".join(f"{line}\n" for line in self.lines)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"RecordingSink({len(self.lines)} lines)"


class LoggingSink:
    """Forward diagnostic lines to a :class:`logging.Logger`."""

    def __init__(
        self, logger: logging.Logger | None = None, level: int = logging.INFO
    ) -> None:
        self._logger = logger or logging.getLogger("env_filters.diagnostics")
        self._level = level

    def println(self, line: str) -> None:
        """Log *line* at the configured level."""
        self._logger.log(self._level, "%s", line)


__all__ = ["DiagnosticSink", "LoggingSink", "RecordingSink", "StreamSink"]
