"""Comparators and predicates used to scope rules to runs and subjects.

String comparators are the building blocks; :class:`JobName` lifts one onto
a :class:`~env_filters.context.RunIdentity` for use as an exclusion, and
:class:`SubjectCategory` lifts one onto a categorised subject for use as a
descriptor matcher.
"""

from __future__ import annotations

import re
import typing as t

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .context import RunIdentity


class Comparator(t.Protocol):
    """Test a job name or subject category against a condition."""

    def __call__(self, value: str) -> bool:
        """Return ``True`` when *value* should be selected."""
        ...


RunMatcher = t.Callable[["RunIdentity"], bool]
SubjectMatcher = t.Callable[[object], bool]


class Any:
    """Select every job name or category, e.g. to exclude all runs."""

    def __call__(self, value: str) -> bool:
        """Always select."""
        return True

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return "Any()"


class Equals:
    """Match values equal to ``expected``."""

    def __init__(self, expected: str) -> None:
        self.expected = expected

    def __call__(self, value: str) -> bool:
        """Return ``True`` if *value* equals ``expected``."""
        return value == self.expected

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"Equals({self.expected!r})"


class OneOf:
    """Match values contained in a fixed set."""

    def __init__(self, *values: str) -> None:
        self.values = frozenset(values)

    def __call__(self, value: str) -> bool:
        """Return ``True`` if *value* is one of ``values``."""
        return value in self.values

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"OneOf({', '.join(repr(v) for v in sorted(self.values))})"


class Regex:
    """Match if ``pattern`` matches the whole of *value*."""

    def __init__(self, pattern: str) -> None:
        self._pattern = re.compile(pattern)

    def __call__(self, value: str) -> bool:
        """Return ``True`` if the regex matches all of *value*."""
        return self._pattern.fullmatch(value) is not None

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"Regex({self._pattern.pattern!r})"


class StartsWith:
    """Select names sharing a prefix, such as every ``release-`` job."""

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix

    def __call__(self, value: str) -> bool:
        """Return ``True`` when *value* carries the configured prefix."""
        return value.startswith(self.prefix)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"StartsWith({self.prefix!r})"


class Predicate:
    """Defer selection to a host-supplied callable."""

    def __init__(self, func: t.Callable[[str], bool]) -> None:
        self.func = func

    def __call__(self, value: str) -> bool:
        """Return the truthiness of ``func(value)``."""
        return bool(self.func(value))

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"Predicate({self.func})"


class JobName:
    """Exclude runs whose job name satisfies ``comparator``."""

    def __init__(self, comparator: Comparator | str) -> None:
        self.comparator = (
            Equals(comparator) if isinstance(comparator, str) else comparator
        )

    def __call__(self, run: RunIdentity) -> bool:
        """Return ``True`` if the run's job name matches."""
        return self.comparator(run.job_name)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"JobName({self.comparator!r})"


@t.runtime_checkable
class Categorized(t.Protocol):
    """A subject that advertises the category of build step it belongs to."""

    @property
    def category(self) -> str:
        """Return the subject's category identifier."""
        ...


class SubjectCategory:
    """Accept subjects whose category satisfies ``comparator``.

    Subjects without a category are accepted: the host only tags the
    subjects whose category it wants rules to discriminate on.
    """

    def __init__(self, comparator: Comparator) -> None:
        self.comparator = comparator

    def __call__(self, subject: object) -> bool:
        """Return ``True`` unless a categorised subject fails the comparator."""
        if not isinstance(subject, Categorized):
            return True
        return self.comparator(subject.category)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"SubjectCategory({self.comparator!r})"


__all__ = [
    "Any",
    "Categorized",
    "Comparator",
    "Equals",
    "JobName",
    "OneOf",
    "Predicate",
    "Regex",
    "RunMatcher",
    "StartsWith",
    "SubjectCategory",
    "SubjectMatcher",
]
