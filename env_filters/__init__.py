"""Filter, inject, and externalize build environment variables.

Rules (:class:`RegexValueFilter`, :class:`StaticInjectionFilter`) mutate an
environment map before a unit of work runs; :class:`Env2FileWrapper` moves
selected values into files for the duration of that work and deletes them
afterwards.
"""

from __future__ import annotations

from .actions import REDACTED, FilterAction
from .applicability import ApplicabilityGate
from .chain import apply_rule, apply_rules
from .config import Settings, load_settings
from .context import ApplicabilityContext, RuleContext, RunIdentity
from .diagnostics import DiagnosticSink, LoggingSink, RecordingSink, StreamSink
from .env2file import (
    CleanupError,
    Env2FileWrapper,
    ExternalizationRecord,
    ExternalizedEnvironment,
    SetupResult,
    WrapperPhase,
    tear_down,
)
from .environment import merge_overrides, temporary_env
from .errors import (
    EnvFiltersError,
    ExternalizedFileDeletionError,
    FatalSetupError,
    FilterError,
    LifecycleError,
    PatternError,
)
from .rules import EnvironmentRule, RegexValueFilter, StaticInjectionFilter

__all__ = [
    "REDACTED",
    "ApplicabilityContext",
    "ApplicabilityGate",
    "CleanupError",
    "DiagnosticSink",
    "Env2FileWrapper",
    "EnvFiltersError",
    "EnvironmentRule",
    "ExternalizationRecord",
    "ExternalizedEnvironment",
    "ExternalizedFileDeletionError",
    "FatalSetupError",
    "FilterAction",
    "FilterError",
    "LifecycleError",
    "LoggingSink",
    "PatternError",
    "RecordingSink",
    "RegexValueFilter",
    "RuleContext",
    "RunIdentity",
    "SetupResult",
    "Settings",
    "StaticInjectionFilter",
    "StreamSink",
    "WrapperPhase",
    "apply_rule",
    "apply_rules",
    "load_settings",
    "merge_overrides",
    "tear_down",
    "temporary_env",
]
