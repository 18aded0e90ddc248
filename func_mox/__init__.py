"""Mocks and stubs for Python functions and methods with call verification.

Targets are redirected to a dispatcher that serves each call from the
expectations registered for it, in order, and reconciles call counts when
the test ends::

    mox = FuncMox()
    mox.mock(service.fetch).expects("id-1").returns({"id": 1}).once()
    ...
    mox.verify()
"""

from __future__ import annotations

from .builder import ExpectsSet, MockSetup, ReturnsSet, StubSetup
from .comparators import (
    Anything,
    Exact,
    Matcher,
    Matching,
    anything,
    contains,
    is_a,
    matches,
    regex,
    starts_with,
)
from .controller import FuncMox, Phase
from .errors import (
    FuncMoxError,
    LifecycleError,
    SetupError,
    UnregisteredCallError,
    UsageError,
    VerificationError,
)
from .expectations import Expectation
from .patching import AttributePatcher, Patcher
from .reporting import CollectingReporter, TestReporter, UnitTestReporter
from .side_effects import (
    GeneralSideEffect,
    ParamSideEffect,
    SideEffect,
    general_side_effect,
    param_side_effect,
)
from .targets import Mode, TargetEntry, TargetIdentity, resolve_target

__all__ = [
    "Anything",
    "AttributePatcher",
    "CollectingReporter",
    "Exact",
    "Expectation",
    "ExpectsSet",
    "FuncMox",
    "FuncMoxError",
    "GeneralSideEffect",
    "LifecycleError",
    "Matcher",
    "Matching",
    "MockSetup",
    "Mode",
    "ParamSideEffect",
    "Patcher",
    "Phase",
    "ReturnsSet",
    "SetupError",
    "SideEffect",
    "StubSetup",
    "TargetEntry",
    "TargetIdentity",
    "TestReporter",
    "UnitTestReporter",
    "UnregisteredCallError",
    "UsageError",
    "VerificationError",
    "anything",
    "contains",
    "general_side_effect",
    "is_a",
    "matches",
    "param_side_effect",
    "regex",
    "resolve_target",
    "starts_with",
]
