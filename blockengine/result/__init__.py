"""Structured result shapes shared by every engine.

Example:
    >>> from blockengine.result import CheckResult, FindResult, ResultPipeline
    >>>
    >>> CheckResult.ok(False)        # rule violated, snapshot consistent
    >>> CheckResult.fail("cycle")    # snapshot inconsistent
    >>> FindResult.not_found()       # legitimate no-op signal
"""

from .lib import (
    CheckResult,
    FindResult,
    FindStatus,
    OperateResult,
    PickResult,
    ResultPipeline,
    ValidateResult,
)

__all__ = [
    # Result shapes
    "ValidateResult",
    "CheckResult",
    "FindStatus",
    "FindResult",
    "PickResult",
    "OperateResult",
    # Pipeline
    "ResultPipeline",
]
