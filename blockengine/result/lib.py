"""Structured result shapes and the result pipeline.

Every engine call reports its outcome through one of these shapes instead of
raising or returning a bare boolean:

- ValidateResult: input well-formedness (`valid` + `value` or `message`)
- CheckResult: rule predicates (`success` + `passed` or `error`)
- FindResult: lookups where "not found" is a legitimate outcome
- PickResult: required lookups where absence is a failure
- OperateResult: computations and mutations producing new data

`ResultPipeline` chains dependent steps and stops at the first failure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Result Shapes
# =============================================================================


@dataclass(frozen=True)
class ValidateResult(Generic[T]):
    """Outcome of validating a raw input.

    Attributes:
        valid: Whether the input is acceptable.
        value: The validated (possibly normalized) value when valid.
        message: Reason for rejection when invalid.
    """

    valid: bool
    value: T | None = None
    message: str = ""

    @classmethod
    def ok(cls, value: T) -> ValidateResult[T]:
        return cls(valid=True, value=value)

    @classmethod
    def fail(cls, message: str) -> ValidateResult[T]:
        return cls(valid=False, message=message)


@dataclass(frozen=True)
class CheckResult:
    """Outcome of a rule predicate.

    `passed=False` is a normal rule outcome. `success=False` means the check
    could not be evaluated, e.g. the snapshot is inconsistent.

    Attributes:
        success: Whether the check could be evaluated.
        passed: The predicate value when evaluated.
        error: Reason the check could not be evaluated.
    """

    success: bool
    passed: bool = False
    error: str = ""

    @classmethod
    def ok(cls, passed: bool) -> CheckResult:
        return cls(success=True, passed=passed)

    @classmethod
    def fail(cls, error: str) -> CheckResult:
        return cls(success=False, error=error)


class FindStatus(str, Enum):
    """Status of a lookup."""

    FOUND = "found"
    NOT_FOUND = "not-found"
    ERROR = "error"


@dataclass(frozen=True)
class FindResult(Generic[T]):
    """Outcome of a lookup where absence may be expected.

    Attributes:
        status: One of found, not-found or error.
        data: The located value when found.
        error: Reason for failure when status is error.
    """

    status: FindStatus
    data: T | None = None
    error: str = ""

    @classmethod
    def found(cls, data: T) -> FindResult[T]:
        return cls(status=FindStatus.FOUND, data=data)

    @classmethod
    def not_found(cls) -> FindResult[T]:
        return cls(status=FindStatus.NOT_FOUND)

    @classmethod
    def failed(cls, error: str) -> FindResult[T]:
        return cls(status=FindStatus.ERROR, error=error)

    @property
    def is_found(self) -> bool:
        return self.status == FindStatus.FOUND

    @property
    def is_error(self) -> bool:
        return self.status == FindStatus.ERROR


@dataclass(frozen=True)
class PickResult(Generic[T]):
    """Outcome of a required lookup (missing data is a failure)."""

    success: bool
    data: T | None = None
    error: str = ""

    @classmethod
    def ok(cls, data: T) -> PickResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> PickResult[T]:
        return cls(success=False, error=error)


@dataclass(frozen=True)
class OperateResult(Generic[T]):
    """Outcome of a computation or mutation."""

    success: bool
    data: T | None = None
    error: str = ""

    @classmethod
    def ok(cls, data: T) -> OperateResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> OperateResult[T]:
        return cls(success=False, error=error)


# =============================================================================
# Result Pipeline
# =============================================================================

Step = Mapping[str, Any] | Callable[[dict[str, Any]], Mapping[str, Any]]


class ResultPipeline:
    """Chain of dependent validation, lookup and operation steps.

    Each step receives either a mapping of named results or a callable that
    builds that mapping from the data gathered so far. Successful values are
    merged into the gathered data under their names. The first failure is
    logged as "{context} {message}" and every later step is skipped.

    Example:
        >>> data = (
        ...     ResultPipeline("[Example]")
        ...     .validate({"node_id": validate_node_id("a")})
        ...     .pick(lambda d: {"node": pick_node(d["node_id"], nodes)})
        ...     .execute()
        ... )
    """

    def __init__(self, context: str):
        self.context = context
        self._data: dict[str, Any] = {}
        self._error: str | None = None

    @property
    def failed(self) -> bool:
        return self._error is not None

    @property
    def error(self) -> str | None:
        """First failure message, or None while the pipeline is healthy."""
        return self._error

    @property
    def data(self) -> dict[str, Any]:
        return dict(self._data)

    def _resolve(self, step: Step) -> Mapping[str, Any]:
        return step(dict(self._data)) if callable(step) else step

    def _fail(self, message: str) -> ResultPipeline:
        logger.warning(f"{self.context} {message}")
        self._error = message
        return self

    def validate(self, step: Step) -> ResultPipeline:
        if self.failed:
            return self
        for key, result in self._resolve(step).items():
            if not result.valid:
                return self._fail(result.message)
            self._data[key] = result.value
        return self

    def pick(self, step: Step) -> ResultPipeline:
        if self.failed:
            return self
        for key, result in self._resolve(step).items():
            if not result.success:
                return self._fail(result.error)
            self._data[key] = result.data
        return self

    def find(self, step: Step) -> ResultPipeline:
        """Merge found data; not-found becomes None, error fails the pipeline."""
        if self.failed:
            return self
        for key, result in self._resolve(step).items():
            if result.status == FindStatus.ERROR:
                return self._fail(result.error)
            self._data[key] = result.data if result.status == FindStatus.FOUND else None
        return self

    def check(self, step: Step) -> ResultPipeline:
        """Merge predicate values; an unevaluable check fails the pipeline."""
        if self.failed:
            return self
        for key, result in self._resolve(step).items():
            if not result.success:
                return self._fail(result.error)
            self._data[key] = result.passed
        return self

    def operate(self, step: Step) -> ResultPipeline:
        if self.failed:
            return self
        for key, result in self._resolve(step).items():
            if not result.success:
                return self._fail(result.error)
            self._data[key] = result.data
        return self

    def require(
        self, predicate: Callable[[dict[str, Any]], bool], message: str
    ) -> ResultPipeline:
        """Fail with `message` unless the predicate holds for the gathered data."""
        if self.failed:
            return self
        if not predicate(dict(self._data)):
            return self._fail(message)
        return self

    def execute(self) -> dict[str, Any] | None:
        """Return the gathered data, or None if any step failed."""
        return None if self.failed else dict(self._data)


__all__ = [
    "ValidateResult",
    "CheckResult",
    "FindStatus",
    "FindResult",
    "PickResult",
    "OperateResult",
    "ResultPipeline",
]
