"""Tests for result shapes and the result pipeline."""

import logging

import pytest

from .lib import (
    CheckResult,
    FindResult,
    FindStatus,
    OperateResult,
    PickResult,
    ResultPipeline,
    ValidateResult,
)


class TestResultShapes:
    """Constructors keep the shapes distinct."""

    @pytest.mark.unit
    def test_validate(self):
        """Validate results carry a value or a message."""
        assert ValidateResult.ok("a") == ValidateResult(valid=True, value="a")
        failed = ValidateResult.fail("bad id")
        assert not failed.valid
        assert failed.message == "bad id"

    @pytest.mark.unit
    def test_check_distinguishes_violation_from_error(self):
        """A violated rule is still a successful check."""
        violated = CheckResult.ok(False)
        broken = CheckResult.fail("missing ancestor")
        assert violated.success and not violated.passed
        assert not broken.success
        assert broken.error == "missing ancestor"

    @pytest.mark.unit
    def test_find_statuses(self):
        """Find results expose three statuses."""
        assert FindResult.found(3).status == FindStatus.FOUND
        assert FindResult.found(0).is_found
        assert FindResult.not_found().status == FindStatus.NOT_FOUND
        assert FindResult.not_found().data is None
        assert FindResult.failed("x").is_error
        assert FindStatus.NOT_FOUND.value == "not-found"

    @pytest.mark.unit
    def test_pick_and_operate(self):
        """Pick and operate results carry data or an error."""
        assert PickResult.ok({"a": 1}).data == {"a": 1}
        assert not PickResult.fail("missing").success
        assert OperateResult.ok([]).success
        assert OperateResult.fail("nope").error == "nope"


class TestResultPipeline:
    """Tests for chaining and short-circuiting."""

    @pytest.mark.unit
    def test_collects_data_across_steps(self):
        """Each step can use data gathered by earlier steps."""
        data = (
            ResultPipeline("[Test]")
            .validate({"value": ValidateResult.ok(2)})
            .pick(lambda d: {"double": PickResult.ok(d["value"] * 2)})
            .check(lambda d: {"is_even": CheckResult.ok(d["double"] % 2 == 0)})
            .operate(lambda d: {"total": OperateResult.ok(d["value"] + d["double"])})
            .execute()
        )
        assert data == {"value": 2, "double": 4, "is_even": True, "total": 6}

    @pytest.mark.unit
    def test_not_found_becomes_none(self):
        """Find steps map not-found to None without failing."""
        pipeline = ResultPipeline("[Test]").find({"index": FindResult.not_found()})
        assert pipeline.execute() == {"index": None}

    @pytest.mark.unit
    def test_first_failure_short_circuits(self, caplog):
        """Later steps are skipped and the failure is logged with context."""
        calls = []

        def later(data):
            calls.append(data)
            return {"never": OperateResult.ok(1)}

        with caplog.at_level(logging.WARNING):
            pipeline = (
                ResultPipeline("[BlockManager → test]")
                .validate({"id": ValidateResult.fail("Invalid node id")})
                .operate(later)
            )

        assert pipeline.execute() is None
        assert pipeline.failed
        assert pipeline.error == "Invalid node id"
        assert calls == []
        assert "[BlockManager → test] Invalid node id" in caplog.text

    @pytest.mark.unit
    def test_find_error_fails(self):
        """A find error fails the pipeline."""
        pipeline = ResultPipeline("[Test]").find({"index": FindResult.failed("lost")})
        assert pipeline.error == "lost"

    @pytest.mark.unit
    def test_check_error_fails_but_violation_does_not(self):
        """Unevaluable checks fail; violated rules are recorded as False."""
        ok = ResultPipeline("[Test]").check({"rule": CheckResult.ok(False)})
        assert ok.execute() == {"rule": False}

        broken = ResultPipeline("[Test]").check({"rule": CheckResult.fail("cycle")})
        assert broken.execute() is None

    @pytest.mark.unit
    def test_require(self):
        """Require fails with the given message when the predicate is false."""
        pipeline = (
            ResultPipeline("[Test]")
            .check({"allowed": CheckResult.ok(False)})
            .require(lambda d: d["allowed"], "Rule violated")
        )
        assert pipeline.error == "Rule violated"
