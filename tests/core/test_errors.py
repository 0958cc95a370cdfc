"""Tests for clockspine.core.errors module."""

import pytest

from clockspine.core.errors import (
    ClockspineError,
    ConfigError,
    ErrorCategory,
    ErrorContext,
    IntervalError,
    InvalidConfigError,
    JobAlreadyArmedError,
    JobArityError,
    JobExecutionError,
    NotCallableError,
    ScheduleConfigError,
    TimeFormatError,
    categorize_error,
)


class TestErrorContext:
    """Test ErrorContext dataclass."""

    def test_create_empty_context(self):
        ctx = ErrorContext()
        assert ctx.job is None
        assert ctx.metadata == {}
        assert ctx.to_dict() == {}

    def test_to_dict_excludes_none(self):
        ctx = ErrorContext(job="backup", interval=5, metadata={"expected": 2})

        d = ctx.to_dict()

        assert d == {"job": "backup", "interval": 5, "expected": 2}
        assert "unit" not in d


class TestClockspineError:
    """Test base error behaviour."""

    def test_default_category(self):
        assert ClockspineError("boom").category == ErrorCategory.INTERNAL

    def test_cause_is_chained(self):
        cause = ValueError("bad")
        error = ClockspineError("wrapped", cause=cause)

        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == "bad"

    def test_with_context_typed_and_metadata(self):
        error = ClockspineError("x").with_context(job="report", expected=2)

        assert error.context.job == "report"
        assert error.context.metadata == {"expected": 2}

    def test_to_dict(self):
        d = JobArityError("bad args").with_context(job="report").to_dict()

        assert d["error_type"] == "JobArityError"
        assert d["message"] == "bad args"
        assert d["category"] == "EXECUTION"
        assert d["context"] == {"job": "report"}

    def test_repr(self):
        assert repr(JobAlreadyArmedError("armed")) == (
            "JobAlreadyArmedError('armed', category=CONFIG)"
        )


class TestHierarchy:
    """Misuse vs. execution failures."""

    @pytest.mark.parametrize(
        "error",
        [
            IntervalError("bad interval"),
            TimeFormatError("25:00"),
            NotCallableError(42),
            JobAlreadyArmedError("armed"),
        ],
    )
    def test_config_misuse(self, error):
        assert isinstance(error, ScheduleConfigError)
        assert error.category == ErrorCategory.CONFIG

    def test_arity_is_execution_error(self):
        error = JobArityError("mismatch")

        assert isinstance(error, JobExecutionError)
        assert not isinstance(error, ScheduleConfigError)
        assert error.category == ErrorCategory.EXECUTION

    def test_interval_recorded_in_context(self):
        error = IntervalError("singular unit", interval=3)

        assert error.interval == 3
        assert error.context.interval == 3

    def test_time_format_message(self):
        error = TimeFormatError("10-30")

        assert error.value == "10-30"
        assert "'10-30'" in error.message

    def test_not_callable_names_type(self):
        assert "str" in NotCallableError("nope").message

    def test_invalid_config(self):
        error = InvalidConfigError("timezone", "Mars/Base")

        assert isinstance(error, ConfigError)
        assert error.key == "timezone"
        assert "Mars/Base" in error.message


class TestCategorizeError:
    def test_clockspine_error(self):
        assert categorize_error(JobArityError("x")) == ErrorCategory.EXECUTION

    def test_value_error(self):
        assert categorize_error(ValueError("x")) == ErrorCategory.CONFIG

    def test_unknown(self):
        assert categorize_error(RuntimeError("x")) == ErrorCategory.UNKNOWN
