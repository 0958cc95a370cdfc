"""Tests for JobPayload identity, argument checks and invocation."""

import functools

import pytest

from clockspine.core.errors import JobArityError
from clockspine.scheduling import JobPayload, derive_name


def add(a, b):
    return a + b


def variadic(*args, **kwargs):
    return args, kwargs


async def async_add(a, b):
    return a + b


class Callback:
    def __call__(self, value):
        return value * 2


class TestDeriveName:
    def test_function(self):
        assert derive_name(add) == f"{add.__module__}.add"

    def test_partial_resolves_to_function(self):
        assert derive_name(functools.partial(add, 1)) == derive_name(add)

    def test_callable_instance_uses_class(self):
        assert derive_name(Callback()).endswith("Callback")

    def test_lambda(self):
        assert derive_name(lambda: None).endswith("<lambda>")


class TestJobPayload:
    def test_create_derives_name(self):
        payload = JobPayload.create(add, 1, 2)

        assert payload.name == derive_name(add)
        assert payload.args == (1, 2)

    def test_create_with_explicit_name(self):
        assert JobPayload.create(add, 1, 2, name="adder").name == "adder"

    def test_matches_name_or_callable(self):
        payload = JobPayload.create(add, 1, 2)

        assert payload.matches(add)
        assert payload.matches(derive_name(add))
        assert not payload.matches(variadic)
        assert not payload.matches("other")

    def test_check_arguments_ok(self):
        JobPayload.create(add, 1, b=2).check_arguments()
        JobPayload.create(variadic, 1, 2, 3, x=1).check_arguments()

    @pytest.mark.parametrize("args", [(), (1,), (1, 2, 3)])
    def test_check_arguments_mismatch(self, args):
        with pytest.raises(JobArityError):
            JobPayload.create(add, *args).check_arguments()

    def test_unexpected_keyword(self):
        with pytest.raises(JobArityError):
            JobPayload.create(add, 1, 2, c=3).check_arguments()

    def test_invoke(self):
        assert JobPayload.create(add, 1, 2).invoke() == 3

    def test_invoke_coroutine_function(self):
        assert JobPayload.create(async_add, 2, 3).invoke() == 5

    def test_invoke_callable_instance(self):
        assert JobPayload.create(Callback(), 4).invoke() == 8
