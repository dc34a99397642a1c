"""
Unit tests for classifying and validating the arguments of register().

Tests verify that handlers and namespace maps are told apart by shape, that
malformed names, maps and middleware are rejected with a ValidationError,
and that build_request() picks the single or batch form.
"""

from typing import Any

import pytest

import registrar
from registrar import shapes


def one_input(input_: Any) -> Any:
    return input_


def no_input() -> None:
    pass


def two_inputs(a: Any, b: Any) -> None:
    pass


def test_is_handler_accepts_single_input_callables() -> None:
    """Test the kinds of callables that accept one input."""

    async def async_handler(input_: Any) -> Any:
        return input_

    def with_default(input_: Any, extra: int = 0) -> Any:
        return input_

    def varargs(*args: Any) -> None:
        pass

    class Parser(object):
        def parse(self, input_: Any) -> Any:
            return input_

    assert shapes.is_handler(one_input)
    assert shapes.is_handler(async_handler)
    assert shapes.is_handler(with_default)
    assert shapes.is_handler(varargs)
    assert shapes.is_handler(lambda x: x)
    assert shapes.is_handler(Parser().parse)
    assert shapes.is_handler(str)


def test_is_handler_accepts_no_input_callables() -> None:
    """Test that handlers taking no input at all are handlers too."""

    async def get_games() -> list:
        return []

    assert shapes.is_handler(no_input)
    assert shapes.is_handler(get_games)
    assert shapes.is_handler(lambda: None)


def test_accepts_input() -> None:
    assert shapes.accepts_input(one_input)
    assert shapes.accepts_input(str)
    assert not shapes.accepts_input(no_input)
    assert not shapes.accepts_input(lambda: None)


def test_is_handler_rejects_other_values() -> None:
    assert not shapes.is_handler(two_inputs)
    assert not shapes.is_handler(42)
    assert not shapes.is_handler("ping")
    assert not shapes.is_handler({"a": one_input})
    assert not shapes.is_handler(None)


def test_classify() -> None:
    assert shapes.classify(one_input) == shapes.HANDLER
    assert shapes.classify({"a": one_input}) == shapes.NAMESPACE_MAP
    assert shapes.classify({}) == shapes.NAMESPACE_MAP


def test_classify_invalid_names_both_shapes() -> None:
    with pytest.raises(registrar.ValidationError, match="handler .* or a namespace map"):
        shapes.classify(42)


@pytest.mark.parametrize("value", [None, 42, b"ping", ["ping"], ""])
def test_validate_name_rejects(value: Any) -> None:
    with pytest.raises(registrar.ValidationError):
        shapes.validate_name(value)


def test_validate_name_accepts_current_marker() -> None:
    assert shapes.validate_name(".", "namespace") == "."


def test_validate_namespace_map_splits_middleware() -> None:
    """Test that the reserved middleware entry is split from the handlers."""
    mw = one_input
    handlers, middlewares = shapes.validate_namespace_map(
        {"a": one_input, "b": 42, "middleware": {"a": mw}}
    )

    assert list(handlers) == ["a", "b"]
    assert middlewares == {"a": mw}


def test_validate_namespace_map_explicit_middleware_overrides() -> None:
    def reserved(input_: Any) -> Any:
        return input_

    def explicit(input_: Any) -> Any:
        return input_

    _, middlewares = shapes.validate_namespace_map(
        {"a": one_input, "middleware": {"a": reserved}}, {"a": explicit}
    )

    assert middlewares["a"] is explicit


def test_validate_namespace_map_rejects_bad_keys() -> None:
    with pytest.raises(registrar.ValidationError, match="non-empty strings"):
        shapes.validate_namespace_map({1: one_input})

    with pytest.raises(registrar.ValidationError, match="non-empty strings"):
        shapes.validate_namespace_map({"": one_input})


def test_validate_namespace_map_rejects_bad_middleware() -> None:
    with pytest.raises(registrar.ValidationError, match="must be a mapping"):
        shapes.validate_namespace_map({"a": one_input, "middleware": one_input})

    with pytest.raises(registrar.ValidationError, match="must be a mapping"):
        shapes.validate_namespace_map({"a": one_input}, one_input)


def test_build_request_single() -> None:
    request = shapes.build_request("ping", one_input)

    assert isinstance(request, shapes.SingleRequest)
    assert request.path == "ping"
    assert request.handler is one_input
    assert request.middleware is None


def test_build_request_single_with_middleware() -> None:
    request = shapes.build_request("ping", one_input, str)

    assert isinstance(request, shapes.SingleRequest)
    assert request.middleware is str


def test_build_request_batch() -> None:
    request = shapes.build_request("nexus", {"a": one_input})

    assert isinstance(request, shapes.BatchRequest)
    assert request.namespace == "nexus"
    assert request.handlers == {"a": one_input}
    assert request.middlewares == {}


def test_build_request_rejects_non_handler_target() -> None:
    """Test that a value that is neither shape is refused in single form."""
    with pytest.raises(registrar.ValidationError):
        shapes.build_request("ping", "not a handler")

    with pytest.raises(registrar.ValidationError):
        shapes.build_request("ping", two_inputs)


def test_build_request_rejects_bad_single_middleware() -> None:
    with pytest.raises(registrar.ValidationError, match="Middleware for 'ping'"):
        shapes.build_request("ping", one_input, {"a": one_input})


def test_build_request_rejects_non_string_first_argument() -> None:
    with pytest.raises(registrar.ValidationError, match="path"):
        shapes.build_request(42, one_input)

    with pytest.raises(registrar.ValidationError, match="namespace"):
        shapes.build_request(None, {"a": one_input})
