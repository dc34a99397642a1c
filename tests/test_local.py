"""Unit tests for the in-process endpoint transport."""

import asyncio
from typing import Any

import pytest

import registrar
from registrar import local


def echo(input_: Any) -> Any:
    return input_


@pytest.mark.asyncio
async def test_listen_and_call() -> None:
    local.clear()
    endpoint = local.create(echo)

    assert not endpoint.is_listening
    assert await endpoint.listen("echo") == "echo"
    assert endpoint.is_listening
    assert await local.call("echo", 5) == 5


@pytest.mark.asyncio
async def test_awaitable_middleware_and_handler() -> None:
    local.clear()

    async def parse(input_: Any) -> int:
        await asyncio.sleep(0)
        return int(input_)

    async def square(input_: int) -> int:
        return input_ * input_

    endpoint = local.create(square, parse)
    await endpoint.listen("square")

    assert await endpoint.call("3") == 9


@pytest.mark.asyncio
async def test_listen_twice_raises() -> None:
    local.clear()
    endpoint = local.create(echo)
    await endpoint.listen("echo")

    with pytest.raises(local.EndpointInUseError, match="already listening"):
        await endpoint.listen("other")


@pytest.mark.asyncio
async def test_duplicate_name_raises() -> None:
    local.clear()
    await local.create(echo).listen("echo")

    with pytest.raises(local.EndpointInUseError, match="already in use"):
        await local.create(echo).listen("echo")


def test_unknown_endpoint_raises() -> None:
    local.clear()

    with pytest.raises(local.EndpointNotFoundError):
        local.get_endpoint("missing")


@pytest.mark.asyncio
async def test_errors_reach_callbacks_and_caller() -> None:
    local.clear()
    seen: list[Exception] = []

    def fail(input_: Any) -> None:
        raise KeyError(input_)

    endpoint = local.create(fail)
    endpoint.on_error(seen.append)
    await endpoint.listen("fail")

    with pytest.raises(KeyError):
        await local.call("fail", "key")

    assert len(seen) == 1
    assert isinstance(seen[0], KeyError)


@pytest.mark.asyncio
async def test_close_and_clear() -> None:
    local.clear()
    first = local.create(echo)
    second = local.create(echo)
    await first.listen("b")
    await second.listen("a")

    assert local.get_endpoint_names() == ["a", "b"]

    first.close()
    first.close()
    assert not first.is_listening
    assert local.get_endpoint_names() == ["a"]

    local.clear()
    assert local.get_endpoint_names() == []
    assert not second.is_listening


def test_errors_share_a_base_class() -> None:
    assert issubclass(local.EndpointInUseError, registrar.RegistrarError)
    assert issubclass(registrar.ValidationError, registrar.RegistrarError)
