"""
In-process endpoint transport.

This is the default endpoint factory of the registrar. Endpoints listen in a
module level table keyed by name instead of on a named pipe or socket, which
makes them reachable from anything running in the same interpreter through
call().

Like any transport, this one owns its endpoints: names are unique among
listening endpoints, and errors raised while serving a call are announced to
the endpoint's error callbacks before being raised to the caller.
"""

import asyncio
import inspect
import logging
from typing import Any
from typing import Optional

from registrar import endpoint
from registrar import shapes
from registrar.errors import RegistrarError


logger = logging.getLogger(__name__)

_LISTENING: dict[str, "LocalEndpoint"] = {}
"""Listening endpoints by name."""


class EndpointInUseError(RegistrarError):
    """Raised when listening on a name that is already taken."""


class EndpointNotFoundError(RegistrarError):
    """Raised when no endpoint listens on the requested name."""


async def _invoke(callable_: endpoint.HANDLER, input_: Any) -> Any:
    if shapes.accepts_input(callable_):
        result = callable_(input_)
    else:
        result = callable_()

    if inspect.isawaitable(result):
        result = await result

    return result


class LocalEndpoint(object):
    """A handler, its optional middleware and the name it listens on."""

    def __init__(
        self,
        handler: endpoint.HANDLER,
        middleware: Optional[endpoint.MIDDLEWARE] = None,
    ) -> None:
        self.handler = handler
        self.middleware = middleware
        self.name: Optional[str] = None
        self._error_callbacks: list[endpoint.ERROR_CALLBACK] = []

    def __repr__(self) -> str:
        return f"<LocalEndpoint name={self.name!r}>"

    @property
    def is_listening(self) -> bool:
        return self.name is not None

    def on_error(self, callback: endpoint.ERROR_CALLBACK) -> None:
        """Call callback with every exception raised while serving a call."""
        self._error_callbacks.append(callback)

    async def listen(self, name: str) -> str:
        """
        Start listening under name.

        Args:
            name (str): The name to listen on.
        Returns:
            str: The identifier callers reach the endpoint with.
        Raises:
            EndpointInUseError: If this endpoint already listens, or another
                endpoint listens on name.
        """
        if self.name is not None:
            raise EndpointInUseError(f"Endpoint already listening on '{self.name}'")

        # Binding is the one point a real transport waits on.
        await asyncio.sleep(0)

        if name in _LISTENING:
            raise EndpointInUseError(f"Endpoint name already in use: '{name}'")

        _LISTENING[name] = self
        self.name = name
        return name

    async def call(self, input_: Any = None) -> Any:
        """
        Serve one request: run the middleware, then the handler.
        Awaitable results of either are awaited. Callables taking no
        arguments are called without the input.
        """
        try:
            value = input_
            if self.middleware is not None:
                value = await _invoke(self.middleware, value)

            return await _invoke(self.handler, value)

        except Exception as e:
            for callback in list(self._error_callbacks):
                callback(e)
            raise

    def close(self) -> None:
        """Stop listening. Closing an endpoint that is not listening does nothing."""
        if self.name is None:
            return

        if _LISTENING.get(self.name) is self:
            del _LISTENING[self.name]

        logger.debug(f"Closed local endpoint '{self.name}'")
        self.name = None


def create(
    handler: endpoint.HANDLER, middleware: Optional[endpoint.MIDDLEWARE] = None
) -> LocalEndpoint:
    """Endpoint factory for the in-process transport."""
    return LocalEndpoint(handler, middleware)


def get_endpoint(name: str) -> LocalEndpoint:
    """
    Get the endpoint listening on name.

    Raises:
        EndpointNotFoundError: If nothing listens on name.
    """
    try:
        return _LISTENING[name]
    except KeyError:
        raise EndpointNotFoundError(f"No endpoint listening on '{name}'") from None


async def call(name: str, input_: Any = None) -> Any:
    """Call the endpoint listening on name with input_ and return its result."""
    return await get_endpoint(name).call(input_)


def get_endpoint_names() -> list[str]:
    """Get the names of all listening endpoints."""
    return sorted(_LISTENING.keys())


def clear() -> None:
    """Close every listening endpoint."""
    for local_endpoint in list(_LISTENING.values()):
        local_endpoint.close()
