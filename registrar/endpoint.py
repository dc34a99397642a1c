"""
Endpoint contract and type definitions for the registrar.

The registrar never listens on anything itself. An endpoint factory turns a
handler (and optional middleware) into an Endpoint, and the Endpoint turns a
name into a listening identifier. Everything after listen() belongs to the
transport.
"""

from typing import Any
from typing import Awaitable
from typing import Callable
from typing import Optional
from typing import Protocol
from typing import Union

HANDLER = Callable[[Any], Union[Any, Awaitable[Any]]]
"""
A capability function receiving one input value. May return the result
directly or an awaitable of it.
"""

MIDDLEWARE = Callable[[Any], Any]
"""
Transforms the raw input before it reaches the paired handler. The effective
handler of an endpoint is `lambda input_: handler(middleware(input_))`.
"""

ERROR_CALLBACK = Callable[[Exception], None]
"""Receives each error an endpoint raises after it started listening."""


class Endpoint(Protocol):
    """A listening resource bound to one handler, owned by its transport."""

    def on_error(self, callback: ERROR_CALLBACK) -> None:
        """Subscribe to errors raised while serving requests."""

    async def listen(self, name: str) -> str:
        """Start listening under name and return the resulting identifier."""


ENDPOINT_FACTORY = Callable[[HANDLER, Optional[MIDDLEWARE]], Endpoint]
"""Creates an Endpoint from a handler and optional middleware."""
