"""
Namespace flattening for the registrar.

A namespace map describes a batch of related endpoints. Flattening it yields
one Registration per handler entry, each with its composed path and the
middleware sharing its key. Entries that are not handlers are dropped
without complaint, and so is middleware that is not handler shaped or has
no handler to pair with.
"""

from dataclasses import dataclass
from typing import Any
from typing import Mapping
from typing import Optional
from typing import Union

from registrar import endpoint
from registrar import paths
from registrar import shapes


NAMESPACE_MAP = Mapping[str, Union[endpoint.HANDLER, Mapping[str, endpoint.MIDDLEWARE]]]
"""
Handlers by property name, plus an optional reserved 'middleware' entry
mapping the same property names to middleware.
"""


@dataclass(frozen=True)
class Registration(object):
    """A single leaf of a flattened namespace."""

    path: str
    """The composed path, e.g. 'nexus/getGames'."""

    handler: endpoint.HANDLER
    """The handler to serve at the path."""

    middleware: Optional[endpoint.MIDDLEWARE] = None
    """Applied to the input before the handler sees it."""


def flatten(
    namespace: str,
    handlers: Mapping[str, Any],
    middlewares: Optional[Mapping[str, Any]] = None,
) -> list[Registration]:
    """
    Flatten a namespace into registrations, in the order of its entries.

    Args:
        namespace (str): Prefix for every registration path. '.' means none.
        handlers (Mapping[str, Any]): Handler candidates by property name.
        middlewares (Optional[Mapping[str, Any]]): Middleware candidates by
            property name. Defaults to the reserved 'middleware' entry of
            handlers.
    Returns:
        list[Registration]: One registration per handler-shaped entry.
    """
    if middlewares is None:
        middlewares = handlers.get(shapes.RESERVED_MIDDLEWARE_KEY)
        if not isinstance(middlewares, Mapping):
            middlewares = {}

    registrations = []
    for key, value in handlers.items():
        if key == shapes.RESERVED_MIDDLEWARE_KEY:
            continue

        if not shapes.is_handler(value):
            continue

        middleware = middlewares.get(key)
        if middleware is not None and not shapes.is_handler(middleware):
            middleware = None

        registrations.append(
            Registration(
                path=paths.compose(namespace, key),
                handler=value,
                middleware=middleware,
            )
        )

    return registrations
