"""
Required for static type checkers to accept these names as members of the
registrar module.

This module gets imported into the registrar module so stubs are accessible
through the registrar namespace.

The doc strings for each function exists in the stubs for intellisense
fetching, instead of within the registrar class itself because the registrar
class is a module replacement at runtime, so the namespaces during inspection
are different.
"""

from typing import Any
from typing import Mapping
from typing import Optional
from typing import Union
from typing import overload

from registrar import endpoint
from registrar import handlers
from registrar import namespaces


# -----General Stubs-----------------------------------------------------------


def clear() -> None:
    """Restore the default configuration and close all local endpoints."""


# -----Configuration Stubs-----------------------------------------------------


# noinspection PyUnusedLocal
def set_endpoint_factory(factory: Optional[endpoint.ENDPOINT_FACTORY]) -> None:
    """
    Set the factory that turns handlers into endpoints.

    Args:
        Optional[endpoint.ENDPOINT_FACTORY]:
            Callable with signature (HANDLER, Optional[MIDDLEWARE]) -> Endpoint.
            Pass None to restore the in-process transport.
    """


# noinspection PyUnusedLocal
def set_error_logger(error_logger: Optional[handlers.ERROR_LOGGER]) -> None:
    """
    Set the logger receiving errors raised by listening endpoints.
    The logger is looked up when an error happens, so endpoints registered
    earlier report to the new logger too.

    Args:
        Optional[handlers.ERROR_LOGGER]:
            Callable with signature (str, str, Any) -> None.
            Pass None to restore logging through the standard library.
    """


# noinspection PyUnusedLocal
def set_root(root: str) -> None:
    """Set the root segment of endpoint names. '.' disables the prefix."""


def get_root() -> str:
    """Get the root segment of endpoint names."""


# -----Registration Stubs------------------------------------------------------


@overload
async def register(
    path_or_namespace: str,
    target: endpoint.HANDLER,
    middleware: Optional[endpoint.MIDDLEWARE] = None,
) -> str: ...


@overload
async def register(
    path_or_namespace: str,
    target: namespaces.NAMESPACE_MAP,
    middleware: Optional[Mapping[str, endpoint.MIDDLEWARE]] = None,
) -> list[str]: ...


# noinspection PyUnusedLocal
async def register(
    path_or_namespace: str,
    target: Union[endpoint.HANDLER, namespaces.NAMESPACE_MAP],
    middleware: Optional[Any] = None,
) -> Union[str, list[str]]:
    """
    Register a handler, or a namespace of handlers, as endpoints.

    Args:
        path_or_namespace (str): Path of the endpoint, or namespace of the
            endpoints (e.g., 'nexus', or '.' for none).
        target (HANDLER | NAMESPACE_MAP): A handler accepting one input,
            or a mapping of names to handlers.
        middleware: For a handler, a callable transforming its input.
            For a namespace, a mapping of names to such callables.
    Returns:
        str: The identifier of the endpoint, for a handler.
        list[str]: The identifiers of the endpoints in namespace order,
            for a namespace. Entries that are not handlers are skipped.
    Raises:
        ValidationError: If any argument has the wrong shape. Raised
            before any endpoint is created.
    Notes:
        Namespace endpoints are registered concurrently. The first failure
        is raised, but endpoints that already listen keep listening and
        the ones still starting are neither cancelled nor awaited.
    """
