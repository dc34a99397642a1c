"""
# Endpoint Registrar

Herein is the registrar itself as a module class, holding the configured
endpoint factory, error logger and root segment in a protective closure.

register() turns a single handler, or a whole namespace of handlers, into
listening endpoints with unique hierarchical names.

A reimport protection clause exists at the top of the file to prevent the
configuration from being lost on import.

Function stubs exist in the stubs file for static type checkers to validate
correct calls.
"""

# Remember to update doc strings in the stub.py file so static type checkers
# and intellisense can receive accurate feedback!

import sys

# -----------------------------------------------------------------------------
# Prevent module reload - configuration would be lost!
if "registrar" in sys.modules:
    existing_module = sys.modules["registrar"]
    if hasattr(existing_module, "_REGISTRAR_IMPORT_GUARD"):
        raise ImportError(
            "Module 'registrar' has already been imported and cannot be reloaded. "
            "Configured factories and loggers would be lost. "
            "Restart your Python session to reimport."
        )
_REGISTRAR_IMPORT_GUARD = True
# -----------------------------------------------------------------------------

import asyncio
import logging
from types import ModuleType

from registrar.stub import *
from registrar import endpoint
from registrar import errors
from registrar import handlers
from registrar import local
from registrar import namespaces
from registrar import paths
from registrar import shapes


version_major = 1
version_minor = 0
version_patch = 0
__version__ = f"{version_major}.{version_minor}.{version_patch}"

DEFAULT_ROOT = "registrar"
"""Root segment every endpoint name is prefixed with."""

logger = logging.getLogger(__name__)


class Registrar(ModuleType):
    """
    Primary endpoint registrar.
    Endpoint names are hierarchical, with '/' separating segments.

    Register a single handler with register('ping', handler) or a namespace
    of handlers with register('nexus', {'getGames': get_games, ...}).

    To change what endpoints are and where their errors go use
    set_endpoint_factory() and set_error_logger().
    """

    # -----Runtime Closures----------------------------------------------------
    # ---Constants---
    __version__ = __version__
    _REGISTRAR_IMPORT_GUARD = _REGISTRAR_IMPORT_GUARD
    DEFAULT_ROOT = DEFAULT_ROOT
    RESERVED_MIDDLEWARE_KEY = shapes.RESERVED_MIDDLEWARE_KEY

    # ---Exceptions---
    RegistrarError = errors.RegistrarError
    ValidationError = errors.ValidationError
    EndpointInUseError = local.EndpointInUseError
    EndpointNotFoundError = local.EndpointNotFoundError

    # ---Modules---
    endpoint = endpoint
    errors = errors
    handlers = handlers
    local = local
    namespaces = namespaces
    paths = paths
    shapes = shapes
    # -------------------------------------------------------------------------

    def __init__(self, name: str) -> None:
        super().__init__(name)
        assert self._REGISTRAR_IMPORT_GUARD is True

        self._endpoint_factory: endpoint.ENDPOINT_FACTORY = local.create
        self._error_logger: handlers.ERROR_LOGGER = handlers.log_endpoint_error
        self._root: str = DEFAULT_ROOT

    def clear(self) -> None:
        """Restore the default configuration and close all local endpoints."""
        self._endpoint_factory = local.create
        self._error_logger = handlers.log_endpoint_error
        self._root = DEFAULT_ROOT
        local.clear()

    # -----Configuration-------------------------------------------------------

    def set_endpoint_factory(
        self, factory: Optional[endpoint.ENDPOINT_FACTORY]
    ) -> None:
        """
        Set the factory that turns handlers into endpoints.

        Args:
            Optional[endpoint.ENDPOINT_FACTORY]:
                Callable with signature (HANDLER, Optional[MIDDLEWARE]) -> Endpoint.
                Pass None to restore the in-process transport.
        """
        if factory is None:
            factory = local.create
        elif not callable(factory):
            raise TypeError(
                f"Endpoint factory must be callable, got: {type(factory).__name__}"
            )

        self._endpoint_factory = factory

    def set_error_logger(self, error_logger: Optional[handlers.ERROR_LOGGER]) -> None:
        """
        Set the logger receiving errors raised by listening endpoints.
        The logger is looked up when an error happens, so endpoints registered
        earlier report to the new logger too.

        Args:
            Optional[handlers.ERROR_LOGGER]:
                Callable with signature (str, str, Any) -> None.
                Pass None to restore logging through the standard library.
        """
        if error_logger is None:
            error_logger = handlers.log_endpoint_error
        elif not callable(error_logger):
            raise TypeError(
                f"Error logger must be callable, got: {type(error_logger).__name__}"
            )

        self._error_logger = error_logger

    def set_root(self, root: str) -> None:
        """Set the root segment of endpoint names. '.' disables the prefix."""
        self._root = shapes.validate_name(root, "root")

    def get_root(self) -> str:
        """Get the root segment of endpoint names."""
        return self._root

    def _log_endpoint_error(self, level: str, message: str, details: Any) -> None:
        self._error_logger(level, message, details)

    # -----Registration--------------------------------------------------------

    async def register(
        self,
        path_or_namespace: str,
        target: Union[endpoint.HANDLER, namespaces.NAMESPACE_MAP],
        middleware: Optional[
            Union[endpoint.MIDDLEWARE, Mapping[str, endpoint.MIDDLEWARE]]
        ] = None,
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
        request = shapes.build_request(path_or_namespace, target, middleware)

        if isinstance(request, shapes.BatchRequest):
            return await self._register_namespace(request)

        return await self._register_endpoint(
            request.path, request.handler, request.middleware
        )

    async def _register_endpoint(
        self,
        path: str,
        handler: endpoint.HANDLER,
        middleware: Optional[endpoint.MIDDLEWARE] = None,
    ) -> str:
        """Create, watch and listen on one endpoint. Arguments are validated."""
        name = paths.compose(self._root, path)

        endpoint_ = self._endpoint_factory(handler, middleware)
        handlers.watch_endpoint_errors(endpoint_, self._log_endpoint_error)

        identifier = await endpoint_.listen(name)
        logger.debug(
            f"Registered {handlers.get_callable_name(handler)} at '{identifier}'"
        )
        return identifier

    async def _register_namespace(self, request: shapes.BatchRequest) -> list[str]:
        """
        Register every handler of a namespace concurrently.
        Each endpoint is started in namespace order and shielded, so it keeps
        going when a sibling fails or the caller is cancelled.
        """
        registrations = namespaces.flatten(
            request.namespace, request.handlers, request.middlewares
        )

        identifiers = await asyncio.gather(
            *(
                asyncio.shield(
                    self._register_endpoint(r.path, r.handler, r.middleware)
                )
                for r in registrations
            )
        )
        return list(identifiers)


# This is here to protect the configuration, creating a protective closure.
custom_module = Registrar(sys.modules[__name__].__name__)
sys.modules[__name__] = custom_module
