"""
Shape validation for values passed to register().

The second argument of register() is untyped at the boundary: it is either a
single handler or a namespace map. build_request() inspects it once and
returns a SingleRequest or BatchRequest so the dispatcher never has to guess
again.
"""

import inspect
from dataclasses import dataclass
from typing import Any
from typing import Callable
from typing import Mapping
from typing import Optional
from typing import Union

from registrar import endpoint
from registrar.errors import ValidationError


RESERVED_MIDDLEWARE_KEY = "middleware"
"""Key of a namespace map holding the middleware for its sibling handlers."""

HANDLER = "handler"
NAMESPACE_MAP = "namespace_map"


@dataclass(frozen=True)
class SingleRequest(object):
    """One handler to be registered under one path."""

    path: str
    handler: endpoint.HANDLER
    middleware: Optional[endpoint.MIDDLEWARE] = None


@dataclass(frozen=True)
class BatchRequest(object):
    """A namespace of handlers, paired with their middleware by key."""

    namespace: str
    handlers: dict[str, Any]
    """Every entry of the namespace map except the reserved middleware key."""

    middlewares: dict[str, Any]
    """Middleware candidates by handler key. Entries are not yet validated."""


REQUEST = Union[SingleRequest, BatchRequest]


def _type_name(value: Any) -> str:
    return type(value).__name__


def _binds(value: Callable, *args: Any) -> Optional[bool]:
    """Returns whether value binds args, or None if it has no signature."""
    try:
        sig = inspect.signature(value)
    except (TypeError, ValueError):
        return None

    try:
        sig.bind(*args)
    except TypeError:
        return False

    return True


def accepts_input(value: Callable) -> bool:
    """
    Returns True if the handler should be called with the input, False if it
    takes no arguments at all.
    """
    return _binds(value, None) is not False


def is_handler(value: Any) -> bool:
    """
    Returns True if value can be called with one positional input or with
    none. Callables without an inspectable signature are given the benefit
    of the doubt.
    """
    if not callable(value):
        return False

    return _binds(value, None) is not False or _binds(value) is True


def classify(value: Any) -> str:
    """
    Classify value as a handler or a namespace map.

    Returns:
        str: HANDLER or NAMESPACE_MAP.
    Raises:
        ValidationError: If value is neither.
    """
    if is_handler(value):
        return HANDLER

    if isinstance(value, Mapping):
        return NAMESPACE_MAP

    raise ValidationError(
        f"Expected a handler accepting at most one input or a namespace map, "
        f"but got: {_type_name(value)}"
    )


def validate_name(value: Any, kind: str = "path") -> str:
    """
    Validate the first argument of register().

    Args:
        value (Any): The path or namespace to validate.
        kind (str): What the value names, used in the error message.
    Returns:
        str: The value unchanged.
    Raises:
        ValidationError: If value is not a non-empty string.
    """
    if not isinstance(value, str):
        raise ValidationError(
            f"Expected a string for the {kind}, but got: {_type_name(value)}"
        )
    if not value:
        raise ValidationError(f"The {kind} must not be empty")

    return value


def _validate_keys(mapping: Mapping, what: str) -> None:
    for key in mapping:
        if not isinstance(key, str) or not key:
            raise ValidationError(
                f"Keys of the {what} must be non-empty strings, but got: {key!r}"
            )


def validate_namespace_map(
    value: Any, middleware: Optional[Mapping[str, Any]] = None
) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Validate a namespace map and split it into handlers and middleware.

    The values of the handler entries are not checked; entries that are not
    handlers are dropped later when the namespace is flattened.

    Args:
        value (Any): The namespace map, optionally holding a reserved
            'middleware' mapping.
        middleware (Optional[Mapping[str, Any]]): Middleware passed
            separately. Entries here override reserved-key entries with the
            same name.
    Returns:
        tuple[dict[str, Any], dict[str, Any]]: The handler entries and the
            middleware entries.
    Raises:
        ValidationError: If the map or either middleware mapping is malformed.
    """
    if not isinstance(value, Mapping):
        raise ValidationError(
            f"Expected a namespace map, but got: {_type_name(value)}"
        )
    _validate_keys(value, "namespace map")

    middlewares: dict[str, Any] = {}

    reserved = value.get(RESERVED_MIDDLEWARE_KEY)
    if reserved is not None:
        if not isinstance(reserved, Mapping):
            raise ValidationError(
                f"The '{RESERVED_MIDDLEWARE_KEY}' entry of a namespace map must be "
                f"a mapping, but got: {_type_name(reserved)}"
            )
        _validate_keys(reserved, "middleware map")
        middlewares.update(reserved)

    if middleware is not None:
        if not isinstance(middleware, Mapping):
            raise ValidationError(
                f"Middleware for a namespace must be a mapping, "
                f"but got: {_type_name(middleware)}"
            )
        _validate_keys(middleware, "middleware map")
        middlewares.update(middleware)

    handlers = {
        key: entry for key, entry in value.items() if key != RESERVED_MIDDLEWARE_KEY
    }

    return handlers, middlewares


def build_request(
    path_or_namespace: Any, target: Any, middleware: Any = None
) -> REQUEST:
    """
    Turn the raw arguments of register() into a request.

    A mapping target selects the batch form, anything else the single form.
    All validation happens here, before any endpoint exists.

    Raises:
        ValidationError: If any argument has the wrong shape.
    """
    if isinstance(target, Mapping):
        namespace = validate_name(path_or_namespace, "namespace")
        handlers, middlewares = validate_namespace_map(target, middleware)
        return BatchRequest(
            namespace=namespace, handlers=handlers, middlewares=middlewares
        )

    path = validate_name(path_or_namespace, "path")
    classify(target)

    if middleware is not None and not is_handler(middleware):
        raise ValidationError(
            f"Middleware for '{path}' must accept at most one input, "
            f"but got: {_type_name(middleware)}"
        )

    return SingleRequest(path=path, handler=target, middleware=middleware)
