"""
Exception types for the endpoint registrar.

Validation errors are raised before any endpoint is created. Errors raised
by a transport while creating or listening on an endpoint are not wrapped;
they reach the caller of register() unchanged.
"""


class RegistrarError(Exception):
    """Base class for registrar errors."""


class ValidationError(RegistrarError):
    """Raised when arguments to register() do not have a usable shape."""
