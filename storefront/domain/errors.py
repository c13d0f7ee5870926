# storefront/domain/errors.py


class NotFoundError(LookupError):
    """Entity missing by id, code or session."""


class ConflictError(Exception):
    """Duplicate unique key or an ownership clash."""


class ValidationFailed(ValueError):
    """Input is well-formed but breaks a business rule."""
