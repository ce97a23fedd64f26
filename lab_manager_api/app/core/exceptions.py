"""
Error types raised by the service layer.

All of them derive from ``ValueError`` so callers that only care about
"the request could not be applied" can catch a single type.  The API
layer maps each subclass to its own HTTP status code.
"""


class LabError(ValueError):
    """Base class for business rule violations."""


class NotFoundError(LabError):
    """The target entity does not exist or has been soft-deleted."""


class ConflictError(LabError):
    """The change collides with existing data (duplicate email, overlapping meeting)."""


class InvalidRequestError(LabError):
    """The request is well-formed but cannot be applied as given."""
