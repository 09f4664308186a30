"""Domain error taxonomy shared by every module.

Services raise subclasses of these kinds; views translate the kind
into an HTTP status (``NotFound`` -> 404, ``InvalidArgument`` -> 400,
``Conflict`` -> 409).  Store failures are not wrapped and propagate
unchanged.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for every business-rule failure."""


class NotFound(DomainError):
    """A referenced entity does not exist by the given identifier."""


class InvalidArgument(DomainError):
    """The caller supplied a null, malformed or out-of-range value."""


class Conflict(DomainError):
    """The request collides with the current state of the store."""
