"""User domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from modules.core.exceptions import Conflict, NotFound


class UserAlreadyExists(Conflict):
    """A user with the same username already exists."""


class UserNotFound(NotFound):
    """The requested user does not exist."""


class UserInUse(Conflict):
    """The user still owns orders and cannot be deleted."""
