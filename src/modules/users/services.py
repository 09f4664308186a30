"""User service layer (Use Cases).

Orchestrates business logic for the User aggregate, delegating
persistence to the injected ``IUserRepository``.

Business rules enforced here:
- Username must be unique.
- Passwords are hashed before they reach the store.
- A user that still owns orders cannot be deleted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction
from django.db.models import ProtectedError

from modules.users.exceptions import UserAlreadyExists, UserInUse, UserNotFound
from modules.users.models import User

if TYPE_CHECKING:
    from modules.users.dtos import CreateUserDTO, UpdateUserDTO
    from modules.users.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


class UserService:
    """Application service for User use-cases.

    Receives an ``IUserRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IUserRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_user(self, dto: CreateUserDTO) -> User:
        """Create a new user after enforcing uniqueness rules.

        Raises:
            UserAlreadyExists: if the username is already taken.
        """
        log = logger.bind(username=dto.username)

        if self._repo.get_by_username(dto.username):
            log.warning("user.duplicate_username")
            raise UserAlreadyExists(f"Username '{dto.username}' already registered.")

        user = User(username=dto.username, email=dto.email)
        user.set_password(dto.password)
        user = self._repo.save(user)
        log.info("user.created", user_id=str(user.id))
        return user

    @transaction.atomic
    def update_user(self, id: str, dto: UpdateUserDTO) -> User:
        """Apply the supplied fields of ``dto`` to an existing user.

        Raises:
            UserNotFound: if the user does not exist.
            UserAlreadyExists: if the new username collides.
        """
        user = self._repo.get_by_id(id)
        if not user:
            raise UserNotFound(f"User {id} not found.")

        log = logger.bind(user_id=str(id))
        changes = dto.changes()

        username = changes.get("username")
        if username is not None and username != user.username:
            if self._repo.get_by_username(username):
                log.warning("user.duplicate_username", username=username)
                raise UserAlreadyExists(f"Username '{username}' already registered.")
            user.username = username

        if "email" in changes:
            user.email = changes["email"]
        if "password" in changes:
            user.set_password(changes["password"])

        user = self._repo.save(user)
        log.info("user.updated", fields=sorted(changes))
        return user

    @transaction.atomic
    def delete_user(self, id: str) -> None:
        """Delete a user.

        Raises:
            UserNotFound: if the user does not exist.
            UserInUse: if orders still reference the user.
        """
        user = self._repo.get_by_id(id)
        if not user:
            raise UserNotFound(f"User {id} not found.")
        try:
            self._repo.delete(id)
        except ProtectedError as exc:
            logger.warning("user.delete_blocked", user_id=str(id))
            raise UserInUse(f"User {id} still owns orders.") from exc
        logger.info("user.deleted", user_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_users(self, filters: Optional[Dict[str, Any]] = None) -> List[User]:
        """Return a list of users, optionally filtered."""
        return self._repo.list(filters)

    def get_user(self, id: str) -> User:
        """Retrieve a single user by ID.

        Raises:
            UserNotFound: if the user does not exist.
        """
        user = self._repo.get_by_id(id)
        if not user:
            raise UserNotFound(f"User {id} not found.")
        return user
