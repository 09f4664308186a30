"""User DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (Views) and the
Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateUserDTO``: input for user creation.
- ``UpdateUserDTO``: patch input for user updates.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from modules.core.dtos import PatchDTO

CREDENTIAL_MIN_LENGTH = 5
CREDENTIAL_MAX_LENGTH = 30


def _check_credential(label: str, value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{label} is required.")
    if not CREDENTIAL_MIN_LENGTH <= len(value) <= CREDENTIAL_MAX_LENGTH:
        raise ValueError(
            f"{label} must be between {CREDENTIAL_MIN_LENGTH} and "
            f"{CREDENTIAL_MAX_LENGTH} characters."
        )
    return value


class CreateUserDTO(BaseModel):
    """Immutable DTO for user creation requests.

    Validates:
    - ``username`` and ``password`` are 5-30 characters, not blank.
    - ``email`` is a well-formed address (Pydantic ``EmailStr``).
    """

    model_config = ConfigDict(frozen=True)

    username: str
    password: str
    email: EmailStr

    @field_validator("username")
    @classmethod
    def username_length(cls, v: str) -> str:
        return _check_credential("Username", v)

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _check_credential("Password", v)


class UpdateUserDTO(PatchDTO):
    """Patch DTO for user updates: only supplied fields are applied."""

    username: str | None = None
    password: str | None = None
    email: EmailStr | None = None

    @field_validator("username")
    @classmethod
    def username_length(cls, v: str | None) -> str | None:
        return v if v is None else _check_credential("Username", v)

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str | None) -> str | None:
        return v if v is None else _check_credential("Password", v)
