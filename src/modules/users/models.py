"""User model for catalog customers.

Business rules implemented:
- Username is unique in the system.
- The password is stored as a Django password hash, never in clear text.
- A user owns orders through ``Order.user`` but holds no reverse
  reference to them; deleting a user with orders is rejected (PROTECT).
"""

from __future__ import annotations

from django.contrib.auth.hashers import check_password, make_password
from django.db import models

from modules.core.models import BaseModel


class User(BaseModel):
    """User aggregate root.

    Not related to ``django.contrib.auth``: these are the shop's customer
    accounts, addressed only through the REST API.
    """

    username = models.CharField(max_length=30, unique=True)
    password = models.CharField(max_length=128)
    email = models.EmailField(max_length=254)

    class Meta:
        db_table = "users"
        ordering = ["username"]

    # ------------------------------------------------------------------
    # Password handling
    # ------------------------------------------------------------------

    def set_password(self, raw_password: str) -> None:
        self.password = make_password(raw_password)

    def check_password(self, raw_password: str) -> bool:
        return check_password(raw_password, self.password)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return self.username
