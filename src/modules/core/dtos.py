"""Shared DTO building blocks.

``PatchDTO`` is the base for every partial-update DTO.  Pydantic tracks
which fields the caller actually supplied (``model_fields_set``), so
"absent" is distinguishable from a default value even for numeric
fields such as ``quantity`` or ``stock_quantity``.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class PatchDTO(BaseModel):
    """Immutable partial-update DTO.

    A field left out of the payload, or sent as ``null``, means
    "keep the current value".
    """

    model_config = ConfigDict(frozen=True)

    def changes(self) -> Dict[str, Any]:
        """Return only the fields the caller supplied with a non-null value."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }
