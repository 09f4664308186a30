"""Helpers for turning DRF request bodies into DTO input."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict

from rest_framework.request import Request


def request_payload(request: Request) -> Dict[str, Any]:
    """Return the request body as a plain dict.

    Form-encoded bodies (``QueryDict``) are flattened to single values.
    A body that is not an object (e.g. a JSON list) yields an empty dict,
    so DTO validation reports the missing fields.
    """
    data = request.data
    if hasattr(data, "dict"):
        return data.dict()
    if isinstance(data, Mapping):
        return dict(data)
    return {}
