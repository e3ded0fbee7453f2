"""Field-level projection of response data by allowed field names."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel


def filter_object_fields(obj: Any, allowed_fields: Iterable[str]) -> Any:
    """Keep only allowed_fields of obj, in allowed order, plus "id" when obj has it.

    An empty allowed list means no restriction: obj is returned unchanged.
    Pydantic models are dumped to a dict first; other non-mappings are
    returned unchanged.
    """
    allowed = list(dict.fromkeys(allowed_fields))
    if not allowed:
        return obj
    if isinstance(obj, BaseModel):
        obj = obj.model_dump()
    if not isinstance(obj, Mapping):
        return obj
    filtered = {field: obj[field] for field in allowed if field in obj}
    if "id" in obj and "id" not in filtered:
        filtered["id"] = obj["id"]
    return filtered


def filter_fields(data: Any, allowed_fields: Iterable[str]) -> Any:
    """filter_object_fields applied element-wise to lists and tuples."""
    allowed = list(dict.fromkeys(allowed_fields))
    if isinstance(data, (list, tuple)):
        return [filter_object_fields(item, allowed) for item in data]
    return filter_object_fields(data, allowed)
