"""Conditions attached to advanced permission rows.

Stored as a JSON object (e.g. {"ownedBy": "self", "companyId": "same"}) and
parsed into tagged variants when rows cross the repository boundary, so the
evaluator matches on types instead of probing dict keys.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class OwnedBySelf:
    """Resource id must be the requesting person's own id."""


@dataclass(frozen=True)
class SameCompany:
    """Requesting person and resource person must share a company."""


@dataclass(frozen=True)
class UnrecognizedCondition:
    """A key/value pair with no evaluation rule; always holds."""

    key: str
    value: Any


Condition = OwnedBySelf | SameCompany | UnrecognizedCondition


def parse_conditions(raw: Any) -> tuple[Condition, ...]:
    """Parse a stored conditions object into variants (in key order).

    Anything that is not a JSON object yields no conditions.
    """
    if not isinstance(raw, dict):
        return ()
    parsed: list[Condition] = []
    for key, value in raw.items():
        if key == "ownedBy" and value == "self":
            parsed.append(OwnedBySelf())
        elif key == "companyId" and value == "same":
            parsed.append(SameCompany())
        else:
            parsed.append(UnrecognizedCondition(key=str(key), value=value))
    return tuple(parsed)


def conditions_to_json(conditions: tuple[Condition, ...]) -> dict[str, Any]:
    """Inverse of parse_conditions, for persisting and API responses."""
    out: dict[str, Any] = {}
    for condition in conditions:
        match condition:
            case OwnedBySelf():
                out["ownedBy"] = "self"
            case SameCompany():
                out["companyId"] = "same"
            case UnrecognizedCondition(key=key, value=value):
                out[key] = value
    return out
