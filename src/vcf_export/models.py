from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Tuple


def entry_fields(payload: Any) -> Tuple[str, str]:
    """Read ``(value, type)`` from a mapping or an object exposing those names."""
    if isinstance(payload, Mapping):
        value = payload.get("value", "")
        kind = payload.get("type", "")
    else:
        value = getattr(payload, "value")
        kind = getattr(payload, "type", "")
    return str(value if value is not None else ""), str(kind if kind is not None else "")


@dataclass(frozen=True)
class Email:
    value: str
    type: str = ""


@dataclass(frozen=True)
class Phone:
    value: str
    type: str = ""


@dataclass(frozen=True)
class Address:
    value: str
    type: str = ""


@dataclass(frozen=True)
class Link:
    value: str
    type: str = ""
