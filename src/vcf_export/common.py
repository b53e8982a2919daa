from __future__ import annotations

from typing import Any, Mapping

from .card import SOCIAL_SETTERS, ContactCard
from .config_loader import ExportConfig, load_export_config
from .models import Address, Email, Link, Phone
from .normalization import (
    is_valid_email,
    is_valid_phone_number,
    parse_labeled_values,
    parse_social_field,
    read_csv_with_optional_header,
    safe_get,
    warn_missing,
)
from .renderer import DownloadResponse, LocalFileReader, RenderSettings, VcfRenderer

__all__ = [
    "Address",
    "ContactCard",
    "DownloadResponse",
    "Email",
    "ExportConfig",
    "Link",
    "LocalFileReader",
    "Phone",
    "RenderSettings",
    "SOCIAL_SETTERS",
    "VcfRenderer",
    "ensure_contact_card",
    "is_valid_email",
    "is_valid_phone_number",
    "load_config",
    "load_export_config",
    "parse_labeled_values",
    "parse_social_field",
    "read_csv_with_optional_header",
    "safe_get",
    "warn_missing",
]


def load_config(args: Any) -> ExportConfig:
    return load_export_config(args)


def ensure_contact_card(obj: Any) -> ContactCard:
    if isinstance(obj, ContactCard):
        return obj
    if isinstance(obj, Mapping):
        return ContactCard().apply_attributes(obj)
    raise TypeError(f"Unsupported contact payload type: {type(obj)!r}")
