from __future__ import annotations

import logging
import os
import re
from io import StringIO
from typing import Any, Dict, List, Optional

import pandas as pd
from email_validator import EmailNotValidError, validate_email

logger = logging.getLogger(__name__)

PHONE_NUMBER_RE = re.compile(r"^\+?[0-9\s]+$")
WHITESPACE_RE = re.compile(r"\s+")


def is_valid_email(raw: str) -> bool:
    candidate = raw or ""
    if not candidate:
        return False
    try:
        validate_email(candidate, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_phone_number(value: str) -> bool:
    return bool(PHONE_NUMBER_RE.match(value or ""))


def strip_whitespace(value: str) -> str:
    return WHITESPACE_RE.sub("", value or "")


def strip_spaces(value: str) -> str:
    return (value or "").replace(" ", "")


def parse_labeled_values(field: object) -> List[Dict[str, str]]:
    """
    Split a pipe-delimited field like ``"value::type|value2::type2"``.

    Entries without a ``::`` separator get an empty type; blank entries are
    dropped.
    """
    if not isinstance(field, str) or not field.strip():
        return []
    entries: List[Dict[str, str]] = []
    for part in field.split("|"):
        if not part.strip():
            continue
        value, _, kind = part.partition("::")
        entries.append({"value": value.strip(), "type": kind.strip()})
    return entries


def parse_social_field(field: object) -> Dict[str, str]:
    """Parse ``"platform::url|platform::url"`` into an ordered mapping."""
    social: Dict[str, str] = {}
    for entry in parse_labeled_values(field):
        platform, url = entry["value"], entry["type"]
        if platform and url:
            social[platform] = url
    return social


def read_csv_with_optional_header(
    path: Optional[str], header_starts_with: Optional[str] = None
) -> pd.DataFrame:
    if not path:
        return pd.DataFrame()
    if not header_starts_with:
        return pd.read_csv(path, dtype=str, keep_default_na=False)
    with open(path, "r", encoding="utf-8", errors="ignore") as handle:
        lines = handle.read().splitlines()
    header_idx: Optional[int] = None
    for index, line in enumerate(lines[:100]):
        if line.strip().startswith(header_starts_with):
            header_idx = index
            break
    if header_idx is None:
        return pd.read_csv(path, dtype=str, keep_default_na=False)
    return pd.read_csv(StringIO("\n".join(lines[header_idx:])), dtype=str, keep_default_na=False)


def _coerce_to_string(value: Any) -> str:
    if pd.isna(value):
        return ""
    return str(value or "").strip()


def safe_get(row: Any, key: str) -> str:
    try:
        return _coerce_to_string(row.get(key, ""))
    except (AttributeError, KeyError, TypeError):
        try:
            if hasattr(row, "__contains__") and key in row:
                return _coerce_to_string(row[key])
            return ""
        except (KeyError, TypeError, AttributeError):
            return ""


def warn_missing(path: Optional[str], label: str) -> bool:
    if not path or not os.path.exists(path):
        logger.warning("%s path missing: %s", label, path)
        return True
    return False
