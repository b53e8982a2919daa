from __future__ import annotations

import logging
import os
from typing import Optional

from .config_loader import ExportConfig


def _resolve_level(level_name: str) -> int:
    """Map a level name such as ``"debug"`` or ``"15"`` to a number; unknown names mean INFO."""
    normalized = (level_name or "INFO").upper()
    if normalized.isdigit():
        return int(normalized)
    level = getattr(logging, normalized, None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(config: ExportConfig, level_override: Optional[str] = None) -> None:
    """
    Set the root log level for a ``vcf-export`` run.

    ``VCF_EXPORT_LOG_LEVEL`` wins over ``--log-level``, which wins over
    ``logging.level`` in the export config file; WARNING otherwise.
    """
    env_level = os.getenv("VCF_EXPORT_LOG_LEVEL")
    effective_level_name = env_level or level_override or config.logging.level or "WARNING"
    level_value = _resolve_level(effective_level_name)

    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.setLevel(level_value)
    else:
        logging.basicConfig(level=level_value)
