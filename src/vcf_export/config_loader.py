from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml  # type: ignore[import-untyped]

from .renderer import RenderSettings

OUTPUT_FORMATS = ("vcf", "base64", "uri")


@dataclass
class InputsConfig:
    contacts_csv: Optional[str] = None
    header_starts_with: Optional[str] = None


@dataclass
class OutputsConfig:
    dir: Path
    format: str = "vcf"


@dataclass
class RenderConfig:
    version: str = "4.0"
    uppercase_type: bool = True
    emit_role: bool = True
    emit_empty_fields: bool = False

    def to_settings(self) -> RenderSettings:
        return RenderSettings(
            version=self.version,
            uppercase_type=self.uppercase_type,
            emit_role=self.emit_role,
            emit_empty_fields=self.emit_empty_fields,
        )


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class ExportConfig:
    inputs: InputsConfig
    outputs: OutputsConfig
    render: RenderConfig
    logging: LoggingConfig


def _load_yaml(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def load_export_config(args: argparse.Namespace) -> ExportConfig:
    config_data = _load_yaml(getattr(args, "config", None))
    inputs_cfg = config_data.get("inputs", {}) or {}
    outputs_cfg = config_data.get("outputs", {}) or {}
    render_cfg = config_data.get("render", {}) or {}
    logging_cfg = config_data.get("logging", {}) or {}

    inputs = InputsConfig(
        contacts_csv=getattr(args, "contacts_csv", None) or inputs_cfg.get("contacts_csv"),
        header_starts_with=getattr(args, "header_starts_with", None)
        or inputs_cfg.get("header_starts_with"),
    )

    outputs_dir = Path(getattr(args, "out_dir", None) or outputs_cfg.get("dir") or os.getcwd())
    output_format = str(
        getattr(args, "format", None) or outputs_cfg.get("format") or "vcf"
    ).lower()
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(
            f"Unsupported output format {output_format!r}; expected one of {OUTPUT_FORMATS}"
        )
    outputs = OutputsConfig(dir=outputs_dir, format=output_format)

    render = RenderConfig(
        version=str(render_cfg.get("version", "4.0")),
        uppercase_type=bool(render_cfg.get("uppercase_type", True)),
        emit_role=bool(render_cfg.get("emit_role", True)),
        emit_empty_fields=bool(render_cfg.get("emit_empty_fields", False)),
    )

    arg_level = getattr(args, "log_level", None)
    effective_level = (arg_level or logging_cfg.get("level") or "WARNING").upper()
    logging_config = LoggingConfig(level=effective_level)

    return ExportConfig(
        inputs=inputs,
        outputs=outputs,
        render=render,
        logging=logging_config,
    )
