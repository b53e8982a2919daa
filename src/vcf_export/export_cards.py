from __future__ import annotations

import argparse
import csv
import logging
import os
import re
from typing import Any, Dict, List, Optional, Set

import pandas as pd

from .card import ContactCard
from .common import (
    load_config,
    parse_labeled_values,
    parse_social_field,
    read_csv_with_optional_header,
    safe_get,
    warn_missing,
)
from .config_loader import OUTPUT_FORMATS, ExportConfig
from .logging_utils import configure_logging
from .renderer import VcfRenderer

logger = logging.getLogger(__name__)

SCALAR_COLUMNS = ("full_name", "title", "company", "description", "address", "profile_image")
LIST_COLUMNS = {
    "emails": "email",
    "phones": "phone",
    "websites": "website",
}
FILENAME_SEPARATORS_RE = re.compile(r"[\\/\x00]")


def row_to_card(row: Any) -> ContactCard:
    attributes: Dict[str, Any] = {}
    for column in SCALAR_COLUMNS:
        value = safe_get(row, column)
        if value:
            attributes[column] = value
    for column, key in LIST_COLUMNS.items():
        entries = parse_labeled_values(safe_get(row, column))
        if entries:
            attributes[key] = entries
    social = parse_social_field(safe_get(row, "social"))
    if social:
        attributes["social"] = social

    card = ContactCard().apply_attributes(attributes)
    typed_addresses = parse_labeled_values(safe_get(row, "addresses"))
    if typed_addresses:
        card.apply_attributes({"address": typed_addresses})
    return card


def load_cards(path: str, header_starts_with: Optional[str] = None) -> List[ContactCard]:
    df = read_csv_with_optional_header(path, header_starts_with=header_starts_with)
    cards: List[ContactCard] = []
    for idx, row in df.iterrows():
        card = row_to_card(row)
        if not card.full_name:
            logger.warning("Skipping row %s: no full_name", idx)
            continue
        cards.append(card)
    return cards


def vcf_filename(full_name: str, taken: Set[str]) -> str:
    """
    Build a ``.vcf`` filename from a contact name.

    Path separators become ``_``; a name already in ``taken`` gets a
    ``" (2)"``, ``" (3)"`` ... suffix. The chosen name is added to ``taken``.
    """
    stem = FILENAME_SEPARATORS_RE.sub("_", full_name).strip() or "contact"
    candidate = f"{stem}.vcf"
    counter = 2
    while candidate.lower() in taken:
        candidate = f"{stem} ({counter}).vcf"
        counter += 1
    taken.add(candidate.lower())
    return candidate


def _write_vcf_files(cards: List[ContactCard], renderer: VcfRenderer, out_dir: str) -> List[str]:
    written: List[str] = []
    taken: Set[str] = set()
    for card in cards:
        filename = vcf_filename(card.full_name or "", taken)
        if filename != f"{card.full_name}.vcf":
            logger.info("Writing %r as %s", card.full_name, filename)
        path = os.path.join(out_dir, filename)
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.write(renderer.render_text(card))
        written.append(path)
    return written


def _write_encoded_csv(
    cards: List[ContactCard], renderer: VcfRenderer, out_dir: str, output_format: str
) -> List[str]:
    encode = renderer.to_base64 if output_format == "base64" else renderer.to_data_uri
    df = pd.DataFrame(
        [{"full_name": card.full_name, "payload": encode(card)} for card in cards],
        columns=["full_name", "payload"],
    )
    path = os.path.join(out_dir, f"vcards_{output_format}.csv")
    df.to_csv(path, index=False, encoding="utf-8", quoting=csv.QUOTE_ALL)
    return [path]


def build(args: argparse.Namespace, config: Optional[ExportConfig] = None) -> int:
    config = config or load_config(args)
    contacts_csv = config.inputs.contacts_csv
    if warn_missing(contacts_csv, "Contacts CSV"):
        return 1

    cards = load_cards(str(contacts_csv), header_starts_with=config.inputs.header_starts_with)
    renderer = VcfRenderer(settings=config.render.to_settings())

    out_dir = str(config.outputs.dir)
    os.makedirs(out_dir, exist_ok=True)
    if config.outputs.format == "vcf":
        written = _write_vcf_files(cards, renderer, out_dir)
    else:
        written = _write_encoded_csv(cards, renderer, out_dir, config.outputs.format)

    logger.info("Exported %d contact card(s) from %s", len(cards), contacts_csv)
    for path in written:
        print(f"Saved: {path}")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Render contacts from a CSV file into vCard files or encoded payloads."
    )
    parser.add_argument("--config", type=str, default=None)
    parser.add_argument("--contacts-csv", type=str, default=None)
    parser.add_argument(
        "--header-starts-with",
        type=str,
        default=None,
        help="Skip leading lines until one starts with this header prefix",
    )
    parser.add_argument("--out-dir", type=str, default=None)
    parser.add_argument("--format", type=str, choices=OUTPUT_FORMATS, default=None)
    parser.add_argument("--log-level", type=str, default=None, help="Override logging level")
    args = parser.parse_args()
    config = load_config(args)
    configure_logging(config, level_override=args.log_level)
    return build(args, config=config)


if __name__ == "__main__":
    raise SystemExit(main())
