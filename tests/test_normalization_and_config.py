import logging
from types import SimpleNamespace

import pandas as pd
import pytest

from vcf_export.common import ContactCard, ensure_contact_card, load_config
from vcf_export.logging_utils import _resolve_level, configure_logging
from vcf_export.normalization import (
    is_valid_email,
    is_valid_phone_number,
    parse_labeled_values,
    parse_social_field,
    safe_get,
    strip_whitespace,
    warn_missing,
)
from vcf_export.renderer import RenderSettings


def test_email_validation():
    assert is_valid_email("a@b.com") is True
    assert is_valid_email("jane.doe+tag@acme.io") is True
    assert is_valid_email("not-an-email") is False
    assert is_valid_email("") is False


def test_email_validation_rejects_special_use_domains():
    assert is_valid_email("jane@corp.local") is False
    assert is_valid_email("qa@site.test") is False
    assert is_valid_email("root@localhost") is False


def test_phone_validation():
    assert is_valid_phone_number("+1 555 123") is True
    assert is_valid_phone_number("5551234") is True
    assert is_valid_phone_number("call-me") is False
    assert is_valid_phone_number("++1 555") is False
    assert is_valid_phone_number("") is False


def test_validation_does_not_block_setters():
    card = ContactCard().set_email("not-an-email", "home").set_phone_number("call-me", "work")
    text = card.render_text()
    assert "EMAIL;TYPE=HOME:not-an-email" in text
    assert "TEL;TYPE=WORK:call-me" in text


def test_strip_whitespace():
    assert strip_whitespace(" +1 555\t123\n4567 ") == "+15551234567"
    assert strip_whitespace(None) == ""


def test_parse_labeled_values_and_social():
    assert parse_labeled_values("a@b.com::work| |c@d.com") == [
        {"value": "a@b.com", "type": "work"},
        {"value": "c@d.com", "type": ""},
    ]
    assert parse_labeled_values("") == []
    assert parse_labeled_values(None) == []
    assert parse_social_field("twitter::https://twitter.com/jane|whatsapp::+1 555|broken") == {
        "twitter": "https://twitter.com/jane",
        "whatsapp": "+1 555",
    }


def test_safe_get_and_warn_missing(tmp_path):
    row = pd.Series({"A": "  value  ", "B": float("nan")})
    assert safe_get(row, "A") == "value"
    assert safe_get(row, "B") == ""
    assert safe_get(row, "C") == ""
    assert warn_missing(str(tmp_path / "nope.csv"), "Test") is True
    assert warn_missing(None, "Test") is True
    assert warn_missing(str(tmp_path), "Test") is False


def test_ensure_contact_card():
    card = ContactCard()
    assert ensure_contact_card(card) is card
    built = ensure_contact_card({"full_name": "Jane", "social": {"skype": "jane.s"}})
    assert built.full_name == "Jane"
    assert built.social == {"skype": "jane.s"}
    with pytest.raises(TypeError):
        ensure_contact_card(["Jane"])


def test_load_config_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = load_config(SimpleNamespace(config=None))
    assert config.inputs.contacts_csv is None
    assert config.outputs.dir.resolve() == tmp_path.resolve()
    assert config.outputs.format == "vcf"
    assert config.render.to_settings() == RenderSettings()
    assert config.logging.level == "WARNING"


def test_load_config_yaml_with_cli_overrides(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "\n".join(
            [
                "inputs:",
                "  contacts_csv: from_yaml.csv",
                "outputs:",
                f'  dir: "{tmp_path}"',
                "  format: base64",
                "render:",
                '  version: "3.0"',
                "  uppercase_type: false",
                "  emit_role: false",
                "  emit_empty_fields: true",
                "logging:",
                "  level: info",
            ]
        ),
        encoding="utf-8",
    )
    args = SimpleNamespace(
        config=str(config_path),
        contacts_csv="from_cli.csv",
        out_dir=None,
        format="uri",
        log_level=None,
    )
    config = load_config(args)
    assert config.inputs.contacts_csv == "from_cli.csv"
    assert config.outputs.dir == tmp_path
    assert config.outputs.format == "uri"
    assert config.render.to_settings() == RenderSettings(
        version="3.0", uppercase_type=False, emit_role=False, emit_empty_fields=True
    )
    assert config.logging.level == "INFO"


def test_load_config_rejects_unknown_format():
    with pytest.raises(ValueError):
        load_config(SimpleNamespace(config=None, format="xml"))


def test_resolve_level():
    assert _resolve_level("debug") == logging.DEBUG
    assert _resolve_level("15") == 15
    assert _resolve_level("nonsense") == logging.INFO


def test_configure_logging_prefers_environment(monkeypatch):
    root = logging.getLogger()
    previous = root.level
    config = load_config(SimpleNamespace(config=None, log_level="ERROR"))
    try:
        monkeypatch.setenv("VCF_EXPORT_LOG_LEVEL", "DEBUG")
        configure_logging(config, level_override="WARNING")
        assert root.level == logging.DEBUG

        monkeypatch.delenv("VCF_EXPORT_LOG_LEVEL")
        configure_logging(config, level_override="WARNING")
        assert root.level == logging.WARNING

        configure_logging(config)
        assert root.level == logging.ERROR
    finally:
        root.setLevel(previous)
