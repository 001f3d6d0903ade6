"""Tests for settings and logging setup."""

import logging

from chathub import Settings
from chathub.logger import SafeFormatter


def test_port_read_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("PORT", "8123")

    assert Settings().port == 8123


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.static_dir == "public"
    assert settings.cors_origin_list == ["*"]


def test_cors_origins_split() -> None:
    settings = Settings(cors_origins="https://a.example, https://b.example,")

    assert settings.cors_origin_list == ["https://a.example", "https://b.example"]


def test_formatter_keeps_untrusted_text_on_one_line() -> None:
    record = logging.LogRecord("chathub", logging.INFO, __file__, 1, "name=Ann\nFAKE LINE", None, None)

    formatted = SafeFormatter("%(message)s").format(record)

    assert formatted == "name=Ann\\nFAKE LINE"
