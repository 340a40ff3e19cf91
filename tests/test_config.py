import logging

import pytest

from nino import config


def test_defaults():
    assert config.get_recursion_limit() is None
    assert config.get_strict_types() is False
    assert config.get_log_level() == logging.WARNING


@pytest.mark.parametrize("raw,expected", [("1", True), ("TRUE", True), ("yes", True),
                                          ("0", False), ("off", False), ("", False)])
def test_strict_types_flag(monkeypatch, raw, expected):
    monkeypatch.setenv("NINO_STRICT_TYPES", raw)
    assert config.get_strict_types() is expected


def test_recursion_limit(monkeypatch):
    monkeypatch.setenv("NINO_RECURSION_LIMIT", " 5000 ")
    assert config.get_recursion_limit() == 5000


def test_recursion_limit_must_be_an_integer(monkeypatch):
    monkeypatch.setenv("NINO_RECURSION_LIMIT", "lots")
    with pytest.raises(ValueError):
        config.get_recursion_limit()


@pytest.mark.parametrize("raw,expected", [("debug", logging.DEBUG), ("INFO", logging.INFO),
                                          ("nonsense", logging.WARNING)])
def test_log_level(monkeypatch, raw, expected):
    monkeypatch.setenv("NINO_LOG_LEVEL", raw)
    assert config.get_log_level() == expected


def test_no_color(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    assert config.use_color() is True
    monkeypatch.setenv("NO_COLOR", "")
    assert config.use_color() is False
