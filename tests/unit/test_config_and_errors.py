# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging

import pytest

from requiem import config
from requiem.config import DEFAULT_USER_AGENT, RequiemSettings, load_settings
from requiem.errors import ErrorKind, RequiemError
from requiem.log import resolve_level, setup_logging


def test_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("REQUIEM_USER_AGENT", "CustomAgent/1.0")
    monkeypatch.setenv("REQUIEM_VERIFY_SSL", "0")
    monkeypatch.setenv("REQUIEM_TRUST_ENV", "off")

    settings = load_settings()
    assert settings.user_agent == "CustomAgent/1.0"
    assert settings.verify_ssl is False
    assert settings.trust_env is False


def test_settings_defaults(monkeypatch):
    for name in ("REQUIEM_USER_AGENT", "REQUIEM_VERIFY_SSL", "REQUIEM_TRUST_ENV"):
        monkeypatch.delenv(name, raising=False)
    settings = RequiemSettings()
    assert settings.user_agent == DEFAULT_USER_AGENT
    assert settings.verify_ssl is True
    assert settings.trust_env is True


def test_bool_env_truthy_variants(monkeypatch):
    for value in ("1", "true", "YES", " on "):
        monkeypatch.setenv("REQUIEM_VERIFY_SSL", value)
        assert load_settings().verify_ssl is True
    monkeypatch.setenv("REQUIEM_VERIFY_SSL", "nope")
    assert load_settings().verify_ssl is False


def test_default_redirect_limit():
    assert config.DEFAULT_FOLLOW_REDIRECTS == 5


def test_error_kinds_are_stable_strings():
    assert [kind.value for kind in ErrorKind] == [
        "InvalidUrl",
        "InvalidOptions",
        "Timeout",
        "RequestAbort",
        "TooManyRedirects",
        "InvalidRedirectUrl",
        "InvalidStatusCode",
        "InvalidJsonBody",
    ]


def test_requiem_error_carries_context():
    err = RequiemError("Timeout", "Reached timeout limit (1s), request aborted", request="req")
    assert err.kind is ErrorKind.TIMEOUT
    assert err.code == "Timeout"
    assert str(err) == "Reached timeout limit (1s), request aborted"
    assert err.request == "req"
    assert err.response is None
    assert "Timeout" in repr(err)


def test_setup_logging_configures_package_logger(monkeypatch):
    monkeypatch.delenv("REQUIEM_LOG_LEVEL", raising=False)
    logger = setup_logging("debug")
    assert logger.name == "requiem"
    assert logger.level == logging.DEBUG
    handlers = list(logger.handlers)

    setup_logging()
    assert logger.level == logging.WARNING
    assert logger.handlers == handlers


def test_log_level_comes_from_environment(monkeypatch):
    monkeypatch.setenv("REQUIEM_LOG_LEVEL", "info")
    assert resolve_level() == logging.INFO
    assert resolve_level("error") == logging.ERROR
    assert resolve_level(logging.DEBUG) == logging.DEBUG
    with pytest.raises(ValueError):
        resolve_level("not-a-level")
