import os
import tempfile

import pytest

from services.check_coordinator import CheckAction
from services.config_loader import (
    DEFAULT_CONFIG,
    credentials_from_env,
    load_config,
    resolve_check_kind,
)
from services.errors import ConfigurationError


def _write_yaml(text):
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False, encoding="utf-8") as f:
        f.write(text)
    return f.name


def test_load_config_override():
    """YAMLの値がデフォルトを上書きすること"""
    path = _write_yaml("scheduler:\n  check_in_cron: '30 8 * * mon-fri'\n")
    config = load_config(path)
    os.unlink(path)
    assert config["scheduler"]["check_in_cron"] == "30 8 * * mon-fri"
    assert config["scheduler"]["check_out_cron"] == "0 18 * * mon-fri"


def test_load_config_nested():
    """ネストされた設定が正しく取得できること"""
    path = _write_yaml("agreements:\n  home: 111\n  office: 222\n")
    config = load_config(path)
    os.unlink(path)
    assert config["agreements"] == {"home": 111, "office": 222}


def test_load_config_file_not_found():
    """存在しないファイルの場合デフォルト設定を返すこと"""
    config = load_config("nonexistent.yaml")
    assert config["woffu"]["client"] == "woffu"
    config["woffu"]["client"] = "dummy"
    assert DEFAULT_CONFIG["woffu"]["client"] == "woffu"


def test_load_config_invalid():
    path = _write_yaml("- just\n- a list\n")
    with pytest.raises(ConfigurationError):
        load_config(path)
    os.unlink(path)


def test_credentials_from_env(monkeypatch):
    monkeypatch.setenv("WOFFU_COMPANY", "acme")
    monkeypatch.setenv("WOFFU_EMAIL", "user@example.com")
    monkeypatch.setenv("WOFFU_PASSWORD", "secret")

    cred = credentials_from_env()
    assert cred.company == "acme"
    assert cred.email == "user@example.com"
    assert "secret" not in repr(cred)


@pytest.mark.parametrize("missing", ["WOFFU_COMPANY", "WOFFU_EMAIL", "WOFFU_PASSWORD"])
def test_credentials_missing(monkeypatch, missing):
    """必須の環境変数がなければConfigurationErrorになること"""
    for name in ["WOFFU_COMPANY", "WOFFU_EMAIL", "WOFFU_PASSWORD"]:
        monkeypatch.setenv(name, "x")
    monkeypatch.delenv(missing)

    with pytest.raises(ConfigurationError, match=missing):
        credentials_from_env()


def test_resolve_check_kind_from_config(monkeypatch):
    monkeypatch.delenv("WOFFU_HOME_AGREEMENT_ID", raising=False)
    monkeypatch.delenv("WOFFU_OFFICE_AGREEMENT_ID", raising=False)
    config = load_config("nonexistent.yaml")
    config["agreements"] = {"home": 111, "office": "222"}

    assert resolve_check_kind(CheckAction.CHECK_IN_HOME, config).agreement_event_id == 111
    assert resolve_check_kind(CheckAction.CHECK_IN_OFFICE, config).agreement_event_id == 222
    assert resolve_check_kind(CheckAction.CHECK_OUT, config).agreement_event_id is None


def test_resolve_check_kind_env_override(monkeypatch):
    """環境変数のagreement IDが設定より優先されること"""
    monkeypatch.setenv("WOFFU_HOME_AGREEMENT_ID", "999")
    config = load_config("nonexistent.yaml")
    config["agreements"]["home"] = 111

    assert resolve_check_kind(CheckAction.CHECK_IN_HOME, config).agreement_event_id == 999


def test_resolve_check_kind_missing(monkeypatch):
    monkeypatch.delenv("WOFFU_OFFICE_AGREEMENT_ID", raising=False)
    config = load_config("nonexistent.yaml")

    with pytest.raises(ConfigurationError):
        resolve_check_kind(CheckAction.CHECK_IN_OFFICE, config)


def test_resolve_check_kind_not_numeric(monkeypatch):
    monkeypatch.setenv("WOFFU_HOME_AGREEMENT_ID", "abc")
    config = load_config("nonexistent.yaml")

    with pytest.raises(ConfigurationError):
        resolve_check_kind(CheckAction.CHECK_IN_HOME, config)
