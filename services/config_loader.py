import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from services.check_coordinator import CheckAction, CheckKind
from services.errors import ConfigurationError

DEFAULT_CONFIG = {
    "woffu": {
        "client": "woffu",
        "timeout_seconds": 30.0,
    },
    "agreements": {
        "home": None,
        "office": None,
    },
    "scheduler": {
        "timezone": None,
        "check_in_cron": "0 9 * * mon-fri",
        "check_out_cron": "0 18 * * mon-fri",
        "check_in_locations": {},
    },
    "discord": {
        "enabled": True,
    },
    "slack": {
        "enabled": True,
        "notify_channel": "",
    },
    "logging": {
        "level": "INFO",
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """ベース設定にオーバーライドをマージする"""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(path: str = "config.yaml") -> dict:
    """YAML設定ファイルをロードし、デフォルト設定とマージして返す"""
    config_path = Path(path)
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            try:
                user_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"{path} を読み込めません: {e}") from e
        if not isinstance(user_config, dict):
            raise ConfigurationError(f"{path} の形式が不正です")
        return _deep_merge(copy.deepcopy(DEFAULT_CONFIG), user_config)
    return copy.deepcopy(DEFAULT_CONFIG)


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ConfigurationError(f"{name} is not set")
    return value


@dataclass(frozen=True)
class Credentials:
    company: str
    email: str
    password: str = field(repr=False)


def credentials_from_env() -> Credentials:
    """WOFFU_COMPANY / WOFFU_EMAIL / WOFFU_PASSWORD を読む"""
    return Credentials(
        company=_require_env("WOFFU_COMPANY"),
        email=_require_env("WOFFU_EMAIL"),
        password=_require_env("WOFFU_PASSWORD"),
    )


def _agreement_id(config: dict, location: str) -> Optional[int]:
    value = os.getenv(f"WOFFU_{location.upper()}_AGREEMENT_ID")
    if not value:
        value = config["agreements"].get(location)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"{location}のagreement IDが数値ではありません: {value!r}"
        ) from e


def resolve_check_kind(action: CheckAction, config: dict) -> CheckKind:
    """打刻種別に設定のagreement IDを紐付ける"""
    if action is CheckAction.CHECK_OUT:
        return CheckKind.check_out()

    location = "home" if action is CheckAction.CHECK_IN_HOME else "office"
    agreement_id = _agreement_id(config, location)
    if agreement_id is None:
        raise ConfigurationError(
            f"agreements.{location} (WOFFU_{location.upper()}_AGREEMENT_ID) is not set"
        )
    return CheckKind(action, agreement_id)
