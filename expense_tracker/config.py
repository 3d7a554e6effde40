from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Dict

import yaml

DEFAULT_CONFIG: Dict[str, object] = {
    "db_path": "expense_tracker.db",
    "jwt_secret": "",
    "token_ttl_hours": 24,
    "bcrypt_rounds": 10,
    "upload_dir": "uploads",
    "api_prefix": "/api/v1",
    "cors_origins": ["*"],
    "log_level": "INFO",
}

# environment variable -> config key
ENV_OVERRIDES: Dict[str, str] = {
    "EXPENSE_TRACKER_DB": "db_path",
    "JWT_SECRET": "jwt_secret",
    "EXPENSE_TRACKER_UPLOAD_DIR": "upload_dir",
    "LOG_LEVEL": "log_level",
}


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config recursively."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
    return merged


def load_config(path: str | Path | None = None, environ: Dict[str, str] | None = None) -> Dict[str, object]:
    """Build the runtime config from defaults, an optional YAML file and the environment.

    Environment variables listed in ``ENV_OVERRIDES`` win over the file.
    """
    data: Dict[str, object] = {}
    if path is not None:
        target = Path(path)
        if target.exists():
            with target.open("r", encoding="utf-8") as fp:
                data = yaml.safe_load(fp) or {}
    config = _merge_defaults(data, DEFAULT_CONFIG)

    env = os.environ if environ is None else environ
    for var, key in ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            config[key] = value

    config["token_ttl_hours"] = int(config["token_ttl_hours"])
    config["bcrypt_rounds"] = int(config["bcrypt_rounds"])
    config["log_level"] = str(config["log_level"]).upper()
    return config


def save_config(config: Dict[str, object], path: str | Path) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as fp:
        yaml.safe_dump(config, fp, sort_keys=False)
