from __future__ import annotations

# eonet_backend/config.py
import os
from dataclasses import dataclass
from typing import Optional

import yaml

# 配置解析顺序（逐项）：
# 1) 环境变量（最高优先级）
# 2) config.yaml（路径：显式参数 > EONET_CONFIG > 项目根）
# 3) DEFAULTS 兜底
_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))

DEFAULTS = {
    "table_name": "events",
    "region": "us-west-2",
    "dynamodb_endpoint": "http://dynamodb-local:8000",
    "aws_access_key_id": "",
    "aws_secret_access_key": "",
    "read_capacity": "5",
    "write_capacity": "5",
    "feed_url": "https://eonet.gsfc.nasa.gov/api/v3/events",
    "feed_limit": "10",
    "feed_timeout": "30",
    "grouping_key": "EONET Events",
    "host": "0.0.0.0",
    "port": "80",
    "log_level": "INFO",
}

ENV_KEYS = {
    "table_name": "EONET_TABLE",
    "region": "EONET_REGION",
    "dynamodb_endpoint": "DYNAMODB_ENDPOINT",
    "aws_access_key_id": "AWS_ACCESS_KEY_ID",
    "aws_secret_access_key": "AWS_SECRET_ACCESS_KEY",
    "feed_url": "EONET_FEED_URL",
    "feed_limit": "EONET_FEED_LIMIT",
    "feed_timeout": "EONET_FEED_TIMEOUT",
    "grouping_key": "EONET_GROUPING_KEY",
    "host": "EONET_HOST",
    "port": "EONET_PORT",
    "log_level": "EONET_LOG_LEVEL",
}


@dataclass(frozen=True)
class Settings:
    table_name: str
    region: str
    dynamodb_endpoint: Optional[str]
    aws_access_key_id: Optional[str]
    aws_secret_access_key: Optional[str]
    read_capacity: int
    write_capacity: int
    feed_url: str
    feed_limit: int
    feed_timeout: float
    grouping_key: str
    host: str
    port: int
    log_level: str


def _config_path(path: str | None) -> str:
    return path or os.environ.get("EONET_CONFIG") or os.path.join(_PROJECT_ROOT, "config.yaml")


def _read_config_yaml(path: str | None = None) -> dict:
    cfg_path = _config_path(path)
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(cfg, dict):
        return {}
    out = {}
    for k in DEFAULTS:
        v = cfg.get(k)
        if v is not None and str(v).strip() != "":
            out[k] = str(v).strip()
    return out


def _to_int(v: str, default: str) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return int(default)


def _to_float(v: str, default: str) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return float(default)


def get_settings(path: str | None = None) -> Settings:
    cfg = {**DEFAULTS, **_read_config_yaml(path)}
    for key, env_name in ENV_KEYS.items():
        env_val = os.environ.get(env_name)
        if env_val is not None:
            cfg[key] = env_val.strip()

    return Settings(
        table_name=cfg["table_name"],
        region=cfg["region"],
        dynamodb_endpoint=cfg["dynamodb_endpoint"] or None,
        aws_access_key_id=cfg["aws_access_key_id"] or None,
        aws_secret_access_key=cfg["aws_secret_access_key"] or None,
        read_capacity=_to_int(cfg["read_capacity"], DEFAULTS["read_capacity"]),
        write_capacity=_to_int(cfg["write_capacity"], DEFAULTS["write_capacity"]),
        feed_url=cfg["feed_url"],
        feed_limit=_to_int(cfg["feed_limit"], DEFAULTS["feed_limit"]),
        feed_timeout=_to_float(cfg["feed_timeout"], DEFAULTS["feed_timeout"]),
        grouping_key=cfg["grouping_key"],
        host=cfg["host"],
        port=_to_int(cfg["port"], DEFAULTS["port"]),
        log_level=cfg["log_level"].upper(),
    )
