from __future__ import annotations

import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel

from bounty_pricer.errors import ConfigError

DEFAULT_PRICE_API_URL = "https://api.coinbase.com/v2/exchange-rates"
DEFAULT_DEPLOYMENT_ID_URL = "https://indexer.poidh.xyz/deployment_id"
DEGEN_CHAIN_ID = 666666666


class SchemaConfig(BaseModel):
    mode: Literal["fixed", "deployment"] = "fixed"
    name: str = "public"
    deployment_id_url: str = DEFAULT_DEPLOYMENT_ID_URL
    ensure_live_query_tables: bool = True


class BountiesConfig(BaseModel):
    layout: Literal["table", "extra"] = "table"
    table: str = "Bounties"
    extra_table: str = "BountiesExtra"


class JobConfig(BaseModel):
    database_url: Optional[str] = None
    threshold_percent: Decimal = Decimal("10")
    max_attempts: int = 5
    retry_wait_s: float = 0.0
    http_timeout_s: int = 15
    price_api_url: str = DEFAULT_PRICE_API_URL
    degen_chain_id: int = DEGEN_CHAIN_ID
    price_schema: str = "public"
    price_table: str = "Price"
    target_schema: SchemaConfig = SchemaConfig()
    bounties: BountiesConfig = BountiesConfig()


class TriggerConfig(BaseModel):
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    secret: Optional[str] = None
    path: str = "/jobs/update-prices"
    timeout_s: int = 30


class AppConfig(BaseModel):
    job: JobConfig = JobConfig()
    trigger: TriggerConfig = TriggerConfig()


_ENV_OVERRIDES = {
    "DATABASE_URL": ("job", "database_url"),
    "PRICE_THRESHOLD_PERCENT": ("job", "threshold_percent"),
    "BOUNTY_LAYOUT": ("job", "bounties", "layout"),
    "SCHEMA_MODE": ("job", "target_schema", "mode"),
    "DEPLOYMENT_ID_URL": ("job", "target_schema", "deployment_id_url"),
    "TRIGGER_BASE_URL": ("trigger", "base_url"),
    "TRIGGER_API_KEY": ("trigger", "api_key"),
    "TRIGGER_SECRET": ("trigger", "secret"),
}


def load_env(root: str | Path) -> Path | None:
    """Load ``.env`` from ``root``, falling back to ``.env.local``.

    Variables already present in the process environment are left untouched.
    Returns the file that was loaded, if any.
    """
    root_path = Path(root)
    for name in (".env", ".env.local"):
        candidate = root_path / name
        if candidate.exists():
            load_dotenv(candidate, override=False)
            return candidate
    return None


def load_config(path: str | Path, environ: Mapping[str, str] | None = None) -> AppConfig:
    data: Dict[str, Any] = {}
    config_path = Path(path)
    if config_path.exists():
        with config_path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle)
            if isinstance(loaded, dict):
                data = loaded
    env = os.environ if environ is None else environ
    for key, target in _ENV_OVERRIDES.items():
        value = env.get(key)
        if value:
            _set_nested(data, target, value)
    return AppConfig(**data)


def require_database_url(config: JobConfig) -> str:
    if not config.database_url:
        raise ConfigError("DATABASE_URL is required")
    return config.database_url


def require_trigger(config: TriggerConfig) -> TriggerConfig:
    missing = [
        name
        for name, value in (
            ("TRIGGER_BASE_URL", config.base_url),
            ("TRIGGER_API_KEY", config.api_key),
            ("TRIGGER_SECRET", config.secret),
        )
        if not value
    ]
    if missing:
        raise ConfigError(f"Missing trigger settings: {', '.join(missing)}")
    return config


def _set_nested(data: Dict[str, Any], path: tuple[str, ...], value: str) -> None:
    node = data
    for key in path[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[path[-1]] = value
