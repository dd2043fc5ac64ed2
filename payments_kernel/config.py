"""
Module: payments_kernel.config
Responsibility: Loads runtime settings for the payments kernel from a YAML
    file and environment overrides into a frozen ``PaymentsConfig``.
Architecture position: Kernel > Config.  Imported by the CLI and by callers
    that build a ``PaymentOrchestrator``.  MUST NOT import from models/,
    services/ or selectors/.

Failure modes:
    - FileNotFoundError if an explicit config path does not exist.
    - yaml.YAMLError on malformed YAML.
    - ValueError on out-of-range or non-numeric settings.

Precedence (highest first):
    1. Environment: PAYMENTS_DATABASE_URL, PAYMENTS_LOG_LEVEL
    2. YAML file (explicit path, or PAYMENTS_CONFIG)
    3. Defaults below
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

DEFAULT_DATABASE_URL = "sqlite:///payments.sqlite3"
DEFAULT_DEPOSIT_CAP_RATIO = Decimal("0.25")
DEFAULT_BEST_CLIENTS_LIMIT = 2

ENV_CONFIG_PATH = "PAYMENTS_CONFIG"
ENV_DATABASE_URL = "PAYMENTS_DATABASE_URL"
ENV_LOG_LEVEL = "PAYMENTS_LOG_LEVEL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class PaymentsConfig:
    """
    Immutable runtime settings.

    Guarantees:
        - deposit_cap_ratio is a Decimal in [0, 1].
        - best_clients_default_limit is a positive int.
        - log_level is a stdlib level name.
    """

    database_url: str = DEFAULT_DATABASE_URL
    echo_sql: bool = False
    pool_size: int = 20
    deposit_cap_ratio: Decimal = DEFAULT_DEPOSIT_CAP_RATIO
    best_clients_default_limit: int = DEFAULT_BEST_CLIENTS_LIMIT
    log_level: str = "INFO"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_config(data: dict[str, Any]) -> PaymentsConfig:
    """Build a PaymentsConfig from a parsed YAML mapping."""
    section = data.get("payments", data)
    if not isinstance(section, dict):
        raise ValueError("'payments' section must be a mapping")

    config = PaymentsConfig()
    if "database_url" in section:
        config = replace(config, database_url=str(section["database_url"]))
    if "echo_sql" in section:
        config = replace(config, echo_sql=bool(section["echo_sql"]))
    if "pool_size" in section:
        config = replace(config, pool_size=_positive_int("pool_size", section["pool_size"]))
    if "deposit_cap_ratio" in section:
        config = replace(
            config, deposit_cap_ratio=_ratio("deposit_cap_ratio", section["deposit_cap_ratio"])
        )
    if "best_clients_default_limit" in section:
        config = replace(
            config,
            best_clients_default_limit=_positive_int(
                "best_clients_default_limit", section["best_clients_default_limit"]
            ),
        )
    if "log_level" in section:
        config = replace(config, log_level=_log_level(section["log_level"]))
    return config


def load_config(path: str | Path | None = None) -> PaymentsConfig:
    """
    Resolve the active configuration.

    Args:
        path: Optional YAML file.  Falls back to $PAYMENTS_CONFIG; when
            neither is set, defaults are used.

    Returns:
        PaymentsConfig with environment overrides applied.
    """
    path = path or os.environ.get(ENV_CONFIG_PATH)
    config = parse_config(load_yaml_file(Path(path))) if path else PaymentsConfig()

    db_url = os.environ.get(ENV_DATABASE_URL)
    if db_url:
        config = replace(config, database_url=db_url)
    level = os.environ.get(ENV_LOG_LEVEL)
    if level:
        config = replace(config, log_level=_log_level(level))
    return config


def _positive_int(name: str, value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {value!r}") from None
    if number <= 0:
        raise ValueError(f"{name} must be positive, got {number}")
    return number


def _ratio(name: str, value: Any) -> Decimal:
    try:
        ratio = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if not ratio.is_finite() or ratio < 0 or ratio > 1:
        raise ValueError(f"{name} must be between 0 and 1, got {value!r}")
    return ratio


def _log_level(value: Any) -> str:
    level = str(value).upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"log_level must be one of {_LOG_LEVELS}, got {value!r}")
    return level
