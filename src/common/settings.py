"""
Settings Module

Loads runtime configuration from config/settings.yaml. The file location can be
overridden with BANK_SYNC_CONFIG; LOG_LEVEL and LOG_FILE override the logging keys.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "settings.yaml"

# Provider balance types, most to least authoritative for reconciliation
DEFAULT_BALANCE_TYPES = ("interimAvailable", "expected", "closingBooked", "interimBooked")
DEFAULT_RATE_LIMIT_PREFIXES = ("http_x_ratelimit", "x-ratelimit")


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    log_file: Optional[str] = None
    preferred_balance_types: Tuple[str, ...] = DEFAULT_BALANCE_TYPES
    rate_limit_header_prefixes: Tuple[str, ...] = field(default=DEFAULT_RATE_LIMIT_PREFIXES)


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """
    Build Settings from the YAML file (if present) and the environment.

    Args:
        config_path: explicit file path; defaults to BANK_SYNC_CONFIG or config/settings.yaml

    Returns:
        Settings
    """
    if config_path is None:
        config_path = Path(os.getenv("BANK_SYNC_CONFIG", DEFAULT_CONFIG_PATH))

    data = {}
    if config_path.exists():
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

    logging_cfg = data.get("logging") or {}
    balances_cfg = data.get("balances") or {}
    errors_cfg = data.get("errors") or {}

    return Settings(
        log_level=os.getenv("LOG_LEVEL", logging_cfg.get("level", "INFO")),
        log_file=os.getenv("LOG_FILE", logging_cfg.get("file")),
        preferred_balance_types=tuple(
            balances_cfg.get("preferred_types") or DEFAULT_BALANCE_TYPES
        ),
        rate_limit_header_prefixes=tuple(
            p.lower() for p in (errors_cfg.get("rate_limit_header_prefixes") or DEFAULT_RATE_LIMIT_PREFIXES)
        ),
    )
