"""Environment-driven configuration for the CLI and services."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet

from orderflow.core.models import BankPaymentConfig, PaymentMethod

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = Path("secrets/orderflow.env")
_ENV_LOADED = False


def get_config_value(key: str, default: str = "") -> str:
    """Get a configuration value from the environment."""

    return os.getenv(key, default)


def load_env_file(path: Path) -> None:
    """Load environment variables from a file if it exists."""
    if not path.exists():
        return

    try:
        with path.open(encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                if not key or key in os.environ:
                    continue
                os.environ[key] = value.strip().strip('"').strip("'")
    except OSError as exc:
        logger.debug("Could not load env file %s: %s", path, exc)


def _ensure_env() -> None:
    """Populate settings from the local env file once per process."""

    global _ENV_LOADED
    if _ENV_LOADED:
        return
    _ENV_LOADED = True
    load_env_file(Path(os.getenv("ORDERFLOW_ENV_FILE", DEFAULT_ENV_FILE)))


def parse_payment_methods(raw: str) -> FrozenSet[PaymentMethod]:
    """Parse a comma separated list such as ``"TRANSFER,CASH"``."""

    methods = set()
    for token in raw.split(","):
        token = token.strip().upper()
        if not token:
            continue
        try:
            methods.add(PaymentMethod(token))
        except ValueError:
            logger.warning("Ignoring unknown payment method %r in configuration", token)
    return frozenset(methods) or frozenset({PaymentMethod.TRANSFER})


@dataclass
class Settings:
    bank_id: str = "MB"
    account_no: str = ""
    account_name: str = ""
    store_path: Path = Path("data/store.json")
    reconcile_methods: FrozenSet[PaymentMethod] = field(
        default_factory=lambda: frozenset({PaymentMethod.TRANSFER})
    )
    ai_api_key: str = ""
    ai_model: str = "gpt-4o-mini"
    ai_base_url: str = "https://api.openai.com/v1"
    ai_disabled: bool = False

    def bank_config(self) -> BankPaymentConfig:
        return BankPaymentConfig(
            bank_id=self.bank_id, account_no=self.account_no, account_name=self.account_name
        )


def load_settings() -> Settings:
    """Build settings from the environment (after loading the env file)."""

    _ensure_env()
    return Settings(
        bank_id=get_config_value("ORDERFLOW_BANK_ID", "MB"),
        account_no=get_config_value("ORDERFLOW_ACCOUNT_NO"),
        account_name=get_config_value("ORDERFLOW_ACCOUNT_NAME"),
        store_path=Path(get_config_value("ORDERFLOW_STORE", "data/store.json")),
        reconcile_methods=parse_payment_methods(
            get_config_value("ORDERFLOW_RECONCILE_METHODS", "TRANSFER")
        ),
        ai_api_key=get_config_value("OPENAI_API_KEY"),
        ai_model=get_config_value("OPENAI_MODEL", "gpt-4o-mini"),
        ai_base_url=get_config_value("OPENAI_BASE_URL", "https://api.openai.com/v1"),
        ai_disabled=get_config_value("AI_STRUCTURING_DISABLED", "0") == "1",
    )
