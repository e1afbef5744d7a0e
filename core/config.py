# core/config.py
"""Runtime settings loaded from the environment (or a local .env file)."""
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

DEFAULT_AI_API_URL = "http://localhost:1234/v1/chat/completions"
DEFAULT_AI_MODEL = "local-model"
DEFAULT_BUSINESS_API_URL = "https://hackmtyapiwebapp.onrender.com"

# The ledger requires employee/supplier/order ids that the interview never
# collects. Until those are wired to real records every post uses this value.
UNASSIGNED_ID = 1


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


@dataclass(frozen=True)
class Settings:
    ai_api_url: str = DEFAULT_AI_API_URL
    ai_model: str = DEFAULT_AI_MODEL
    ai_api_key: str = "not-needed"
    business_api_url: str = DEFAULT_BUSINESS_API_URL
    business_api_timeout: float = 30.0
    ledger_employee_id: int = UNASSIGNED_ID
    ledger_supplier_id: int = UNASSIGNED_ID
    ledger_order_id: int = UNASSIGNED_ID
    host: str = "0.0.0.0"
    port: int = 5050

    @classmethod
    def load(cls) -> "Settings":
        """Build settings from environment variables after reading .env."""
        load_dotenv()
        timeout = _int_env("BUSINESS_API_TIMEOUT", 30)
        if timeout < 1:
            raise RuntimeError("BUSINESS_API_TIMEOUT must be at least 1")
        return cls(
            ai_api_url=os.getenv("AI_API_URL", DEFAULT_AI_API_URL),
            ai_model=os.getenv("AI_MODEL", DEFAULT_AI_MODEL),
            ai_api_key=os.getenv("AI_API_KEY") or os.getenv("OPENAI_API_KEY") or "not-needed",
            business_api_url=os.getenv("BUSINESS_API_URL", DEFAULT_BUSINESS_API_URL).rstrip("/"),
            business_api_timeout=float(timeout),
            ledger_employee_id=_int_env("LEDGER_EMPLOYEE_ID", UNASSIGNED_ID),
            ledger_supplier_id=_int_env("LEDGER_SUPPLIER_ID", UNASSIGNED_ID),
            ledger_order_id=_int_env("LEDGER_ORDER_ID", UNASSIGNED_ID),
            host=os.getenv("HOST", "0.0.0.0"),
            port=_int_env("PORT", 5050),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.load()
