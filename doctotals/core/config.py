# FILE: doctotals/core/config.py
from __future__ import annotations

import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


class Settings(BaseModel):
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Document Totals Engine")

    # ---------- Currency ----------
    CURRENCY_CODE: str = os.getenv("CURRENCY_CODE", "THB")
    CURRENCY_SYMBOL: str = os.getenv("CURRENCY_SYMBOL", "฿")
    CURRENCY_DECIMAL_PLACES: int = int(
        os.getenv("CURRENCY_DECIMAL_PLACES", "2") or 2)
    # significant digits kept by Money arithmetic before finalization
    DECIMAL_PRECISION: int = int(os.getenv("DECIMAL_PRECISION", "28") or 28)

    # ---------- Document defaults ----------
    DEFAULT_TAX_RATE: str = os.getenv("DEFAULT_TAX_RATE", "0") or "0"
    DEFAULT_TAX_MODE: str = (os.getenv("DEFAULT_TAX_MODE", "inclusive")
                             or "inclusive").strip().lower()
    DEFAULT_WITHHOLDING_PERCENT: str = os.getenv(
        "DEFAULT_WITHHOLDING_PERCENT", "3") or "3"
    DEFAULT_WITHHOLDING_ENABLED: bool = _env_bool(
        "DEFAULT_WITHHOLDING_ENABLED", "false")

    # Thai VAT; used to derive VAT-inclusive shelf prices
    STANDARD_VAT_RATE: str = os.getenv("STANDARD_VAT_RATE", "7") or "7"


settings = Settings()
