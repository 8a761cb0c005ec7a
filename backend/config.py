import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent / ".env")


def _get_bool(name: str, fallback: bool) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None or raw_value == "":
        return fallback
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(name: str, fallback: str = "") -> List[str]:
    raw_value = os.getenv(name, fallback)
    if not raw_value:
        return []
    return [item.strip() for item in raw_value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    coupon_api_url: str = os.getenv(
        "COUPON_API_URL", "https://67eb7353aa794fb3222a4c0e.mockapi.io/coupons"
    )
    order_api_url: str = os.getenv(
        "ORDER_API_URL", "https://67eb7353aa794fb3222a4c0e.mockapi.io/order"
    )
    payment_url: str = os.getenv("PAYMENT_URL", "https://payment.example.com/pay")
    http_timeout_seconds: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
    open_payment_link: bool = _get_bool("OPEN_PAYMENT_LINK", True)
    allowed_origins: List[str] = field(
        default_factory=lambda: _get_list("ALLOWED_ORIGINS", "*")
    )


settings = Settings()
