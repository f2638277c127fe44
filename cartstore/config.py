"""
Cart store configuration.

Values come from the process environment; a `.env` file in the working
directory is loaded first when present.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_API_URL = "http://localhost:3333"
DEFAULT_API_TIMEOUT = 10.0
DEFAULT_STORAGE_KEY = "@RocketShoes:cart"
DEFAULT_STORAGE_PATH = "data/storage/cart.json"


@dataclass(frozen=True)
class Settings:
    """Immutable snapshot of the cart store settings."""

    api_url: str = DEFAULT_API_URL
    api_timeout: float = DEFAULT_API_TIMEOUT
    storage_key: str = DEFAULT_STORAGE_KEY
    storage_path: Path = Path(DEFAULT_STORAGE_PATH)
    redis_url: str = ""
    redis_token: str = ""

    @property
    def use_redis(self) -> bool:
        return bool(self.redis_url and self.redis_token)


def _get_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def load_settings() -> Settings:
    """Read settings from the environment."""
    return Settings(
        api_url=os.environ.get("SHOP_API_URL", DEFAULT_API_URL).rstrip("/"),
        api_timeout=_get_float("SHOP_API_TIMEOUT", DEFAULT_API_TIMEOUT),
        storage_key=os.environ.get("CART_STORAGE_KEY", DEFAULT_STORAGE_KEY),
        storage_path=Path(os.environ.get("CART_STORAGE_PATH", DEFAULT_STORAGE_PATH)),
        # Standard Upstash env var names
        redis_url=os.environ.get("UPSTASH_REDIS_REST_URL", ""),
        redis_token=os.environ.get("UPSTASH_REDIS_REST_TOKEN", ""),
    )
