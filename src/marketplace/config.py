"""Application settings for the marketplace core.

Protean's own configuration (databases, brokers, event store) lives in
``domain.toml`` next to ``domain.py``. The values here are business knobs
read from the environment.
"""

import os
from dataclasses import dataclass

_settings = None


@dataclass(frozen=True)
class Settings:
    """Marketplace tunables."""

    low_stock_threshold: int = 5
    digital_stock_floor: int = 999
    digital_stock_sentinel: int = 9999
    stock_lock_timeout: float = 5.0

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            low_stock_threshold=int(os.environ.get("LOW_STOCK_THRESHOLD", cls.low_stock_threshold)),
            digital_stock_floor=int(os.environ.get("DIGITAL_STOCK_FLOOR", cls.digital_stock_floor)),
            digital_stock_sentinel=int(os.environ.get("DIGITAL_STOCK_SENTINEL", cls.digital_stock_sentinel)),
            stock_lock_timeout=float(os.environ.get("STOCK_LOCK_TIMEOUT", cls.stock_lock_timeout)),
        )


def get_settings() -> Settings:
    """Return the process-wide settings (read once from the environment)."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings():
    """Forget cached settings so the next call re-reads the environment (useful for testing)."""
    global _settings
    _settings = None
