"""
Configuration utilities for the GST invoice tools.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv


class Config:
    """Configuration manager for the GST invoice tools."""

    def __init__(self, env_file: Optional[str] = None) -> None:
        """Initialize configuration.

        If an env_file path is provided, load environment variables from it.
        Otherwise, do not auto-load a .env file to keep defaults predictable.
        """
        self.env_file = env_file
        self._load_environment()
        self._config = self._load_config()

    def _load_environment(self) -> None:
        """Load environment variables from explicit .env file if provided."""
        if not self.env_file:
            return
        env_path = Path(self.env_file)
        if env_path.exists():
            load_dotenv(env_path)

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        return {
            # Core settings
            "log_level": self._get_str("LOG_LEVEL", default="INFO"),
            # MongoDB settings for accepted orders
            "mongo_url": self._get_str("DB_CONNECTION_URL", default=""),
            "mongo_db": self._get_str("DB_NAME", default="sales_orders"),
            "mongo_collection": self._get_str("COLLECTION_NAME", default="orders"),
            # Registered GST state of the business
            "home_state_name": self._get_str("HOME_STATE_NAME", default="Haryana"),
            "home_state_codes": self._get_list("HOME_STATE_CODES", default=["HR", "06"]),
            # Tax-inclusive system charges
            "shipping_charge": self._get_float("SHIPPING_CHARGE", default=100.0),
            "cod_charge": self._get_float("COD_CHARGE", default=50.0),
            # Optional replacement for the built-in HSN/SAC table
            "hsn_table_file": self._get_str("HSN_TABLE_FILE", default=""),
        }

    def _get_str(self, key: str, default: str = "") -> str:
        """Get string configuration value."""
        if self.env_file is None:
            return default
        return os.getenv(key, default)

    def _get_float(self, key: str, default: float = 0.0) -> float:
        """Get float configuration value."""
        if self.env_file is None:
            return default
        try:
            return float(os.getenv(key, str(default)))
        except ValueError:
            return default

    def _get_list(self, key: str, default: Optional[List[str]] = None) -> List[str]:
        """Get comma-separated list configuration value."""
        default = list(default or [])
        if self.env_file is None:
            return default
        raw = os.getenv(key)
        if raw is None:
            return default
        return [part.strip() for part in raw.split(",") if part.strip()]

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Get configuration value using bracket notation."""
        return self._config[key]

    def __contains__(self, key: str) -> bool:
        """Check if configuration key exists."""
        return key in self._config
