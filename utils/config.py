"""Configuration management utilities for the scheme monitor.

Provides:
- A small Config base class that can list its settings
- KnownValues: report stage, component-status, role and period vocabularies
- AppConfig: application settings loaded from environment variables
"""

import os as _os
from pathlib import Path
from typing import Dict, Any


class Config:
    """Base configuration class for organizing application settings."""

    def __init__(self):
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary.

        Returns:
            Dictionary of all config attributes
        """
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}


class KnownValues:
    """Container for the vocabularies used across the dashboard."""

    # Stage labels used by the monthly report chart
    REPORT_STAGES = ("Not Started", "Foundation", "Walls", "Roof", "Finishing", "Completed")

    # Status of a single construction component
    COMPONENT_STATUSES = ("Not Started", "In Progress", "Completed")

    # Roles that may create, edit, update progress on, or delete houses
    MANAGE_ROLES = frozenset({"admin", "officer"})

    # Financial report look-back windows, in months
    REPORT_PERIODS = {
        "Last Month": 1,
        "Last 3 Months": 3,
        "Last 6 Months": 6,
        "Last Year": 12,
    }
    DEFAULT_REPORT_PERIOD = "Last 6 Months"

    @classmethod
    def can_manage(cls, role: str | None) -> bool:
        """True if *role* may modify beneficiary records."""
        return role in cls.MANAGE_ROLES


class AppConfig(Config):
    """Application-level configuration loaded from environment variables.

    All env vars have sensible defaults so the application works out of the
    box without any configuration.

    Environment variables:
        APP_DATA_DIR: Directory holding the seed JSON files (default: data)
        APP_BENEFICIARIES_PATH: Beneficiary seed file (default: $APP_DATA_DIR/beneficiaries.json)
        APP_OFFICERS_PATH: Officer seed file (default: $APP_DATA_DIR/officers.json)
        APP_SESSION_PATH: File mirroring the logged-in user (default: .session.json)
        APP_CACHE_TTL: Store cache lifetime in seconds (default: 60)
        APP_SIMULATED_LATENCY_MS: Artificial delay per store call (default: 0)
        APP_PORT: API server port (default: 8000)
        APP_HOST: API server bind address (default: 127.0.0.1)
        APP_LOG_FORMAT: Logging format, "text" or "json" (default: text)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: *)
    """

    def __init__(self) -> None:
        super().__init__()
        self.data_dir = Path(_os.getenv("APP_DATA_DIR", "data"))
        self.beneficiaries_path = Path(
            _os.getenv("APP_BENEFICIARIES_PATH", str(self.data_dir / "beneficiaries.json"))
        )
        self.officers_path = Path(
            _os.getenv("APP_OFFICERS_PATH", str(self.data_dir / "officers.json"))
        )
        self.session_path = Path(_os.getenv("APP_SESSION_PATH", ".session.json"))
        self.cache_ttl = float(_os.getenv("APP_CACHE_TTL", "60"))
        self.simulated_latency_ms = int(_os.getenv("APP_SIMULATED_LATENCY_MS", "0"))
        self.api_port = int(_os.getenv("APP_PORT", "8000"))
        self.api_host = _os.getenv("APP_HOST", "127.0.0.1")
        self.log_format = _os.getenv("APP_LOG_FORMAT", "text")
        raw_origins = _os.getenv("APP_CORS_ORIGINS", "*")
        self.cors_origins: list[str] = (
            ["*"] if raw_origins == "*"
            else [o.strip() for o in raw_origins.split(",") if o.strip()]
        )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()
