"""
Configuration management for Patriot Thanks.

Loads a JSON config file when one exists and overlays environment variables
on top of it, falling back to sensible defaults for local development.
"""

import json
import os
from pathlib import Path
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, asdict, field
import logging

DEFAULT_DATABASE_URL = "sqlite:///./patriot_thanks.db"


def _env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment ("1", "true", "yes")."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class DatabaseConfig:
    """Database configuration."""

    url: str = DEFAULT_DATABASE_URL
    echo: bool = False
    pool_pre_ping: bool = True
    log_queries: bool = False  # Enable query logging for performance analysis
    slow_query_seconds: float = 0.1


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    auto_reload: bool = False
    workers: int = 1
    allowed_origins: List[str] = field(
        default_factory=lambda: ["http://127.0.0.1:8000", "http://localhost:8000"]
    )


@dataclass
class AppConfig:
    """Main application configuration."""

    app_name: str = "Patriot Thanks"
    version: str = "1.0.0"
    description: str = (
        "Directory of businesses offering discounts to veterans, military "
        "and first responders"
    )

    user_data_dir: Optional[str] = None

    # Listing
    page_size: int = 10

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"

    # Environment
    is_development: bool = False


@dataclass
class PatriotConfig:
    """Complete configuration for Patriot Thanks."""

    app: AppConfig
    server: ServerConfig
    database: DatabaseConfig

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "app": asdict(self.app),
            "server": asdict(self.server),
            "database": asdict(self.database),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PatriotConfig":
        """Create from dictionary."""
        return cls(
            app=AppConfig(**data.get("app", {})),
            server=ServerConfig(**data.get("server", {})),
            database=DatabaseConfig(**data.get("database", {})),
        )


class ConfigManager:
    """Manages configuration loading, saving, and environment overrides."""

    def __init__(self):
        self.config_file: Optional[Path] = None
        self.config: Optional[PatriotConfig] = None

    def get_config_file_path(self) -> Path:
        """Get the path for the config file."""
        user_data_dir = os.getenv("PATRIOT_USER_DATA_DIR")
        if user_data_dir:
            config_dir = Path(user_data_dir)
        else:
            config_dir = Path.cwd() / "data"
        return config_dir / "config.json"

    def apply_environment(self, config: PatriotConfig) -> PatriotConfig:
        """Overlay PATRIOT_* environment variables onto a configuration."""
        db_url = os.getenv("PATRIOT_DATABASE_URL") or os.getenv("DATABASE_URL")
        if db_url:
            config.database.url = db_url
        if os.getenv("PATRIOT_LOG_QUERIES") is not None:
            config.database.log_queries = _env_flag("PATRIOT_LOG_QUERIES")

        if os.getenv("PATRIOT_DEBUG") is not None:
            config.server.debug = _env_flag("PATRIOT_DEBUG")
            if config.server.debug:
                config.app.log_level = "DEBUG"
        if os.getenv("PATRIOT_HOST"):
            config.server.host = os.environ["PATRIOT_HOST"]
        if os.getenv("PATRIOT_PORT"):
            config.server.port = int(os.environ["PATRIOT_PORT"])

        if os.getenv("PATRIOT_LOG_LEVEL"):
            config.app.log_level = os.environ["PATRIOT_LOG_LEVEL"].upper()
        if os.getenv("PATRIOT_LOG_DIR"):
            config.app.log_dir = os.environ["PATRIOT_LOG_DIR"]
        if os.getenv("PATRIOT_LOG_TO_FILE") is not None:
            config.app.log_to_file = _env_flag("PATRIOT_LOG_TO_FILE", True)
        if os.getenv("PATRIOT_PAGE_SIZE"):
            config.app.page_size = int(os.environ["PATRIOT_PAGE_SIZE"])

        config.app.user_data_dir = os.getenv("PATRIOT_USER_DATA_DIR")
        config.app.is_development = _env_flag("PATRIOT_DEV_MODE")
        return config

    def create_default_config(self) -> PatriotConfig:
        """Create default configuration with environment overrides applied."""
        config = PatriotConfig(
            app=AppConfig(), server=ServerConfig(), database=DatabaseConfig()
        )
        return self.apply_environment(config)

    def load_config(self, reload: bool = False) -> PatriotConfig:
        """Load configuration from file or create default."""
        if self.config is not None and not reload:
            return self.config

        self.config_file = self.get_config_file_path()

        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                self.config = self.apply_environment(PatriotConfig.from_dict(data))
                logging.info(f"Loaded configuration from {self.config_file}")
            except (OSError, ValueError, TypeError) as e:
                logging.warning(f"Failed to load config from {self.config_file}: {e}")
                logging.info("Creating default configuration")
                self.config = self.create_default_config()
        else:
            self.config = self.create_default_config()

        return self.config

    def save_config(self, config: Optional[PatriotConfig] = None) -> bool:
        """Save configuration to file."""
        if config is None:
            config = self.config

        if config is None:
            logging.error("No configuration to save")
            return False

        try:
            if self.config_file is None:
                self.config_file = self.get_config_file_path()

            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)

            logging.info(f"Saved configuration to {self.config_file}")
            return True

        except OSError as e:
            logging.error(f"Failed to save config to {self.config_file}: {e}")
            return False

    def get_database_url(self) -> str:
        """Get the database URL."""
        return self.load_config().database.url

    def validate_config(self) -> List[str]:
        """Validate configuration and return list of warnings/errors."""
        config = self.load_config()
        issues = []

        if config.app.page_size < 1:
            issues.append(f"Page size must be positive, got {config.app.page_size}")

        db_url = config.database.url
        if db_url.startswith("sqlite:///"):
            db_dir = Path(db_url.replace("sqlite:///", "")).parent
            if db_dir.exists() and not os.access(db_dir, os.W_OK):
                issues.append(f"Database directory is not writable: {db_dir}")

        return issues


# Global config manager instance
config_manager = ConfigManager()


def get_config() -> PatriotConfig:
    """Get the current configuration."""
    return config_manager.load_config()


def get_database_url() -> str:
    """Get the database URL."""
    return config_manager.get_database_url()
