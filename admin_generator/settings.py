"""
Settings Provider.

Loads admin generator configuration from environment variables
(optionally from a .env file) and exposes it through dot-notation keys.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import os

from dotenv import load_dotenv


PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


@dataclass
class AdminGeneratorSettings:
    """
    Provides configuration values loaded from environment variables.

    Usage:
        settings = get_settings()
        url = settings.get("database.url")
    """

    _config: Dict[str, Any] = field(default_factory=dict)
    _loaded: bool = field(default=False)

    def load(self, env_path: Optional[str] = None) -> "AdminGeneratorSettings":
        """
        Load configuration from .env file and environment.

        Args:
            env_path: Optional path to .env file

        Returns:
            Self for method chaining
        """
        if self._loaded:
            return self

        if env_path:
            load_dotenv(env_path)
        else:
            env_file = PROJECT_ROOT / ".env"
            if env_file.exists():
                load_dotenv(env_file)

        self._config = {
            "app": {
                "debug": _env_flag("APP_DEBUG"),
                "log_level": os.getenv("APP_LOG_LEVEL", "INFO"),
                "log_dir": os.getenv("APP_LOG_DIR", str(PROJECT_ROOT / "logs")),
            },
            "database": {
                "url": os.getenv("DATABASE_URL", "sqlite:///./admin_generator.db"),
                "echo": _env_flag("DATABASE_ECHO"),
            },
            "api": {
                "prefix": os.getenv("API_PREFIX", "/direct"),
            },
            "exception": {
                "expose_message": _env_flag("EXCEPTION_EXPOSE_MESSAGE"),
            },
        }
        self._loaded = True
        return self

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot notation key.

        Args:
            key: Dot-separated key path (e.g., "database.url")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split('.')
        value = self._config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    @property
    def debug(self) -> bool:
        return bool(self.get("app.debug", False))


# Singleton instance
_settings: Optional[AdminGeneratorSettings] = None


def get_settings() -> AdminGeneratorSettings:
    """
    Get the singleton settings instance.

    Returns:
        AdminGeneratorSettings: The loaded settings
    """
    global _settings
    if _settings is None:
        _settings = AdminGeneratorSettings()
        _settings.load()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings (useful for testing)."""
    global _settings
    _settings = None
