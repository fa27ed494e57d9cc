"""Configuration management for loanfx."""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from loanfx.utils.errors import ConfigurationError
from loanfx.utils.logging import setup_logging
from loanfx.utils.paths import resolve_config_path

logger = logging.getLogger(__name__)


class Config:
    """Application configuration."""

    REQUIRED_SECTIONS = ('app', 'rates')

    def __init__(self, config_path: str = "config.yaml", configure_logging: bool = True):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML configuration file
            configure_logging: Apply the ``logging`` section on load
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load(configure_logging)

    def _load(self, configure_logging: bool) -> None:
        """Load configuration from YAML and environment."""
        load_dotenv()

        if not self.config_path.exists():
            raise ConfigurationError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            try:
                self._config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not self._config:
            raise ConfigurationError(f"Empty configuration file: {self.config_path}")

        self._validate()

        if configure_logging:
            log_config = self._config.get('logging', {})
            setup_logging(
                level=os.getenv('LOG_LEVEL', log_config.get('level', 'INFO')),
                log_file=log_config.get('file'),
                format_type=log_config.get('format', 'json'),
                enabled=log_config.get('enabled', True)
            )

        logger.info("Configuration loaded successfully")

    def _validate(self) -> None:
        """Validate required configuration sections."""
        if not isinstance(self._config, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {self.config_path}")

        for section in self.REQUIRED_SECTIONS:
            if section not in self._config:
                raise ConfigurationError(f"Missing required config section: {section}")

        try:
            refresh_interval = self.refresh_interval
            simulated_latency = self.simulated_latency
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}") from e

        if refresh_interval <= 0:
            raise ConfigurationError("rates.refresh_interval_seconds must be positive")

        if simulated_latency < 0:
            raise ConfigurationError("calculation.simulated_latency_seconds must be >= 0")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-separated key.

        Args:
            key: Dot-separated key (e.g., "rates.default_base")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        value = self._config

        for k in key.split('.'):
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    def get_env(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get environment variable."""
        return os.getenv(key, default)

    def require_env(self, key: str) -> str:
        """Get required environment variable or raise error."""
        value = os.getenv(key)
        if value is None:
            raise ConfigurationError(f"Required environment variable not set: {key}")
        return value

    @property
    def app_name(self) -> str:
        return self.get('app.name', 'loanfx')

    @property
    def debug(self) -> bool:
        return self.get('app.debug', False)

    @property
    def default_base(self) -> str:
        return str(self.get('rates.default_base', 'USD')).upper()

    @property
    def refresh_interval(self) -> float:
        """Seconds between periodic rate refreshes."""
        return float(self.get('rates.refresh_interval_seconds', 3600))

    @property
    def rate_provider(self) -> str:
        return self.get('rates.provider', 'exchange_rate_api')

    @property
    def simulated_latency(self) -> float:
        """Artificial delay before a calculation is dispatched."""
        return float(self.get('calculation.simulated_latency_seconds', 0.5))


_config: Optional[Config] = None


def load_config(config_path: str = "config.yaml") -> Config:
    """Load and return the process configuration instance."""
    global _config
    if _config is None:
        _config = Config(str(resolve_config_path(config_path)))
    return _config


def get_config() -> Config:
    """Get the loaded configuration instance."""
    if _config is None:
        raise ConfigurationError("Configuration not loaded. Call load_config() first.")
    return _config


def reset_config() -> None:
    """Forget the loaded configuration (used by tests)."""
    global _config
    _config = None
