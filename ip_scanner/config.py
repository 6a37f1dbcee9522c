"""
Scanner configuration and its loader
"""

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

from .ip_parser import InvalidAddress, parse

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Invalid configuration value or unreadable configuration file"""


@dataclass
class ScannerConfig:
    """Scanner configuration with validation"""

    # Range used when the user just presses Enter
    start_ip: str = "192.168.1.1"
    end_ip: str = "192.168.1.10"

    # Probe parameters
    timeout_ms: int = 1000
    concurrent_limit: int = 50

    # Output
    show_progress: bool = True
    show_offline: Optional[bool] = None  # None = ask
    export: Optional[bool] = None  # None = ask
    export_dir: str = "."
    use_color: bool = True

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self):
        self._validate_values()

    def _validate_values(self):
        if isinstance(self.timeout_ms, bool) or not isinstance(self.timeout_ms, int) or self.timeout_ms <= 0:
            raise ConfigError("timeout_ms must be a positive integer")
        if isinstance(self.concurrent_limit, bool) or not isinstance(self.concurrent_limit, int) \
                or self.concurrent_limit <= 0:
            raise ConfigError("concurrent_limit must be a positive integer")

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if str(self.log_level).upper() not in valid_log_levels:
            raise ConfigError(f"log_level must be one of: {valid_log_levels}")
        self.log_level = str(self.log_level).upper()

        for name in ("start_ip", "end_ip"):
            try:
                parse(getattr(self, name))
            except InvalidAddress as e:
                raise ConfigError(f"{name}: {e}") from None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScannerConfig":
        """Create from a dictionary, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})


class ConfigLoader:
    """Configuration loader"""

    CONFIG_FILES = [
        "scanner_config.yaml",
        "scanner_config.yml",
        "scanner_config.json",
        "config/scanner.yaml",
    ]

    DEFAULT_CONFIG = {
        "start_ip": "192.168.1.1",
        "end_ip": "192.168.1.10",
        "timeout_ms": 1000,
        "concurrent_limit": 50,
        "show_progress": True,
        "show_offline": None,
        "export": None,
        "export_dir": ".",
        "use_color": True,
        "log_level": "INFO",
        "log_file": None,
    }

    @classmethod
    def load(cls, config_path: Optional[str] = None,
             overrides: Optional[Dict[str, Any]] = None) -> ScannerConfig:
        """
        Load configuration

        Args:
            config_path: Explicit configuration file (optional)
            overrides: Values taking precedence over the file, e.g. from the command line

        Returns:
            Configuration object

        Raises:
            ConfigError: if the explicit file is missing, unreadable or holds invalid values
        """
        config_dict = cls.DEFAULT_CONFIG.copy()

        found_config = cls._find_config_file(config_path)

        if found_config:
            config_dict.update(cls._load_config_file(found_config))
            logger.info(f"Loaded configuration from {found_config}")
        else:
            logger.debug("No configuration file found, using defaults")

        if overrides:
            config_dict.update({k: v for k, v in overrides.items() if v is not None})

        return ScannerConfig.from_dict(config_dict)

    @classmethod
    def _find_config_file(cls, config_path: Optional[str] = None) -> Optional[Path]:
        if config_path:
            path = Path(config_path)
            if not path.is_file():
                raise ConfigError(f"Configuration file not found: {config_path}")
            return path

        for config_file in cls.CONFIG_FILES:
            path = Path(config_file)
            if path.is_file():
                return path

        return None

    @staticmethod
    def _load_config_file(filepath: Path) -> Dict[str, Any]:
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                if filepath.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f) or {}
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{filepath} must contain a mapping at the top level")
        return data

    @classmethod
    def save_default(cls, path: str = "scanner_config.yaml") -> Path:
        """Write the default configuration as YAML"""
        default_path = Path(path)
        default_path.parent.mkdir(parents=True, exist_ok=True)
        with open(default_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(cls.DEFAULT_CONFIG, f, sort_keys=False, allow_unicode=True)
        logger.info(f"Default configuration written to {default_path}")
        return default_path
