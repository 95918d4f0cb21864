"""
Configuration for the vital scores engine.

Values are resolved from defaults, then an optional JSON or YAML file, then
environment variables prefixed with ``VITAL_SCORES_``; later sources win.
"""

import os
import json
import logging
from dataclasses import dataclass, asdict, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .models.scores import VitalScoresError

ENV_PREFIX = "VITAL_SCORES_"
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


class ConfigurationError(VitalScoresError):
    """Raised when configuration cannot be loaded or fails validation."""
    pass


class ConfigSource(Enum):
    """Configuration sources in order of precedence."""
    ENVIRONMENT = "environment"
    FILE = "file"
    DEFAULT = "default"


@dataclass
class ScoringConfig:
    """Runtime settings for the calculation service."""

    environment: str = "development"
    log_level: str = "INFO"

    # Prometheus metrics for calculations and notifications
    metrics_enabled: bool = True

    # Serialize updates with a lock so the service can be shared across threads
    thread_safe: bool = True

    # Log a failing subscriber and keep notifying the rest instead of raising
    isolate_subscriber_errors: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScoringConfig':
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**data)


class ConfigValidator:
    """Configuration validation with type checking and allowed values."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

        self.validation_rules = {
            'environment': {
                'type': str,
                'allowed': ['development', 'testing', 'staging', 'production'],
            },
            'log_level': {
                'type': str,
                'allowed': ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
            },
            'metrics_enabled': {'type': bool},
            'thread_safe': {'type': bool},
            'isolate_subscriber_errors': {'type': bool},
        }

    def validate_config(self, config: ScoringConfig) -> List[str]:
        """
        Validate a configuration object.

        Returns:
            List of validation error messages, empty if the configuration is valid
        """
        errors = []
        for field_name, rules in self.validation_rules.items():
            value = getattr(config, field_name)
            expected_type = rules['type']
            if not isinstance(value, expected_type):
                errors.append(
                    f"{field_name} must be {expected_type.__name__}, got {type(value).__name__}"
                )
                continue
            allowed = rules.get('allowed')
            if allowed is not None and value not in allowed:
                errors.append(f"{field_name} must be one of {', '.join(allowed)}, got {value!r}")
        return errors


class ConfigManager:
    """Builds a validated ScoringConfig from defaults, file and environment."""

    def __init__(self, config_file_path: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        self.logger = logging.getLogger(__name__)
        self.validator = ConfigValidator()
        self.config_file_path = config_file_path
        self.environ = os.environ if environ is None else environ
        self.sources: Dict[str, ConfigSource] = {}

    def load(self) -> ScoringConfig:
        values = self._load_default_config()
        if self.config_file_path:
            values.update(self._load_file_config(self.config_file_path))
        values.update(self._load_environment_config(values))

        try:
            config = ScoringConfig.from_dict(values)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        errors = self.validator.validate_config(config)
        if errors:
            self.logger.error(f"Configuration validation failed: {errors}")
            raise ConfigurationError(f"Configuration validation errors: {errors}")

        self.logger.info(f"Configuration loaded for environment: {config.environment}")
        return config

    def _load_default_config(self) -> Dict[str, Any]:
        values = ScoringConfig().to_dict()
        for key in values:
            self.sources[key] = ConfigSource.DEFAULT
        return values

    def _load_file_config(self, file_path: str) -> Dict[str, Any]:
        path = Path(file_path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file {file_path} does not exist")

        suffix = path.suffix.lower()
        with open(path, 'r') as f:
            try:
                if suffix == '.json':
                    file_config = json.load(f)
                elif suffix in ['.yml', '.yaml']:
                    file_config = yaml.safe_load(f)
                else:
                    raise ConfigurationError(f"Unsupported configuration file format: {path.suffix}")
            except (json.JSONDecodeError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Could not parse configuration file {file_path}: {e}") from e

        file_config = file_config or {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Configuration file {file_path} must contain a mapping")

        for key in file_config:
            self.sources[key] = ConfigSource.FILE
        self.logger.info(f"Configuration loaded from file: {file_path}")
        return file_config

    def _load_environment_config(self, current: Dict[str, Any]) -> Dict[str, Any]:
        values = {}
        for key, current_value in current.items():
            env_var = f"{ENV_PREFIX}{key.upper()}"
            env_value = self.environ.get(env_var)
            if env_value is not None:
                values[key] = self._parse_env_value(env_value, type(current_value))
                self.sources[key] = ConfigSource.ENVIRONMENT
        return values

    def _parse_env_value(self, env_value: str, target_type: type) -> Any:
        """Parse environment variable value to target type."""
        if target_type == bool:
            return env_value.lower() in ('true', '1', 'yes', 'on')
        elif target_type == int:
            return int(env_value)
        elif target_type == float:
            return float(env_value)
        return env_value


def load_config(config_file_path: Optional[str] = None) -> ScoringConfig:
    return ConfigManager(config_file_path).load()


def configure_logging(config: ScoringConfig):
    logging.basicConfig(level=getattr(logging, config.log_level), format=LOG_FORMAT)
