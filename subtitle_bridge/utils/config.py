"""Configuration management for the subtitle bridge."""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..core.config import DEFAULT_MODEL, TranslationConfig
from ..core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages persisted default settings for the subtitle bridge."""

    DEFAULT_CONFIG = {
        'translator': {
            'type': 'mistral',
            'endpoint': '',
            'model': DEFAULT_MODEL,
            'timeout': 120,
        },
        'languages': {
            'source': 'English',
            'target': 'Traditional Chinese',
        },
        'translation': {
            'style': 'natural',
            'batch_size': 10,
            'concurrency': 5,
            'max_retries': 3,
            'retry_delay': 2.0,
            'request_delay': 0.0,
            'context_sample_size': 50,
            'temperature': 0.3,
            'max_tokens': 4000,
        },
    }

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file. If None, uses default location.
        """
        if config_path is None:
            self.config_dir = Path.home() / '.config' / 'subtitle-bridge'
            self.config_path = self.config_dir / 'config.json'
        else:
            self.config_path = Path(config_path)
            self.config_dir = self.config_path.parent

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file or fall back to defaults."""
        try:
            if self.config_path.exists():
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    config = json.load(f)
                return self._merge_with_defaults(config)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load config from {self.config_path}: {e}")

        return copy.deepcopy(self.DEFAULT_CONFIG)

    def _merge_with_defaults(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Merge a config dictionary with default values."""
        result = copy.deepcopy(self.DEFAULT_CONFIG)

        def merge(dest: Dict[str, Any], source: Dict[str, Any]) -> None:
            for key, value in source.items():
                if key in dest and isinstance(dest[key], dict) and isinstance(value, dict):
                    merge(dest[key], value)
                else:
                    dest[key] = value

        if isinstance(config, dict):
            merge(result, config)
        return result

    def save(self) -> bool:
        """Save the current configuration to file.

        Returns:
            bool: True if save was successful, False otherwise
        """
        temp_path = self.config_path.with_suffix('.tmp')
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)

            # Write to a temporary file first, then swap it in
            with open(temp_path, 'w', encoding='utf-8') as f:
                json.dump(self._config, f, indent=2, ensure_ascii=False)
            temp_path.replace(self.config_path)
            return True
        except OSError as e:
            logger.error(f"Failed to save config to {self.config_path}: {e}")
            if temp_path.exists():
                temp_path.unlink()
            return False

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot notation key.

        Args:
            key: Dot-notation key (e.g., 'translator.endpoint')
            default: Default value if key is not found

        Returns:
            The configuration value or default if not found
        """
        try:
            value = self._config
            for part in key.split('.'):
                value = value[part]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any, save: bool = True) -> bool:
        """Set a configuration value by dot notation key.

        Args:
            key: Dot-notation key (e.g., 'translator.endpoint')
            value: Value to set
            save: Whether to save the configuration after updating

        Returns:
            bool: True if the update was successful, False otherwise
        """
        parts = key.split('.')
        current = self._config

        # Navigate to the parent of the target key
        for part in parts[:-1]:
            if part not in current or not isinstance(current[part], dict):
                current[part] = {}
            current = current[part]

        current[parts[-1]] = value

        if save:
            return self.save()
        return True

    def update(self, updates: Dict[str, Any], save: bool = True) -> bool:
        """Update multiple configuration values at once.

        Args:
            updates: Dictionary of key-value pairs to update
            save: Whether to save the configuration after updating

        Returns:
            bool: True if all updates were successful, False otherwise
        """
        for key, value in updates.items():
            self.set(key, value, save=False)

        if save:
            return self.save()
        return True

    # Numeric settings under 'translation', with the type each must convert to.
    NUMERIC_SETTINGS = {
        'batch_size': int,
        'concurrency': int,
        'max_retries': int,
        'retry_delay': float,
        'request_delay': float,
        'context_sample_size': int,
        'temperature': float,
        'max_tokens': int,
    }

    def _number(self, name: str, convert):
        key = f'translation.{name}'
        value = self.get(key)
        try:
            return convert(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid value for '{key}' in {self.config_path}: {value!r}"
            ) from e

    def translation_config(self, **overrides: Any) -> TranslationConfig:
        """Build a TranslationConfig from stored values.

        Keyword arguments whose value is None are ignored, so parsed CLI
        options can be passed through unchanged.

        Raises:
            ConfigurationError: If a stored numeric setting cannot be converted
        """
        values = {
            'model': self.get('translator.model'),
            'source_language': self.get('languages.source'),
            'target_language': self.get('languages.target'),
            'style': self.get('translation.style'),
        }
        for name, convert in self.NUMERIC_SETTINGS.items():
            values[name] = self._number(name, convert)
        values.update({key: value for key, value in overrides.items() if value is not None})
        return TranslationConfig(**values)
