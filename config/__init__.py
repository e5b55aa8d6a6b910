"""
Configuration Module for Job Sheet Extraction System.

Settings live in ``config/settings.yaml``. A workshop-specific file passed
with ``--config`` is layered on top of it, so it only needs the keys it
changes (extra header labels, a different Tesseract mode, a database
path). The merged result is checked once at load time; components then
read values with ``get_config("dot.separated.key", default)``.
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from src.utils.exceptions import ConfigurationError

DEFAULT_SETTINGS = Path(__file__).parent / "settings.yaml"
PROJECT_ROOT = Path(__file__).parent.parent


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file must hold a mapping: {path}",
            {"path": str(path)}
        )
    return data


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay ``override`` on ``base``; nested mappings merge, anything else replaces."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class ConfigurationManager:
    """
    Process-wide settings for the job sheet extraction system.

    The first instantiation loads the settings; later calls return the
    same instance, whatever path they pass. Tests call ``reset()`` to
    start over.

    Attributes:
        config_path (Path): Custom settings file, or the shipped one.

    Example:
        >>> config = ConfigurationManager("workshop.yaml")
        >>> config.get("ocr.tesseract.psm")
        6
        >>> config.get("extraction.required_fields")
        ['customer_name', 'customer_phone', 'bike_model']
    """

    _instance: Optional['ConfigurationManager'] = None

    def __new__(cls, config_path: Optional[str] = None) -> 'ConfigurationManager':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Load settings on first use.

        Args:
            config_path: Optional file layered over the shipped settings.

        Raises:
            FileNotFoundError: If a settings file is missing.
            ConfigurationError: If the merged settings are malformed.
        """
        if self._initialized:
            return

        self.config_path = Path(config_path) if config_path else DEFAULT_SETTINGS
        self._config: Dict[str, Any] = {}
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        config = _read_yaml(DEFAULT_SETTINGS)
        if self.config_path != DEFAULT_SETTINGS:
            config = _deep_merge(config, _read_yaml(self.config_path))

        self._resolve_paths(config)
        self._validate(config)
        self._config = config

    @staticmethod
    def _resolve_paths(config: Dict[str, Any]) -> None:
        """Anchor relative ``paths.*`` entries at the project root."""
        for key, value in (config.get('paths') or {}).items():
            if value and not Path(value).is_absolute():
                config['paths'][key] = str(PROJECT_ROOT / value)

    @staticmethod
    def _validate(config: Dict[str, Any]) -> None:
        workers = (config.get('ocr') or {}).get('workers') or {}

        max_workers = workers.get('max_workers', 2)
        if not isinstance(max_workers, int) or max_workers < 1:
            raise ConfigurationError(
                "ocr.workers.max_workers must be a positive integer",
                {"value": max_workers}
            )

        timeout = workers.get('timeout', 0)
        if not isinstance(timeout, (int, float)) or timeout < 0:
            raise ConfigurationError(
                "ocr.workers.timeout must be a non-negative number",
                {"value": timeout}
            )

        extraction = config.get('extraction') or {}
        for key in ('required_fields', 'boundary_headers'):
            value = extraction.get(key, [])
            if not isinstance(value, list):
                raise ConfigurationError(
                    f"extraction.{key} must be a list",
                    {"value": value}
                )

        fields = extraction.get('fields') or {}
        if not isinstance(fields, dict):
            raise ConfigurationError(
                "extraction.fields must map field names to settings",
                {"value": fields}
            )

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a value by dot-separated key.

        Example:
            >>> config.get("output.database.name")
            'jobs.db'
            >>> config.get("ocr.missing", 0)
            0
        """
        value: Any = self._config
        for part in key.split('.'):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def get_all(self) -> Dict[str, Any]:
        """Return a copy of the merged settings."""
        return copy.deepcopy(self._config)

    def reload(self) -> None:
        """Re-read the settings files."""
        self._load_config()

    @classmethod
    def reset(cls) -> None:
        """Drop the loaded instance so the next call loads afresh."""
        cls._instance = None


def get_config(key: str, default: Any = None) -> Any:
    """Shortcut for ``ConfigurationManager().get(key, default)``."""
    return ConfigurationManager().get(key, default)


__all__ = ['ConfigurationManager', 'get_config']
