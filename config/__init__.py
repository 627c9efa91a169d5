"""
Configuration Module for the Receipt OCR System.

Settings live in a YAML file (config/settings.yaml by default, or the
file named by the RECEIPT_OCR_CONFIG environment variable). Components
read them through get_config() with an in-code default, so nothing
breaks when a key, or the whole section, is missing.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_ENV_VAR = "RECEIPT_OCR_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "settings.yaml"
PROJECT_ROOT = Path(__file__).parent.parent

_MISSING = object()


def _lookup(mapping: Dict[str, Any], dotted_key: str) -> Any:
    """Walk nested dictionaries along 'a.b.c'; _MISSING if any step fails."""
    node: Any = mapping
    for part in dotted_key.split('.'):
        if not isinstance(node, dict) or part not in node:
            return _MISSING
        node = node[part]
    return node


class ConfigurationManager:
    """
    Process-wide settings loaded once from YAML.

    The first instantiation decides which file is used; later calls
    return the same object until reset() is called.

    Attributes:
        config_path (Path): File the settings were read from.

    Example:
        >>> config = ConfigurationManager()
        >>> config.get("ocr.engine")
        'tesseract'
        >>> config.get("postprocessing.date.dayfirst")
        False
    """

    _instance: Optional['ConfigurationManager'] = None

    def __new__(cls, config_path: Optional[str] = None) -> 'ConfigurationManager':
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._initialized = False
            cls._instance = instance
        return cls._instance

    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Args:
            config_path: Settings file. Defaults to $RECEIPT_OCR_CONFIG,
                        then config/settings.yaml.
        """
        if self._initialized:
            return

        self.config_path = Path(
            config_path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
        )
        self._config: Dict[str, Any] = {}
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        """
        Read and parse the settings file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            yaml.YAMLError: If the file is not valid YAML.
        """
        if not self.config_path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as f:
            self._config = yaml.safe_load(f) or {}

        paths = self._config.get('paths') or {}
        for key, value in paths.items():
            # Relative output/log directories are anchored at the project root
            if value and not Path(value).is_absolute():
                paths[key] = str(PROJECT_ROOT / value)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a value by dot-separated key.

        Example:
            >>> config.get("ocr.tesseract.psm")
            6
            >>> config.get("ocr.unknown", "fallback")
            'fallback'
        """
        value = _lookup(self._config, key)
        return default if value is _MISSING else value

    def get_all(self) -> Dict[str, Any]:
        """Shallow copy of the whole settings tree."""
        return dict(self._config)

    def reload(self) -> None:
        """Re-read the settings file."""
        self._load_config()

    @classmethod
    def reset(cls) -> None:
        """Forget the shared instance; the next call loads settings afresh."""
        cls._instance = None


def get_config(key: str, default: Any = None) -> Any:
    """Shortcut for ConfigurationManager().get(key, default)."""
    return ConfigurationManager().get(key, default)


__all__ = ['ConfigurationManager', 'get_config', 'CONFIG_ENV_VAR']
