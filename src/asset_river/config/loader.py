"""
Configuration Loader - YAML Loading with Validation.

Loads configuration from YAML files and validates using Pydantic models.
Relative paths, both of the config file and of the local fallback store,
are resolved against the loader's base path, so a service started from
another working directory still finds its local data.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from asset_river.config.models import AppConfig


class ConfigLoader:
    """Loads and validates configuration from YAML files."""

    def __init__(self, base_path: Optional[Path] = None) -> None:
        """
        Initialize config loader.

        Args:
            base_path: Base path for relative config paths
        """
        self._base_path = base_path or Path(".")

    def load(
        self,
        config_path: Union[str, Path],
        profile: Optional[str] = None,
    ) -> AppConfig:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML config file
            profile: Optional profile name to merge on top

        Returns:
            Validated AppConfig object

        Raises:
            FileNotFoundError: If config or profile file doesn't exist
            ValidationError: If config is invalid
            ValueError: If the file does not hold a YAML mapping
        """
        path = self._resolve_path(config_path)
        config_dict = self._load_yaml(path)

        if profile:
            profile_dict = self._load_profile(profile)
            config_dict = self._merge_configs(config_dict, profile_dict)

        return self._resolve_storage(AppConfig.model_validate(config_dict))

    def load_from_dict(self, config_dict: Dict[str, Any]) -> AppConfig:
        """Validate configuration given as a dictionary."""
        return self._resolve_storage(AppConfig.model_validate(config_dict))

    def _resolve_path(self, path: Union[str, Path]) -> Path:
        p = Path(path).expanduser()
        if p.is_absolute():
            return p
        return self._base_path / p

    def _resolve_storage(self, config: AppConfig) -> AppConfig:
        local_path = self._resolve_path(config.storage.local_path)
        if local_path == config.storage.local_path:
            return config
        storage = config.storage.model_copy(update={"local_path": local_path})
        return config.model_copy(update={"storage": storage})

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return data

    def _load_profile(self, profile: str) -> Dict[str, Any]:
        profile_path = self._base_path / "config" / "profiles" / f"{profile}.yaml"
        if not profile_path.exists():
            raise FileNotFoundError(f"Profile not found: {profile}")
        return self._load_yaml(profile_path)

    def _merge_configs(
        self,
        base: Dict[str, Any],
        overlay: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Deep merge overlay into base config."""
        result = dict(base)
        for key, value in overlay.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value
        return result


def load_config(
    config_path: Union[str, Path],
    profile: Optional[str] = None,
    base_path: Optional[Path] = None,
) -> AppConfig:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to YAML config file
        profile: Optional profile name
        base_path: Base path for the config file and the local store path

    Returns:
        Validated AppConfig object
    """
    loader = ConfigLoader(base_path=base_path)
    return loader.load(config_path, profile)
