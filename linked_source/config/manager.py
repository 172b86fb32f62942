from __future__ import annotations

"""Configuration loading and access helpers.

This module centralises all declarative settings (attribute names, duplicate
policy, highlight adapter, scroll timing, export template). It loads YAML
files packaged with *linked_source* and merges them with user overrides.

On Windows: ``%LOCALAPPDATA%\\LinkedSource\\config\\*.yml``
On Unix: ``~/.linked_source/*.yml``

``LINKED_SOURCE_CONFIG_DIR`` replaces the user directory when set.
"""

import importlib.resources as pkg_resources
import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

__all__ = ["ConfigManager"]


def _get_user_config_dir() -> Path:
    """Get the user configuration directory."""
    override = os.environ.get("LINKED_SOURCE_CONFIG_DIR")
    if override:
        return Path(override)
    if os.name == 'nt':  # Windows
        local_appdata = os.environ.get('LOCALAPPDATA')
        if local_appdata:
            return Path(local_appdata) / "LinkedSource" / "config"
        return Path.home() / "AppData" / "Local" / "LinkedSource" / "config"
    return Path.home() / ".linked_source"


def _read_packaged(filename: str) -> str:
    return pkg_resources.files(__package__).joinpath(filename).read_text(encoding="utf-8")


class _Singleton(type):
    _instance: "ConfigManager" | None = None

    def __call__(cls, *args, **kwargs):  # type: ignore[no-self-use]
        if cls._instance is None:
            cls._instance = super().__call__(*args, **kwargs)
        return cls._instance


class ConfigManager(metaclass=_Singleton):
    """Lazy-loads and exposes configuration sections as dictionaries."""

    _DEFAULT_FILENAMES = {
        "index": "index.yml",
        "highlight": "highlight.yml",
        "navigation": "navigation.yml",
        "export": "export.yml",
        "logging": "logging.yml",
    }

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Any]] = {}
        self._ensure_loaded()

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    def get_index_config(self) -> Dict[str, Any]:
        return self._data.get("index", {})

    def get_highlight_config(self) -> Dict[str, Any]:
        return self._data.get("highlight", {})

    def get_navigation_config(self) -> Dict[str, Any]:
        return self._data.get("navigation", {})

    def get_export_config(self) -> Dict[str, Any]:
        return self._data.get("export", {})

    def get_logging_config(self) -> Dict[str, Any]:
        return self._data.get("logging", {})

    @classmethod
    def reset(cls) -> None:
        """Drop the cached instance so the next call reloads from disk."""
        cls._instance = None

    # ------------------------------------------------------------------
    # Internal loading logic
    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> None:
        if self._data:
            return  # already loaded

        defaults = self._builtin_defaults()
        startup_summary = []
        user_config_dir = _get_user_config_dir()

        for key, filename in self._DEFAULT_FILENAMES.items():
            merged_cfg: Dict[str, Any] = dict(defaults.get(key, {}))
            status = "defaults"

            # 1. load packaged default
            try:
                packaged_data = yaml.safe_load(_read_packaged(filename)) or {}
                merged_cfg.update(packaged_data)
                status = "loaded"
            except (FileNotFoundError, OSError):
                logger.error("Missing packaged config for %s (%s)", key, filename)
            except yaml.YAMLError as exc:
                logger.error("Invalid packaged config for %s (%s): %s", key, filename, exc)
                status = "invalid"

            # 2. load user overrides
            user_path = user_config_dir / filename
            if user_path.exists():
                try:
                    user_data = yaml.safe_load(user_path.read_text(encoding="utf-8")) or {}
                    merged_cfg.update(user_data)
                    if status == "loaded":
                        status = "loaded+overrides"
                except (OSError, yaml.YAMLError) as exc:
                    logger.error("Could not parse user config %s: %s", user_path, exc)

            self._data[key] = merged_cfg
            startup_summary.append(f"{key}: {status}")

        logger.info("Config startup: %s", " | ".join(startup_summary))

    @staticmethod
    def _builtin_defaults() -> Dict[str, Dict[str, Any]]:
        """Values used when a packaged file is missing a key."""
        return {
            "index": {"id_attribute": "id", "href_attribute": "href", "scope": "", "duplicates": "last"},
            "highlight": {"mode": "class", "class_name": "highlighted", "background_color": "#FFaaaa"},
            "navigation": {"scroll_duration_ms": 300, "scroll_axis": "y", "query_parameter": "id"},
            "export": {
                "default_width": 700,
                "default_height": 500,
                "iframe_template": '<iframe src="{src}" width="{width}" height="{height}" frameborder="0"> </iframe>',
            },
            "logging": {},
        }
