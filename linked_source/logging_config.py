from __future__ import annotations

"""Central logging configuration for Linked Source.

Import and call :func:`setup_logging` at application start-up.
"""

import copy
import logging
import os
import logging.config
from typing import Dict, List, Optional, Tuple

from linked_source.config import ConfigManager

__all__ = ["setup_logging"]


def setup_logging() -> None:
    """Configure logging for the application using configuration from YAML files."""
    log_dir = os.environ.get("LINKED_SOURCE_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "app.log")

    try:
        config_manager = ConfigManager()
        logging_config = copy.deepcopy(config_manager.get_logging_config())

        if logging_config.get("version"):
            # Update the filename dynamically
            handlers = logging_config.get("handlers") or {}
            if "file" in handlers:
                handlers["file"] = dict(handlers["file"], filename=log_file)
                logging_config["handlers"] = handlers

            logging.config.dictConfig(logging_config)
            logging.info("===== Logging initialised from config files =====")
        else:
            _setup_minimal_logging()
    except (ValueError, TypeError, AttributeError, ImportError, OSError) as exc:
        print(f"Error loading logging config: {exc}")
        _setup_minimal_logging()

    _apply_debug_overrides()


def _setup_minimal_logging() -> None:
    """Set up minimal console-only logging when config is unavailable."""
    minimal_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'simple',
                'level': 'INFO',
            },
        },
        'root': {
            'level': 'INFO',
            'handlers': ['console'],
        },
    }

    logging.config.dictConfig(minimal_config)
    logging.error("===== Logging initialised with minimal fallback (config error) =====")


# Environment switch -> loggers it turns to DEBUG
_DEBUG_SWITCHES: Dict[str, Tuple[str, ...]] = {
    # skipped link targets and duplicate identifiers while indexing
    "LINKED_SOURCE_DEBUG_INDEX": ("linked_source.core.index", "linked_source.core.uri"),
    # hover pairs and unresolved reference targets
    "LINKED_SOURCE_DEBUG_HOVER": ("linked_source.core.services.highlight_service",),
    # superseded and completed scrolls
    "LINKED_SOURCE_DEBUG_NAVIGATION": (
        "linked_source.core.services.navigation_service",
        "linked_source.adapters.scroller",
    ),
}


def _env_flag(name: str) -> bool:
    return os.environ.get(name, '').strip().lower() in {'1', 'true', 'yes', 'on'}


def _emits_debug(logger: logging.Logger) -> bool:
    """True when a handler on *logger* or one of its propagating ancestors accepts DEBUG."""
    current: Optional[logging.Logger] = logger
    while current is not None:
        if any(h.level <= logging.DEBUG for h in current.handlers):
            return True
        current = current.parent if current.propagate else None
    return False


def _apply_debug_overrides() -> List[str]:
    """Turn on DEBUG for the loggers named by the environment.

    Supports the switches in ``_DEBUG_SWITCHES`` plus
    ``LINKED_SOURCE_DEBUG_MODULES=comma,separated,logger,names``. Records go
    to the DEBUG file handler when one is configured; otherwise a console
    handler is attached to the logger. Returns the affected logger names.
    """
    targets: List[str] = []
    for variable, names in _DEBUG_SWITCHES.items():
        if _env_flag(variable):
            targets.extend(names)
    extra_modules = os.environ.get('LINKED_SOURCE_DEBUG_MODULES', '').strip()
    if extra_modules:
        targets.extend(m.strip() for m in extra_modules.split(',') if m.strip())
    targets = list(dict.fromkeys(targets))

    for name in targets:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        if not _emits_debug(logger):
            h = logging.StreamHandler()
            h.setLevel(logging.DEBUG)
            h.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            logger.addHandler(h)
    if targets:
        logging.getLogger(__name__).info("Debug logging enabled for: %s", ", ".join(targets))
    return targets
