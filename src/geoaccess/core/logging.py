"""
Logging configuration.

We use a YAML logging config (`src/geoaccess/config/logging.yaml`) and then apply
runtime overrides from settings (e.g., `GEOACCESS_LOG_LEVEL`).
"""

from __future__ import annotations

import logging.config

from geoaccess.config.settings import get_logging_config, get_settings


def configure_logging(level: str | None = None) -> None:
    """Configure the Python logging system based on packaged YAML config + settings.

    `level` (e.g. from a `--verbose` CLI flag) wins over the configured level.
    """
    settings = get_settings()
    # Copy so the cached dict is never mutated between calls.
    config = {k: (dict(v) if isinstance(v, dict) else v) for k, v in get_logging_config().items()}

    level = (level or settings.app.log_level).upper()
    config["root"] = {**config.get("root", {}), "level": level}
    config["handlers"] = {
        name: ({**handler, "level": level} if isinstance(handler, dict) and "level" in handler else handler)
        for name, handler in config.get("handlers", {}).items()
    }

    logging.config.dictConfig(config)
