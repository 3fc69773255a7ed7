"""Locate ``clamav-exporter.toml``.

Lookup order:
  1. ``CLAMAV_EXPORTER_CONFIG`` names the file outright (missing file: no config)
  2. walk up from the working directory, the way git finds ``.git/``
  3. system-wide paths used when the exporter runs as a service

``--config`` bypasses discovery entirely (see :mod:`.settings`).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "clamav-exporter.toml"
CONFIG_ENV_VAR = "CLAMAV_EXPORTER_CONFIG"
SYSTEM_CONFIG_PATHS: tuple[Path, ...] = (
    Path("/etc/clamav-exporter") / CONFIG_FILENAME,
    Path("/etc") / CONFIG_FILENAME,
)


def _walk_up(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file to load, or None to run on defaults."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        if path.is_file():
            return path
        logger.warning("%s points at %s, which does not exist", CONFIG_ENV_VAR, env_path)
        return None

    found = _walk_up((start or Path.cwd()).resolve())
    if found is not None:
        return found
    return next((p for p in SYSTEM_CONFIG_PATHS if p.is_file()), None)
