"""
Runtime settings, resolved once from the environment at startup.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

PRODUCTION = "production"
DEVELOPMENT = "development"
DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_LOG_LEVEL = "INFO"

PACKAGE_DIR = Path(__file__).resolve().parent


@dataclass(frozen=True)
class Settings:
    mode: str = DEVELOPMENT
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    static_root: Path = PACKAGE_DIR.parent / "dist" / "public"
    access_log_file: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def is_production(self) -> bool:
        return self.mode == PRODUCTION


def resolve_mode(value: Optional[str]) -> str:
    # Only the exact string enables production; everything else is development.
    return PRODUCTION if value == PRODUCTION else DEVELOPMENT


def resolve_port(value: Optional[str], default: int = DEFAULT_PORT) -> int:
    if value is None or not value.strip():
        return default
    try:
        port = int(value)
    except ValueError:
        logger.warning("Ignoring PORT=%r: not an integer, using %s", value, default)
        return default
    if not 0 < port <= 65535:
        logger.warning("Ignoring PORT=%r: out of range, using %s", value, default)
        return default
    return port


def resolve_log_level(value: Optional[str], default: str = DEFAULT_LOG_LEVEL) -> str:
    if value is None or not value.strip():
        return default
    level = value.strip().upper()
    # getLevelName maps known names to their number and anything else to a string.
    if not isinstance(logging.getLevelName(level), int):
        logger.warning("Ignoring LOG_LEVEL=%r: unknown level, using %s", value, default)
        return default
    return level


def static_root_for(mode: str, package_dir: Path = PACKAGE_DIR) -> Path:
    """Built SPA location: beside the package in production, in ../dist/public otherwise."""
    if mode == PRODUCTION:
        return (package_dir / "public").resolve()
    return (package_dir.parent / "dist" / "public").resolve()


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    mode = resolve_mode(env.get("NODE_ENV"))
    return Settings(
        mode=mode,
        port=resolve_port(env.get("PORT")),
        host=env.get("HOST") or DEFAULT_HOST,
        static_root=static_root_for(mode),
        access_log_file=env.get("ACCESS_LOG_FILE") or None,
        log_level=resolve_log_level(env.get("LOG_LEVEL")),
    )
