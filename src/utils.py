"""
Shared utility functions for the devkit wallet.

Resolves paths and settings from the environment once, at startup.
Nothing below the entry point reads the environment itself.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from networks import DEFAULT_CORE_NETWORK_ID, DEFAULT_ESPACE_CHAIN_ID

KEYSTORE_FILENAME = ".devkit.keystore.json"
LEGACY_KEYSTORE_FILENAME = ".devkit.keystore"


@dataclass(frozen=True)
class Settings:
    """Resolved application settings."""
    keystore_path: Path
    legacy_keystore_path: Path
    core_network_id: int = DEFAULT_CORE_NETWORK_ID
    espace_chain_id: int = DEFAULT_ESPACE_CHAIN_ID
    log_level: int = logging.INFO


def get_home_dir(environ: Mapping[str, str]) -> Path:
    """Get the user's home directory."""
    home = environ.get("HOME")
    return Path(home) if home else Path.home()


def _int_setting(environ: Mapping[str, str], name: str, default: int) -> int:
    value = environ.get(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{value}'") from None


def _log_level(environ: Mapping[str, str]) -> int:
    name = environ.get("DEVKIT_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"DEVKIT_LOG_LEVEL: unknown level '{name}'")
    return level


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Resolve settings from environment variables.

    DEVKIT_KEYSTORE       keystore file (default ~/.devkit.keystore.json)
    CONFLUX_CHAIN_ID      Core network id used in base32 addresses
    CONFLUX_EVM_CHAIN_ID  eSpace chain id
    DEVKIT_LOG_LEVEL      logging level name
    """
    if environ is None:
        environ = os.environ

    home = get_home_dir(environ)
    keystore = environ.get("DEVKIT_KEYSTORE")

    return Settings(
        keystore_path=Path(keystore).expanduser() if keystore else home / KEYSTORE_FILENAME,
        legacy_keystore_path=home / LEGACY_KEYSTORE_FILENAME,
        core_network_id=_int_setting(environ, "CONFLUX_CHAIN_ID", DEFAULT_CORE_NETWORK_ID),
        espace_chain_id=_int_setting(environ, "CONFLUX_EVM_CHAIN_ID", DEFAULT_ESPACE_CHAIN_ID),
        log_level=_log_level(environ),
    )
