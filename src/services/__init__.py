"""
Services package - Application services for the devkit wallet.

Contains:
- KeystoreService: Keystore facade used by devkit commands
- configure_logging: Logging setup for the entry point
"""

from .keystore import KeystoreService, DEFAULT_MNEMONIC, DEFAULT_LABEL
from .logging import configure_logging

__all__ = [
    "KeystoreService",
    "DEFAULT_MNEMONIC",
    "DEFAULT_LABEL",
    "configure_logging",
]
