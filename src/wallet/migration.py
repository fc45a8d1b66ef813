"""
Keystore Migration - Upgrade legacy keystore layouts.

Older releases of the devkit stored mnemonics in other shapes:

- v1: a binary file (~/.devkit.keystore) holding iv || ciphertext || tag,
  encrypted with a key derived from a fixed PBKDF2 salt.
- v2: a JSON file holding just {"mnemonic": "<phrase>"}.
- v3: a bare JSON list of typed entries, without an active selection.

All of them are converted to the canonical document once; nothing else
in the package branches on file shape.
"""

import base64
import logging
from pathlib import Path
from typing import Any, Optional

from .errors import StorageError

logger = logging.getLogger(__name__)

# The v1 tool derived every key from this salt. It happens to be 16
# bytes, so prefixing it turns a v1 blob into a canonical one.
LEGACY_BINARY_SALT = b"some-random-salt"

LEGACY_BINARY_LABEL = "Migrated Mnemonic"
LEGACY_PLAINTEXT_LABEL = "Mnemonic 1"


def upgrade_document(data: Any) -> tuple[dict, bool]:
    """
    Convert a parsed keystore document to the canonical layout.

    Returns:
        (document, migrated) where migrated is True if data was legacy.

    Raises:
        TypeError: If the document matches no known layout.
    """
    if isinstance(data, dict) and "keystore" in data:
        return data, False

    if isinstance(data, list):
        entries = []
        for n, item in enumerate(data, start=1):
            if not isinstance(item, dict):
                raise TypeError(f"Legacy keystore entry {n} is not an object")
            entry = dict(item)
            entry.setdefault("type", "plaintext")
            entry.setdefault("label", f"Mnemonic {n}")
            entries.append(entry)
        return {"keystore": entries, "activeIndex": None}, True

    if isinstance(data, dict) and isinstance(data.get("mnemonic"), str):
        entry = {
            "type": "plaintext",
            "label": data.get("label", LEGACY_PLAINTEXT_LABEL),
            "mnemonic": data["mnemonic"],
        }
        return {"keystore": [entry], "activeIndex": 0}, True

    raise TypeError("Unrecognized keystore layout")


def read_legacy_binary(path: str | Path) -> Optional[dict]:
    """
    Read a v1 binary keystore and return it as a canonical encoded entry.

    The ciphertext is not touched: the same password still decrypts
    the migrated entry.

    Returns:
        The entry dict, or None if the file is absent or empty.

    Raises:
        StorageError: If the file exists but cannot be read.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise StorageError(f"Cannot read legacy keystore {path}: {e}") from e

    if not raw:
        return None

    blob = base64.b64encode(LEGACY_BINARY_SALT + raw).decode('ascii')
    logger.info(f"Found legacy binary keystore at {path}")
    return {"type": "encoded", "label": LEGACY_BINARY_LABEL, "mnemonic": blob}
