"""
Keystore - Durable storage of mnemonic entries.

The keystore is a single JSON file:

    {
      "keystore": [
        {"type": "plaintext" | "encoded", "label": "...", "mnemonic": "..."}
      ],
      "activeIndex": 0 | null
    }

KeystoreManager only moves this document between disk and memory. It
knows nothing about encryption; encoded secrets are opaque strings here.
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from .errors import StorageError
from .migration import upgrade_document

logger = logging.getLogger(__name__)

# Secure file permissions (Unix only)
SECURE_FILE_MODE = 0o600  # Owner read/write only


def set_secure_permissions(filepath: Path) -> None:
    """
    Set restrictive file permissions on Unix systems.

    Sets file to mode 0600 (owner read/write only). No-op on Windows.
    """
    if os.name == 'posix':
        try:
            os.chmod(filepath, SECURE_FILE_MODE)
        except OSError as e:
            # Best effort - the data itself is already written
            logger.warning(f"Could not restrict permissions on {filepath}: {e}")


# ============================================
# Data Classes
# ============================================

class EntryKind(str, Enum):
    """Storage mode of an entry's secret."""
    PLAINTEXT = "plaintext"
    ENCODED = "encoded"


@dataclass
class KeystoreEntry:
    """A mnemonic stored in the keystore."""
    kind: EntryKind     # plaintext or encoded
    label: str          # User-friendly name (not unique)
    secret: str         # Phrase, or base64 blob when encoded

    @property
    def is_encrypted(self) -> bool:
        return self.kind == EntryKind.ENCODED

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "label": self.label, "mnemonic": self.secret}

    @classmethod
    def from_dict(cls, data: dict) -> "KeystoreEntry":
        return cls(
            kind=EntryKind(data["type"]),
            label=str(data["label"]),
            secret=data["mnemonic"],
        )


@dataclass
class KeystoreFile:
    """The persisted aggregate: ordered entries plus the active selection."""
    entries: list[KeystoreEntry] = field(default_factory=list)
    active_index: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "keystore": [e.to_dict() for e in self.entries],
            "activeIndex": self.active_index,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "KeystoreFile":
        """
        Build from a canonical document.

        Raises:
            ValueError, KeyError, TypeError: If the document is malformed.
        """
        if not isinstance(data, dict):
            raise TypeError("Keystore document must be a JSON object")

        raw_entries = data["keystore"]
        if not isinstance(raw_entries, list):
            raise TypeError("'keystore' must be a list")

        entries = []
        for item in raw_entries:
            if not isinstance(item, dict) or not isinstance(item.get("mnemonic"), str):
                raise ValueError(f"Malformed keystore entry: {item!r}")
            entries.append(KeystoreEntry.from_dict(item))

        active_index = data.get("activeIndex")
        if active_index is not None and (
            isinstance(active_index, bool) or not isinstance(active_index, int)
        ):
            raise TypeError("'activeIndex' must be an integer or null")

        return cls(entries=entries, active_index=active_index)


# ============================================
# Keystore Manager
# ============================================

class KeystoreManager:
    """
    Loads and saves the keystore file.

    In-memory state is a cache of the file. Mutating accessors do not
    persist; callers must call write_keystore() afterwards.

    Usage:
        manager = KeystoreManager(Path("~/.devkit.keystore.json").expanduser())
        manager.load()
        manager.get_entries()
        manager.set_active_index(0)
        manager.write_keystore()
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._entries: list[KeystoreEntry] = []
        self._active_index: Optional[int] = None

    def ensure_file(self) -> None:
        """Create the keystore file (empty) and its directory if missing."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self.path.touch()
                set_secure_permissions(self.path)
                logger.info(f"Created empty keystore at {self.path}")
        except OSError as e:
            raise StorageError(f"Cannot create keystore {self.path}: {e}") from e

    def read_keystore(self) -> Optional[KeystoreFile]:
        """
        Read the keystore file.

        Legacy layouts are upgraded and written back in canonical form.

        Returns:
            None if the file is missing or empty.

        Raises:
            StorageError: On I/O errors or an unparseable document.
        """
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                text = f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Cannot read keystore {self.path}: {e}") from e

        if not text.strip():
            return None

        try:
            data = json.loads(text)
            data, migrated = upgrade_document(data)
            keystore = KeystoreFile.from_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Corrupted keystore {self.path}: {e}") from e

        if migrated:
            logger.info(f"Upgrading legacy keystore layout at {self.path}")
            self._write(keystore)

        return keystore

    def load(self) -> Optional[KeystoreFile]:
        """Read the keystore and replace the in-memory state with it."""
        keystore = self.read_keystore()
        if keystore is None:
            self._entries = []
            self._active_index = None
        else:
            self._entries = keystore.entries
            self._active_index = keystore.active_index
        return keystore

    def write_keystore(self, keystore: Optional[KeystoreFile] = None) -> None:
        """
        Overwrite the keystore file with the given aggregate.

        Without an argument the in-memory state is written. The cache is
        replaced only once the new file is fully on disk.

        Raises:
            StorageError: If the file cannot be written.
        """
        if keystore is None:
            keystore = self.snapshot()

        self._write(keystore)

        self._entries = list(keystore.entries)
        self._active_index = keystore.active_index

    def _write(self, keystore: KeystoreFile) -> None:
        payload = json.dumps(keystore.to_dict(), indent=2)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
        except OSError as e:
            raise StorageError(f"Cannot write keystore {self.path}: {e}") from e

        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            temp_path.replace(self.path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise StorageError(f"Cannot write keystore {self.path}: {e}") from e

        set_secure_permissions(self.path)
        logger.debug(f"Wrote keystore with {len(keystore.entries)} entries")

    # ============================================
    # In-memory accessors
    # ============================================

    def get_entries(self) -> list[KeystoreEntry]:
        return list(self._entries)

    def set_entries(self, entries: list[KeystoreEntry]) -> None:
        self._entries = list(entries)

    def get_active_index(self) -> Optional[int]:
        return self._active_index

    def set_active_index(self, index: Optional[int]) -> None:
        self._active_index = index

    def snapshot(self) -> KeystoreFile:
        """Copy of the in-memory state."""
        return KeystoreFile(entries=list(self._entries), active_index=self._active_index)
