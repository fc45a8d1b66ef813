"""
Keystore Service - The wallet as seen by the rest of the devkit.

Wires settings, keystore, encryption, mnemonic policy and derivation
together, and exposes the two accessors other commands rely on:
resolve_active_mnemonic() and derive_batch().
"""

import logging
from typing import Optional

from networks import Chain, get_chain_config
from utils import Settings
from wallet import (
    DerivedAccount,
    EncryptionService,
    EntryInfo,
    EntryKind,
    KeystoreEntry,
    KeystoreFile,
    KeystoreManager,
    MnemonicManager,
    NoActiveMnemonic,
    Prompter,
    WalletDerivation,
    check_range,
    read_legacy_binary,
)

logger = logging.getLogger(__name__)

# Well-known development phrase seeded on first run
DEFAULT_MNEMONIC = "test test test test test test test test test test test junk"
DEFAULT_LABEL = "Default Keystore"


class KeystoreService:
    """
    Facade over the wallet package for devkit commands.

    Usage:
        service = KeystoreService(load_settings(), TerminalPrompter())
        service.initialize()
        accounts = service.derive_batch(Chain.CORE, 0, 9)
    """

    def __init__(self, settings: Settings, prompter: Prompter):
        self.settings = settings
        self.prompter = prompter
        self.keystore = KeystoreManager(settings.keystore_path)
        self.encryption = EncryptionService(prompter)
        self.mnemonics = MnemonicManager(self.keystore, self.encryption, prompter)
        self.derivation = WalletDerivation(settings.core_network_id)
        # (active index, phrase) resolved during this process
        self._resolved: Optional[tuple[int, str]] = None

    def initialize(self, seed_default: bool = True) -> KeystoreFile:
        """
        Load the keystore, creating it on first run.

        A fresh keystore imports the legacy binary keystore if one exists,
        otherwise (with seed_default) it gets the development phrase as its
        active entry.
        """
        self.keystore.ensure_file()
        existing = self.keystore.load()
        if existing is not None:
            logger.debug(f"Loaded keystore with {len(existing.entries)} entries")
            return existing

        legacy = read_legacy_binary(self.settings.legacy_keystore_path)
        if legacy is not None:
            entry = KeystoreEntry.from_dict(legacy)
            keystore = KeystoreFile(entries=[entry], active_index=0)
            self.keystore.write_keystore(keystore)
            logger.info("Imported legacy keystore as the active entry")
            return keystore

        if not seed_default:
            return KeystoreFile()

        logger.info("No keystore found. Creating a default keystore...")
        keystore = KeystoreFile(
            entries=[KeystoreEntry(EntryKind.PLAINTEXT, DEFAULT_LABEL, DEFAULT_MNEMONIC)],
            active_index=0,
        )
        self.keystore.write_keystore(keystore)
        self.prompter.notify("Default keystore created and activated.")
        return keystore

    # ============================================
    # Accessors for other commands
    # ============================================

    def resolve_active_mnemonic(self) -> str:
        """
        Plaintext phrase of the active entry.

        Encoded entries are decrypted once per process.

        Raises:
            NoActiveMnemonic: If nothing valid is selected.
        """
        entry = self.mnemonics.active_entry()
        if entry is None:
            raise NoActiveMnemonic()

        index = self.keystore.get_active_index()
        if self._resolved is not None and self._resolved[0] == index:
            return self._resolved[1]

        phrase = self.mnemonics.resolve_mnemonic(entry)
        self._resolved = (index, phrase)
        return phrase

    def active_label(self) -> str:
        entry = self.mnemonics.active_entry()
        return entry.label if entry is not None else "None"

    def derive_batch(self, chain: Chain | str, from_index: int,
                     to_index: int) -> list[DerivedAccount]:
        """Keys and addresses of the active mnemonic for an index range."""
        # Before any password prompt
        check_range(from_index, to_index)
        return self.derivation.batch_derive(
            self.resolve_active_mnemonic(), chain, from_index, to_index
        )

    def chain_id(self, chain: Chain | str) -> int:
        """Network id of the local node for a chain."""
        if get_chain_config(chain).chain == Chain.ESPACE:
            return self.settings.espace_chain_id
        return self.settings.core_network_id

    def core_private_key(self, index: int) -> str:
        return self.derivation.core_private_key(self.resolve_active_mnemonic(), index)

    def espace_private_key(self, index: int) -> str:
        return self.derivation.espace_private_key(self.resolve_active_mnemonic(), index)

    def genesis_secrets(self, count: int) -> list[str]:
        """Core keys 0..count-1 without 0x, as a node's genesis secrets list."""
        if count <= 0:
            return []
        accounts = self.derive_batch(Chain.CORE, 0, count - 1)
        return [a.private_key.removeprefix("0x") for a in accounts]

    # ============================================
    # Entry management
    # ============================================

    def add_mnemonic(self) -> int:
        return self.mnemonics.add_mnemonic()

    def select_active(self, index: int) -> None:
        self.mnemonics.select_active(index)
        self._resolved = None

    def choose_active(self) -> int:
        index = self.mnemonics.choose_active()
        self._resolved = None
        return index

    def delete_mnemonic(self, index: int) -> KeystoreEntry:
        removed = self.mnemonics.delete_mnemonic(index)
        self._resolved = None
        return removed

    def list_entries(self) -> list[EntryInfo]:
        return self.mnemonics.list_entries()
