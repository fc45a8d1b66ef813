"""
Mnemonic Manager - Creating, selecting and resolving keystore entries.

The only component that talks to both the keystore and the encryption
service. Every flow gathers its input first and writes last, so an
interrupted prompt or a failed encryption leaves the file untouched.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from mnemonic import Mnemonic

from .crypto import EncryptionService
from .errors import InvalidMnemonic, InvalidMnemonicWord, NoActiveMnemonic, OutOfRange
from .keystore import EntryKind, KeystoreEntry, KeystoreFile, KeystoreManager
from .prompts import Choice, Prompter, SelectRequest, TextRequest

logger = logging.getLogger(__name__)

WORD_COUNT = 12
MNEMONIC_STRENGTH = 128  # bits of entropy for 12 words

STORE_ENCRYPTED = "e"
STORE_PLAINTEXT = "p"
GENERATE_NEW = "g"
IMPORT_EXISTING = "i"

STORAGE_REQUEST = SelectRequest(
    "Choose storage option for the mnemonic:",
    (
        Choice("Store encrypted", STORE_ENCRYPTED),
        Choice("Store in plaintext", STORE_PLAINTEXT),
    ),
)

SOURCE_REQUEST = SelectRequest(
    "Generate or import a mnemonic?",
    (
        Choice("Generate a new mnemonic", GENERATE_NEW),
        Choice("Insert an existing mnemonic", IMPORT_EXISTING),
    ),
)


def default_label(count: int) -> str:
    """Default label for the entry created after `count` existing ones."""
    return f"Mnemonic {count + 1}"


@dataclass
class EntryInfo:
    """Display view of a keystore entry (never includes the secret)."""
    index: int
    label: str
    kind: EntryKind
    is_active: bool

    def display_label(self) -> str:
        """Format for display: 0 - Label (encoded) *"""
        marker = " *" if self.is_active else ""
        return f"{self.index} - {self.label} ({self.kind.value}){marker}"


class MnemonicManager:
    """
    Policy for adding and selecting mnemonics.

    Usage:
        manager = MnemonicManager(keystore, EncryptionService(prompter), prompter)
        index = manager.add_mnemonic()
        manager.select_active(index)
        phrase = manager.resolve_mnemonic(keystore.get_entries()[index])
    """

    def __init__(self, keystore: KeystoreManager, encryption: EncryptionService,
                 prompter: Prompter):
        self.keystore = keystore
        self.encryption = encryption
        self.prompter = prompter
        self._mnemo = Mnemonic("english")
        self._wordset = frozenset(self._mnemo.wordlist)

    # ============================================
    # Adding
    # ============================================

    def add_mnemonic(self) -> int:
        """
        Interactively create a new entry and persist it.

        Order: storage mode, generate/import, label, encryption, write.
        The entry is appended; the active index is not changed.

        Returns:
            Index of the new entry.
        """
        storage = self._select(STORAGE_REQUEST)
        phrase = self.prompt_for_mnemonic()

        entries = self.keystore.get_entries()
        label = self.prompter.ask(TextRequest(
            "Enter a label for this mnemonic:",
            default=default_label(len(entries)),
        )).strip() or default_label(len(entries))

        if storage == STORE_ENCRYPTED:
            entry = KeystoreEntry(EntryKind.ENCODED, label, self.encryption.encrypt(phrase))
        else:
            entry = KeystoreEntry(EntryKind.PLAINTEXT, label, phrase)

        self.keystore.write_keystore(KeystoreFile(
            entries=entries + [entry],
            active_index=self.keystore.get_active_index(),
        ))

        index = len(entries)
        logger.info(f"Stored mnemonic '{label}' at index {index} ({entry.kind.value})")
        self.prompter.notify(
            "Mnemonic stored securely." if entry.is_encrypted
            else "Mnemonic stored in plaintext."
        )
        return index

    def prompt_for_mnemonic(self) -> str:
        """Ask whether to generate or import, then do it."""
        source = self._select(SOURCE_REQUEST)
        if source == IMPORT_EXISTING:
            return self.import_mnemonic()
        return self.generate_mnemonic()

    def generate_mnemonic(self) -> str:
        """Fresh 12-word English BIP-39 phrase from a secure random source."""
        return self._mnemo.generate(strength=MNEMONIC_STRENGTH)

    def import_mnemonic(self) -> str:
        """
        Collect a 12-word phrase one word at a time.

        Each word is checked against the wordlist as soon as it is typed;
        an invalid word is reported and only that word is asked again.

        Raises:
            InvalidMnemonic: If the complete phrase fails the BIP-39 checksum.
        """
        self.prompter.notify("Please enter your mnemonic key one word at a time.")

        words = []
        for position in range(1, WORD_COUNT + 1):
            while True:
                word = self.prompter.ask(
                    TextRequest(f"Enter word {position} of {WORD_COUNT}:")
                ).strip().lower()
                try:
                    self.validate_word(position, word)
                except InvalidMnemonicWord as e:
                    logger.debug(f"Rejected word at position {position}")
                    self.prompter.notify(str(e))
                    continue
                words.append(word)
                break

        phrase = " ".join(words)
        if not self._mnemo.check(phrase):
            raise InvalidMnemonic("Invalid seed phrase. Check for typos.")
        return phrase

    def validate_word(self, position: int, word: str) -> None:
        if word not in self._wordset:
            raise InvalidMnemonicWord(position, word)

    # ============================================
    # Resolving & Selecting
    # ============================================

    def resolve_mnemonic(self, entry: KeystoreEntry) -> str:
        """Plaintext phrase for an entry, decrypting if needed."""
        if entry.is_encrypted:
            return self.encryption.decrypt(entry.secret)
        return entry.secret

    def select_active(self, index: int) -> None:
        """
        Make an entry the active one and persist the choice.

        Raises:
            OutOfRange: If index does not name an entry.
        """
        entries = self.keystore.get_entries()
        self._check_index(index, len(entries))

        self.keystore.write_keystore(KeystoreFile(entries=entries, active_index=index))
        logger.info(f"Active mnemonic set to '{entries[index].label}'")

    def choose_active(self) -> int:
        """
        Let the user pick the active entry from a list of labels.

        Raises:
            NoActiveMnemonic: If the keystore has no entries.
        """
        infos = self.list_entries()
        if not infos:
            raise NoActiveMnemonic("No mnemonics found.")

        # Same indices as list and select
        answer = self._select(SelectRequest(
            "Select the active mnemonic:",
            tuple(Choice(info.display_label(), str(info.index)) for info in infos),
            numbered=False,
        ))
        index = int(answer)
        self.select_active(index)
        self.prompter.notify(f"Active wallet set to: {infos[index].label}")
        return index

    def delete_mnemonic(self, index: int) -> KeystoreEntry:
        """
        Remove an entry and persist.

        The active index follows the entry it pointed at, or becomes None
        if that entry was the one removed.

        Raises:
            OutOfRange: If index does not name an entry.
        """
        entries = self.keystore.get_entries()
        self._check_index(index, len(entries))

        removed = entries.pop(index)
        active = self.keystore.get_active_index()
        if active == index:
            active = None
        elif active is not None and active > index:
            active -= 1

        self.keystore.write_keystore(KeystoreFile(entries=entries, active_index=active))
        logger.info(f"Deleted mnemonic '{removed.label}' (index {index})")
        return removed

    def list_entries(self) -> list[EntryInfo]:
        active = self.keystore.get_active_index()
        return [
            EntryInfo(index=i, label=e.label, kind=e.kind, is_active=(i == active))
            for i, e in enumerate(self.keystore.get_entries())
        ]

    def active_entry(self) -> Optional[KeystoreEntry]:
        """The active entry, or None if the selection is unset or stale."""
        entries = self.keystore.get_entries()
        index = self.keystore.get_active_index()
        if index is None or not 0 <= index < len(entries):
            return None
        return entries[index]

    # ============================================
    # Helpers
    # ============================================

    def _select(self, request: SelectRequest) -> str:
        answer = self.prompter.ask(request)
        if answer not in request.values():
            raise ValueError(f"Unexpected answer '{answer}' to: {request.message}")
        return answer

    @staticmethod
    def _check_index(index: int, size: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < size:
            raise OutOfRange(index, size)
