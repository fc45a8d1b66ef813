"""
Wallet Errors - Failure taxonomy for the keystore.

Every error raised by the wallet package derives from KeystoreError so
callers can catch the whole family in one place. Most also derive from
the closest builtin so generic handlers keep working.
"""


class KeystoreError(Exception):
    """Base class for all keystore failures."""


class StorageError(KeystoreError, OSError):
    """The keystore file could not be read, parsed or written."""


class MalformedBlob(KeystoreError, ValueError):
    """An encoded secret is not a valid salt || iv || ciphertext blob."""


class DecryptionExhausted(KeystoreError):
    """All password attempts failed for an encoded secret."""

    def __init__(self, attempts: int):
        super().__init__(f"Maximum decryption attempts reached ({attempts}).")
        self.attempts = attempts


class OutOfRange(KeystoreError, IndexError):
    """A keystore index does not point at an existing entry."""

    def __init__(self, index: int, size: int):
        super().__init__(f"Index {index} is out of range for {size} entries")
        self.index = index
        self.size = size


class InvalidRange(KeystoreError, ValueError):
    """A derivation range is empty or uses negative indices."""

    def __init__(self, from_index: int, to_index: int):
        super().__init__(f"Invalid derivation range: {from_index}..{to_index}")
        self.from_index = from_index
        self.to_index = to_index


class NoActiveMnemonic(KeystoreError):
    """No valid active entry is selected."""

    def __init__(self, message: str = "No active mnemonic selected."):
        super().__init__(message)


class InvalidMnemonicWord(KeystoreError, ValueError):
    """A word typed during import is not in the BIP-39 wordlist."""

    def __init__(self, position: int, word: str):
        super().__init__(
            f"Invalid word {position}: '{word}' is not a valid BIP-39 mnemonic word."
        )
        self.position = position
        self.word = word


class InvalidMnemonic(KeystoreError, ValueError):
    """An imported phrase fails the BIP-39 checksum."""
