"""
Wallet package - Encrypted mnemonic keystore for the devkit.

Contains:
- EncryptionService: PBKDF2 + AES-256-GCM protection of single secrets
- KeystoreManager: JSON persistence of entries and the active selection
- MnemonicManager: Generate/import, label, store and select mnemonics
- WalletDerivation: BIP-44 keys and addresses for Core and eSpace
- Prompts: Typed user requests and the terminal adapter
"""

from .errors import (
    KeystoreError,
    StorageError,
    MalformedBlob,
    DecryptionExhausted,
    OutOfRange,
    InvalidRange,
    NoActiveMnemonic,
    InvalidMnemonicWord,
    InvalidMnemonic,
)
from .prompts import (
    Choice,
    SelectRequest,
    TextRequest,
    SecretRequest,
    Prompter,
    TerminalPrompter,
)
from .crypto import (
    EncryptionService,
    encrypt_secret,
    decrypt_secret,
    derive_key,
    split_blob,
    MAX_DECRYPT_ATTEMPTS,
)
from .keystore import (
    EntryKind,
    KeystoreEntry,
    KeystoreFile,
    KeystoreManager,
)
from .migration import (
    upgrade_document,
    read_legacy_binary,
)
from .manager import (
    MnemonicManager,
    EntryInfo,
    default_label,
)
from .derivation import (
    WalletDerivation,
    DerivedAccount,
    check_range,
    generate_private_key,
)

__all__ = [
    # Errors
    "KeystoreError",
    "StorageError",
    "MalformedBlob",
    "DecryptionExhausted",
    "OutOfRange",
    "InvalidRange",
    "NoActiveMnemonic",
    "InvalidMnemonicWord",
    "InvalidMnemonic",
    # Prompts
    "Choice",
    "SelectRequest",
    "TextRequest",
    "SecretRequest",
    "Prompter",
    "TerminalPrompter",
    # Crypto
    "EncryptionService",
    "encrypt_secret",
    "decrypt_secret",
    "derive_key",
    "split_blob",
    "MAX_DECRYPT_ATTEMPTS",
    # Keystore
    "EntryKind",
    "KeystoreEntry",
    "KeystoreFile",
    "KeystoreManager",
    "upgrade_document",
    "read_legacy_binary",
    # Manager
    "MnemonicManager",
    "EntryInfo",
    "default_label",
    # Derivation
    "WalletDerivation",
    "DerivedAccount",
    "check_range",
    "generate_private_key",
]
