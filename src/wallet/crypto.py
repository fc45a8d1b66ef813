"""
Wallet Crypto - Password-based encryption of mnemonic phrases.

Industry-standard primitives:
- PBKDF2-HMAC-SHA256 key derivation (100,000 iterations)
- AES-256-GCM authenticated encryption

An encoded secret is a single base64 string:

    salt (16 bytes) || iv (12 bytes) || ciphertext || tag (16 bytes)

so every blob carries everything needed to decrypt it except the password.
"""

import base64
import binascii
import logging
import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .errors import DecryptionExhausted, MalformedBlob
from .prompts import Prompter, SecretRequest

logger = logging.getLogger(__name__)


# ============================================
# Security Constants
# ============================================

PBKDF2_ITERATIONS = 100_000
KEY_SIZE = 32       # 256 bits for AES-256
SALT_SIZE = 16
IV_SIZE = 12        # 96 bits (recommended for GCM)
TAG_SIZE = 16

# Password attempts before decrypt() gives up
MAX_DECRYPT_ATTEMPTS = 3


# ============================================
# Key Derivation
# ============================================

def derive_key(password: str, salt: bytes) -> bytes:
    """Derive a 256-bit AES key from a password with PBKDF2-HMAC-SHA256."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=salt,
        iterations=PBKDF2_ITERATIONS,
    )
    return kdf.derive(password.encode('utf-8'))


# ============================================
# Blob Encoding
# ============================================

def split_blob(blob: str) -> tuple[bytes, bytes, bytes]:
    """
    Split an encoded secret into (salt, iv, ciphertext_and_tag).

    Raises:
        MalformedBlob: If the text is not base64 or too short to hold
            a salt, an IV and a GCM tag.
    """
    try:
        raw = base64.b64decode(blob.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedBlob("Encoded secret is not valid base64") from e

    if len(raw) < SALT_SIZE + IV_SIZE + TAG_SIZE:
        raise MalformedBlob(
            f"Encoded secret is too short ({len(raw)} bytes)"
        )

    salt = raw[:SALT_SIZE]
    iv = raw[SALT_SIZE:SALT_SIZE + IV_SIZE]
    data = raw[SALT_SIZE + IV_SIZE:]
    return salt, iv, data


def join_blob(salt: bytes, iv: bytes, data: bytes) -> str:
    """Inverse of split_blob."""
    return base64.b64encode(salt + iv + data).decode('ascii')


# ============================================
# Encryption
# ============================================

def encrypt_secret(plaintext: str, password: str) -> str:
    """
    Encrypt a secret with a password.

    A fresh salt and IV are drawn on every call, so encrypting the same
    text twice never yields the same blob.
    """
    salt = secrets.token_bytes(SALT_SIZE)
    iv = secrets.token_bytes(IV_SIZE)
    key = derive_key(password, salt)

    aesgcm = AESGCM(key)
    ciphertext_and_tag = aesgcm.encrypt(iv, plaintext.encode('utf-8'), None)

    return join_blob(salt, iv, ciphertext_and_tag)


def decrypt_secret(blob: str, password: str) -> str:
    """
    Decrypt a secret with a password.

    Raises:
        MalformedBlob: If the blob cannot be parsed.
        InvalidTag: If the password is wrong or the data was tampered with.
    """
    salt, iv, data = split_blob(blob)
    key = derive_key(password, salt)

    aesgcm = AESGCM(key)
    plaintext = aesgcm.decrypt(iv, data, None)

    return plaintext.decode('utf-8')


# ============================================
# Encryption Service
# ============================================

class EncryptionService:
    """
    Encrypts and decrypts single secrets, asking for passwords as needed.

    Usage:
        service = EncryptionService(TerminalPrompter())
        blob = service.encrypt(phrase)    # asks for a new password
        phrase = service.decrypt(blob)    # up to 3 password attempts
    """

    def __init__(self, password_source: Prompter, max_attempts: int = MAX_DECRYPT_ATTEMPTS):
        self.password_source = password_source
        self.max_attempts = max_attempts

    def encrypt(self, plaintext: str) -> str:
        """Encrypt under a newly requested password. Keys are never reused."""
        password = self.password_source.ask(SecretRequest(
            "Enter encryption password to secure your mnemonic:",
            confirm=True,
        ))
        blob = encrypt_secret(plaintext, password)
        logger.debug(f"Encrypted secret ({len(plaintext)} chars)")
        return blob

    def decrypt(self, blob: str) -> str:
        """
        Decrypt a blob, re-asking for the password on failure.

        A wrong password and corrupted data are indistinguishable here:
        both fail the GCM tag and count as one attempt.

        Raises:
            MalformedBlob: Before any prompt, if the blob cannot be parsed.
            DecryptionExhausted: After max_attempts failed attempts.
        """
        split_blob(blob)

        for attempt in range(1, self.max_attempts + 1):
            password = self.password_source.ask(SecretRequest("Password:"))
            try:
                return decrypt_secret(blob, password)
            except (InvalidTag, UnicodeDecodeError):
                message = (
                    f"Decryption failed ({attempt}/{self.max_attempts}). "
                    "Incorrect password or corrupted data."
                )
                logger.warning(message)
                self.password_source.notify(message)

        raise DecryptionExhausted(self.max_attempts)
