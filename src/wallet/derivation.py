"""
Wallet Derivation - BIP-32/44 keys and addresses from a mnemonic.

Keys are pure functions of (mnemonic, path) and are never written to
disk. The BIP-39 seed uses an empty passphrase.
"""

import logging
import secrets
from dataclasses import dataclass

from cfx_address import Base32Address
from eth_account import Account
from eth_account.hdaccount import key_from_seed
from mnemonic import Mnemonic

from networks import DEFAULT_CORE_NETWORK_ID, Chain, get_chain_config
from .errors import InvalidRange

logger = logging.getLogger(__name__)

# Core user addresses carry type nibble 0x1
CORE_USER_ADDRESS_PREFIX = "0x1"


@dataclass
class DerivedAccount:
    """A key derived at one index of a chain's BIP-44 path."""
    index: int
    path: str           # e.g. "m/44'/503'/0'/0/0"
    private_key: str    # 0x... hex
    address: str        # base32 (Core) or 0x... (eSpace)

    def to_dict(self) -> dict:
        return {"privateKey": self.private_key, "address": self.address}


def seed_from_phrase(mnemonic: str) -> bytes:
    """BIP-39 seed for a phrase (no passphrase)."""
    return Mnemonic.to_seed(mnemonic, passphrase="")


def core_hex_address(private_key: str | bytes) -> str:
    """
    Hex form of the Core address for a key.

    Same 20 bytes as the EVM address, with the first nibble forced to
    the user-account type.
    """
    evm_address = Account.from_key(private_key).address
    return CORE_USER_ADDRESS_PREFIX + evm_address[3:].lower()


def check_range(from_index: int, to_index: int) -> None:
    """Raise InvalidRange unless 0 <= from_index <= to_index."""
    if from_index < 0 or to_index < 0 or from_index > to_index:
        raise InvalidRange(from_index, to_index)


def generate_private_key() -> str:
    """Random private key, unrelated to any mnemonic."""
    return "0x" + secrets.token_bytes(32).hex()


class WalletDerivation:
    """
    Derives private keys and addresses for Core and eSpace.

    Usage:
        derivation = WalletDerivation(core_network_id=2029)
        key = derivation.core_private_key(phrase, 0)
        address = derivation.address_for(key, Chain.CORE)  # net2029:aa...
        accounts = derivation.batch_derive(phrase, Chain.ESPACE, 0, 9)
    """

    def __init__(self, core_network_id: int = DEFAULT_CORE_NETWORK_ID):
        self.core_network_id = core_network_id

    def private_key_for(self, mnemonic: str, path: str) -> str:
        """Private key at a BIP-32 path, as 0x hex."""
        return self._key_at(seed_from_phrase(mnemonic), path)

    def core_private_key(self, mnemonic: str, index: int) -> str:
        return self.private_key_for(mnemonic, self._path(Chain.CORE, index))

    def espace_private_key(self, mnemonic: str, index: int) -> str:
        return self.private_key_for(mnemonic, self._path(Chain.ESPACE, index))

    def address_for(self, private_key: str | bytes, chain: Chain | str) -> str:
        """
        Public address of a key on a chain.

        eSpace: EIP-55 checksummed 0x address.
        Core: CIP-37 base32 address for the configured network id.
        """
        chain = get_chain_config(chain).chain
        if chain == Chain.ESPACE:
            return Account.from_key(private_key).address
        return str(Base32Address.encode_base32(
            core_hex_address(private_key), self.core_network_id
        ))

    def batch_derive(self, mnemonic: str, chain: Chain | str,
                     from_index: int, to_index: int) -> list[DerivedAccount]:
        """
        Derive keys for every index in from_index..to_index (inclusive).

        Raises:
            InvalidRange: If from_index > to_index or either is negative.
                Raised before any derivation work.
        """
        check_range(from_index, to_index)

        config = get_chain_config(chain)
        seed = seed_from_phrase(mnemonic)

        accounts = []
        for index in range(from_index, to_index + 1):
            path = config.path(index)
            private_key = self._key_at(seed, path)
            accounts.append(DerivedAccount(
                index=index,
                path=path,
                private_key=private_key,
                address=self.address_for(private_key, config.chain),
            ))

        logger.debug(f"Derived {len(accounts)} {config.chain.value} account(s)")
        return accounts

    def _path(self, chain: Chain, index: int) -> str:
        if index < 0:
            raise InvalidRange(index, index)
        return get_chain_config(chain).path(index)

    @staticmethod
    def _key_at(seed: bytes, path: str) -> str:
        return "0x" + key_from_seed(seed, path).hex()
