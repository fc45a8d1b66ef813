"""
Devkit Networks - Chain configurations for key derivation.

One seed serves both address spaces of a local Conflux devnet:
- Core: native chain, base32 (CIP-37) addresses, coin type 503
- eSpace: EVM-compatible chain, EIP-55 hex addresses, coin type 60
"""

from dataclasses import dataclass
from enum import Enum

# ============================================
# Chains
# ============================================


class Chain(str, Enum):
    """Address space a key is derived for."""
    CORE = "core"
    ESPACE = "espace"


@dataclass(frozen=True)
class ChainConfig:
    """Derivation settings for one address space."""
    chain: Chain
    display_name: str
    coin_type: int                # BIP-44 coin type
    derivation_path: str          # Template with {} for the address index

    def path(self, index: int) -> str:
        return self.derivation_path.format(index)


CHAINS = {
    Chain.CORE: ChainConfig(
        chain=Chain.CORE,
        display_name="Conflux Core",
        coin_type=503,
        derivation_path="m/44'/503'/0'/0/{}",
    ),
    Chain.ESPACE: ChainConfig(
        chain=Chain.ESPACE,
        display_name="Conflux eSpace",
        coin_type=60,
        derivation_path="m/44'/60'/0'/0/{}",
    ),
}

# Local devnet defaults
DEFAULT_CORE_NETWORK_ID = 2029
DEFAULT_ESPACE_CHAIN_ID = 2030


def get_chain_config(chain: Chain | str) -> ChainConfig:
    """Look up a chain by enum or name ("core", "espace")."""
    try:
        return CHAINS[Chain(chain)]
    except ValueError:
        raise ValueError(f"Unknown chain: {chain}") from None
