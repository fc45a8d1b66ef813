import re

import pytest
from eth_account import Account

from networks import Chain
from wallet import InvalidRange, WalletDerivation, generate_private_key
from wallet import derivation as derivation_module
from wallet.derivation import core_hex_address

from conftest import TEST_MNEMONIC

# Well-known accounts of the development phrase on m/44'/60'/0'/0/{0,1,2}
ESPACE_ADDRESSES = [
    "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
    "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
    "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC",
]

# Same phrase on m/44'/503'/0'/0/{0,1,2}, local network id 2029
CORE_ADDRESSES = [
    "net2029:aanb5r3b5c39mas03us8u1czthttvassz24gde0d86",
    "net2029:aasedyf0p5xf7597g1jbyxtvb9ghgy8xgutew8nvxw",
    "net2029:aanc7psgu815udhk9u9tyussyhj5cwss7j7kz7kz9t",
]

CORE_ADDRESS = re.compile(r"^net2029:[a-z0-9]{42}$")
PRIVATE_KEY = re.compile(r"^0x[0-9a-f]{64}$")


@pytest.fixture
def derivation():
    return WalletDerivation(core_network_id=2029)


def test_espace_addresses_match_known_accounts(derivation):
    for index, expected in enumerate(ESPACE_ADDRESSES):
        key = derivation.espace_private_key(TEST_MNEMONIC, index)
        assert derivation.address_for(key, Chain.ESPACE) == expected


def test_core_addresses_match_known_accounts(derivation):
    for index, expected in enumerate(CORE_ADDRESSES):
        key = derivation.core_private_key(TEST_MNEMONIC, index)
        assert derivation.address_for(key, Chain.CORE) == expected


def test_named_paths(derivation):
    assert derivation.core_private_key(TEST_MNEMONIC, 3) == \
        derivation.private_key_for(TEST_MNEMONIC, "m/44'/503'/0'/0/3")
    assert derivation.espace_private_key(TEST_MNEMONIC, 3) == \
        derivation.private_key_for(TEST_MNEMONIC, "m/44'/60'/0'/0/3")


def test_derivation_is_deterministic(derivation):
    core = derivation.core_private_key(TEST_MNEMONIC, 0)
    espace = derivation.espace_private_key(TEST_MNEMONIC, 0)

    assert PRIVATE_KEY.match(core)
    assert core == WalletDerivation().core_private_key(TEST_MNEMONIC, 0)
    assert espace == WalletDerivation().espace_private_key(TEST_MNEMONIC, 0)
    assert core != espace


def test_different_mnemonics_give_different_keys(derivation):
    other = "abandon abandon abandon abandon abandon abandon abandon abandon abandon abandon abandon about"
    assert derivation.core_private_key(other, 0) != derivation.core_private_key(TEST_MNEMONIC, 0)


def test_core_address_format(derivation):
    key = derivation.core_private_key(TEST_MNEMONIC, 0)

    address = derivation.address_for(key, Chain.CORE)

    assert CORE_ADDRESS.match(address)
    # User accounts encode as "aa..." (type nibble 0x1)
    assert address.split(":")[1].startswith("aa")


def test_core_address_uses_configured_network(derivation):
    key = derivation.core_private_key(TEST_MNEMONIC, 0)

    mainnet = WalletDerivation(core_network_id=1029).address_for(key, "core")
    testnet = WalletDerivation(core_network_id=1).address_for(key, "core")

    assert mainnet.startswith("cfx:")
    assert testnet.startswith("cfxtest:")
    assert mainnet.split(":")[1][:-8] == testnet.split(":")[1][:-8]


def test_core_hex_address_shares_account_bytes():
    key = "0x" + "11" * 32
    evm = Account.from_key(key).address.lower()

    assert core_hex_address(key) == "0x1" + evm[3:]


def test_batch_derive_core(derivation):
    accounts = derivation.batch_derive(TEST_MNEMONIC, Chain.CORE, 0, 2)

    assert [a.index for a in accounts] == [0, 1, 2]
    assert [a.path for a in accounts] == [f"m/44'/503'/0'/0/{i}" for i in range(3)]
    for account in accounts:
        expected_key = derivation.private_key_for(TEST_MNEMONIC, account.path)
        assert account.private_key == expected_key
        assert account.address == derivation.address_for(expected_key, Chain.CORE)
    assert [a.address for a in accounts] == CORE_ADDRESSES


def test_batch_derive_espace(derivation):
    accounts = derivation.batch_derive(TEST_MNEMONIC, "espace", 1, 2)

    assert [a.address for a in accounts] == ESPACE_ADDRESSES[1:]
    assert accounts[0].to_dict() == {
        "privateKey": accounts[0].private_key,
        "address": ESPACE_ADDRESSES[1],
    }


def test_single_index_range(derivation):
    assert len(derivation.batch_derive(TEST_MNEMONIC, Chain.CORE, 4, 4)) == 1


@pytest.mark.parametrize("from_index, to_index", [(5, 2), (-1, 2), (0, -1)])
def test_invalid_range_derives_nothing(derivation, monkeypatch, from_index, to_index):
    def fail(_):
        raise AssertionError("derivation must not start")

    monkeypatch.setattr(derivation_module, "seed_from_phrase", fail)

    with pytest.raises(InvalidRange):
        derivation.batch_derive(TEST_MNEMONIC, Chain.CORE, from_index, to_index)


def test_negative_index_rejected(derivation):
    with pytest.raises(InvalidRange):
        derivation.core_private_key(TEST_MNEMONIC, -1)


def test_unknown_chain(derivation):
    with pytest.raises(ValueError):
        derivation.batch_derive(TEST_MNEMONIC, "bitcoin", 0, 0)


def test_generate_private_key():
    key = generate_private_key()
    assert PRIVATE_KEY.match(key)
    assert generate_private_key() != key
