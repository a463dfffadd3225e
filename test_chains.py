import pytest

from rugradar.chains import (
    BURN_ADDRESSES, CHAINS, get_chain, is_burn_address, is_valid_address, normalize_address, supported_chains,
)
from rugradar.errors import InvalidAddressError, UnsupportedChainError


@pytest.mark.parametrize("alias,key", [
    ("eth", "eth"), ("ETHEREUM", "eth"), ("bnb", "bsc"), ("binance", "bsc"), ("matic", "polygon"),
    ("arb", "arbitrum"), ("avax", "avalanche"), ("op", "optimism"), ("ftm", "fantom"),
    ("cro", "cronos"), ("mon", "monad"), ("abs", "abstract"), (" base ", "base"),
])
def test_aliases_resolve(alias, key):
    assert get_chain(alias).key == key


def test_unknown_chain_raises():
    with pytest.raises(UnsupportedChainError):
        get_chain("solana")
    with pytest.raises(ValueError):
        get_chain("")


def test_every_profile_is_complete():
    assert len(supported_chains()) == len(CHAINS) == 12
    for key, profile in CHAINS.items():
        assert profile.key == key
        assert profile.rpc.startswith("https://")
        assert profile.goplus_id and profile.dexscreener_id and profile.moralis_id
        assert is_valid_address(profile.dex_factory)
        assert is_valid_address(profile.wrapped_native)
        assert all(is_valid_address(locker) for locker in profile.lockers)


def test_abstract_has_no_v2_factory():
    assert not get_chain("abstract").has_dex_factory
    assert get_chain("eth").has_dex_factory


def test_normalize_address():
    mixed = "0x6982508145454Ce325dDbE47a25d4ec3d2311933"
    assert normalize_address(f"  {mixed} ") == mixed.lower()


@pytest.mark.parametrize("bad", [
    None, "", "0x123", "6982508145454ce325ddbe47a25d4ec3d2311933",
    "0x6982508145454ce325ddbe47a25d4ec3d231193g", "0x6982508145454ce325ddbe47a25d4ec3d23119330",
])
def test_invalid_addresses_are_rejected(bad):
    assert not is_valid_address(bad)
    with pytest.raises(InvalidAddressError):
        normalize_address(bad)


def test_burn_addresses():
    for address in BURN_ADDRESSES:
        assert is_burn_address(address.upper().replace("0X", "0x"))
    assert not is_burn_address("0xdeadbeef00000000000000000000000000000000")
    assert not is_burn_address("0x6982508145454ce325ddbe47a25d4ec3d2311933")
    assert not is_burn_address(None)


def test_explorer_and_dexscreener_links():
    eth = get_chain("eth")
    assert eth.token_url("0xabc") == "https://etherscan.io/token/0xabc"
    assert eth.dexscreener_url("0xabc") == "https://dexscreener.com/ethereum/0xabc"
    assert eth.rpc_urls[0] == eth.rpc
