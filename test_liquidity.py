import asyncio

import pytest

from rugradar.analyzer.liquidity import LiquidityProbe
from rugradar.analyzer.price import PriceOracle
from rugradar.cache import TTLCache
from rugradar.errors import FetchError
from rugradar.models.signal import RiskLevel
from rugradar.models.token import OwnerStatus, TokenInfo
from rugradar.scraper.dex_api import DexAPI

TOKEN = "0x6982508145454ce325ddbe47a25d4ec3d2311933"
PAIR = "0xa43fe16908251ee70ef74718545e4fe6c5ccec9f"
FACTORY = "0x5c69bee701ef814a2b6a3edd4b1652cb9cc5aa6f"
WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
DEAD = "0x000000000000000000000000000000000000dead"
UNICRYPT = "0x663a5c229c09b049e36dcc11a9b0d4a8eb9db214"
ZERO = "0x0000000000000000000000000000000000000000"

TOKEN_INFO = TokenInfo(
    name="Pepe", symbol="PEPE", decimals=18, total_supply=1_000_000_000.0,
    owner_status=OwnerStatus.RENOUNCED, circulating_supply=900_000_000.0,
)


def pool_responses(token0=WETH, pair=PAIR):
    reserves = [100 * 10 ** 18, 1_000_000 * 10 ** 18, 0]
    if token0 != WETH:
        reserves = [reserves[1], reserves[0], 0]
    return {
        (FACTORY, "getPair", TOKEN, WETH): pair,
        (PAIR, "token0"): token0,
        (PAIR, "getReserves"): reserves,
        (PAIR, "totalSupply"): 1000,
        (PAIR, "balanceOf", DEAD): 600,
        (PAIR, "balanceOf", UNICRYPT): 300,
    }


def dex_pairs(pairs=None):
    if pairs is None:
        pairs = [{
            "chainId": "ethereum", "dexId": "uniswap", "pairAddress": PAIR,
            "priceUsd": "0.25", "priceNative": "0.000125",
            "liquidity": {"usd": 350_000}, "marketCap": 123, "fdv": 456,
        }]
    return {"pairs": pairs}


def make_probe(fake_http, fake_provider, responses, dex_payload):
    http = fake_http({"simple/price": {"ethereum": {"usd": 2000}}, "/tokens/": dex_payload})
    dex = DexAPI(http)
    return LiquidityProbe(fake_provider(responses), dex, PriceOracle(http, dex, TTLCache(60)))


def test_dexscreener_price_with_v2_pool(fake_http, fake_provider, eth):
    probe = make_probe(fake_http, fake_provider, pool_responses(), dex_pairs())
    result = asyncio.run(probe.fetch(TOKEN, eth, TOKEN_INFO))

    assert result.success
    info = result.data
    assert info.price_usd == 0.25
    assert info.price_source == "DexScreener (aggregated)"
    assert info.main_dex == "uniswap"
    # 100 native * $2000 on both sides beats the DexScreener figure
    assert info.liquidity_usd == pytest.approx(400_000)
    assert info.market_cap == pytest.approx(225_000_000)
    assert info.fdv == pytest.approx(250_000_000)
    assert info.lp_burned_percent == 60.0
    assert info.lp_locked_percent == 30.0
    assert info.safe_percent == 90.0
    assert info.native_in_pool == 100.0
    assert info.token_in_pool == 1_000_000.0
    assert result.risk == RiskLevel.LOW


def test_reserve_price_when_dexscreener_has_no_pair(fake_http, fake_provider, eth):
    probe = make_probe(fake_http, fake_provider, pool_responses(token0=TOKEN), dex_pairs([]))
    result = asyncio.run(probe.fetch(TOKEN, eth, TOKEN_INFO))

    info = result.data
    assert info.price_native == pytest.approx(0.0001)
    assert info.price_usd == pytest.approx(0.2)
    assert info.price_source == "Uniswap V2"
    assert info.main_dex == "Uniswap V2"
    assert info.pair_address == PAIR


def test_dexscreener_only(fake_http, fake_provider, eth):
    probe = make_probe(fake_http, fake_provider, {(FACTORY, "getPair", TOKEN, WETH): ZERO}, dex_pairs())
    result = asyncio.run(probe.fetch(TOKEN, eth))

    info = result.data
    assert info.liquidity_usd == 350_000
    assert info.market_cap == 123
    assert info.fdv == 456
    assert info.safe_percent == 0.0
    assert result.risk == RiskLevel.HIGH


def test_no_pool_anywhere(fake_http, fake_provider, eth):
    probe = make_probe(fake_http, fake_provider, {}, FetchError("HTTP 500"))
    result = asyncio.run(probe.fetch(TOKEN, eth, TOKEN_INFO))
    assert not result.success
    assert result.error == "No liquidity pool found"


def test_unreadable_lp_supply_means_nothing_secured(fake_http, fake_provider, eth):
    responses = pool_responses()
    del responses[(PAIR, "totalSupply")]
    probe = make_probe(fake_http, fake_provider, responses, dex_pairs())
    result = asyncio.run(probe.fetch(TOKEN, eth, TOKEN_INFO))
    assert result.data.safe_percent == 0.0
    assert result.risk == RiskLevel.HIGH
