import asyncio

import pytest

from rugradar.analyzer.sentiment import (
    SentimentProbe, parse_pair, sentiment_level, sentiment_score, volume_activity,
)
from rugradar.errors import FetchError
from rugradar.models.signal import RiskLevel
from rugradar.scraper.dex_api import DexAPI

TOKEN = "0x6982508145454ce325ddbe47a25d4ec3d2311933"


def pair(chain_id="ethereum", liquidity=100_000, pair_address="0xpair", **extra):
    data = {
        "chainId": chain_id,
        "dexId": "uniswap",
        "pairAddress": pair_address,
        "baseToken": {"address": TOKEN, "name": "Pepe", "symbol": "PEPE"},
        "quoteToken": {"address": "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2", "name": "Wrapped Ether",
                       "symbol": "WETH"},
        "priceChange": {"m5": 0.1, "h1": 2, "h6": 4, "h24": "10"},
        "volume": {"h1": 1500, "h24": 25_000},
        "txns": {"h1": {"buys": 6, "sells": 4}, "h24": {"buys": 60, "sells": 40}},
        "liquidity": {"usd": liquidity},
        "info": {"websites": [{"url": "https://pepe.vip"}], "socials": [{"type": "twitter", "url": "x"}]},
    }
    data.update(extra)
    return data


def test_neutral_without_activity():
    assert sentiment_score(0, 0, 0, 0) == 50


def test_components_are_capped():
    assert sentiment_score(500, 500, 100, 0) == 95
    assert sentiment_score(-500, -500, 0, 100) == 5


def test_half_rounds_up():
    assert sentiment_score(1, 0, 0, 0) == 51


@pytest.mark.parametrize("score,level", [
    (70, "VERY BULLISH"), (69, "BULLISH"), (55, "BULLISH"), (54, "NEUTRAL"), (45, "NEUTRAL"),
    (44, "BEARISH"), (30, "BEARISH"), (29, "VERY BEARISH"),
])
def test_levels(score, level):
    assert sentiment_level(score) == level


def test_volume_activity():
    assert volume_activity(10_001) == "HIGH"
    assert volume_activity(10_000) == "MEDIUM"
    assert volume_activity(1_000) == "LOW"


def test_parse_pair(eth):
    info = parse_pair({**pair(), "_totalPairs": 3}, TOKEN, eth)
    assert info.sentiment_score == 60
    assert info.sentiment_level == "BULLISH"
    assert info.token_symbol == "PEPE"
    assert info.buy_ratio == 60.0
    assert info.volume_activity == "HIGH"
    assert info.buys_h1 == 6 and info.sells_h1 == 4
    assert info.dexscreener_url == "https://dexscreener.com/ethereum/0xpair"
    assert info.total_pairs == 3
    assert info.websites == [{"url": "https://pepe.vip"}]


def test_token_can_be_the_quote_side(eth):
    weth = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
    info = parse_pair(pair(txns={}), weth, eth)
    assert info.token_symbol == "WETH"
    assert info.buy_ratio is None
    assert info.total_pairs == 1


def test_probe_picks_most_liquid_pair_on_chain(fake_http, eth):
    http = fake_http({"/tokens/": {"pairs": [
        pair(liquidity=5_000, pair_address="0xsmall"),
        pair(chain_id="bsc", liquidity=10_000_000, pair_address="0xbsc"),
        pair(liquidity=90_000, pair_address="0xmain"),
    ]}})
    result = asyncio.run(SentimentProbe(DexAPI(http)).fetch(TOKEN, eth))

    assert result.success
    assert result.risk == RiskLevel.LOW
    assert result.data.pair_address == "0xmain"
    assert result.data.total_pairs == 2


def test_probe_without_pairs(fake_http, eth):
    http = fake_http({"/tokens/": {"pairs": None}})
    result = asyncio.run(SentimentProbe(DexAPI(http)).fetch(TOKEN, eth))
    assert not result.success
    assert result.error == "Token not found on DexScreener"


def test_probe_absorbs_api_failure(fake_http, eth):
    http = fake_http({"/tokens/": FetchError("HTTP 502")})
    result = asyncio.run(SentimentProbe(DexAPI(http)).fetch(TOKEN, eth))
    assert not result.success
    assert result.error == "HTTP 502"


def test_bearish_market_is_flagged(eth, fake_http):
    dump = pair(priceChange={"h1": -30, "h24": "-60"}, txns={"h24": {"buys": 10, "sells": 90}})
    http = fake_http({"/tokens/": {"pairs": [dump]}})
    result = asyncio.run(SentimentProbe(DexAPI(http)).fetch(TOKEN, eth))
    assert result.data.sentiment_level == "VERY BEARISH"
    assert result.risk == RiskLevel.HIGH
