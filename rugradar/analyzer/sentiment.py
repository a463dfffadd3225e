import logging
from typing import Any, Dict, Optional, Tuple

from rugradar.analyzer.risk_flags import sentiment_risk
from rugradar.analyzer.values import safe_float, safe_int
from rugradar.chains import ChainProfile
from rugradar.errors import FetchError
from rugradar.models.signal import SignalName, SignalResult
from rugradar.models.token import SentimentInfo
from rugradar.scraper.dex_api import DexAPI

logger = logging.getLogger("Sentiment")


def sentiment_score(change_h24: float, change_h1: float, buys_h24: int, sells_h24: int) -> int:
    """
    50 is neutral. Price momentum moves it by at most 25, the 24h buy/sell
    balance by at most 20.
    """
    score = 50.0
    score += max(-15.0, min(15.0, change_h24 / 2))
    score += max(-10.0, min(10.0, change_h1 / 2))

    total = buys_h24 + sells_h24
    if total > 0:
        score += (buys_h24 / total - 0.5) * 40

    # Half rounds up
    return int(max(0.0, min(100.0, score)) + 0.5)


def sentiment_level(score: int) -> str:
    if score >= 70: return "VERY BULLISH"
    if score >= 55: return "BULLISH"
    if score >= 45: return "NEUTRAL"
    if score >= 30: return "BEARISH"
    return "VERY BEARISH"


def volume_activity(volume_h24: float) -> str:
    if volume_h24 > 10_000: return "HIGH"
    if volume_h24 > 1_000: return "MEDIUM"
    return "LOW"


def _txns(pair: Dict[str, Any], window: str) -> Tuple[int, int]:
    txns = (pair.get("txns") or {}).get(window) or {}
    return safe_int(txns.get("buys")), safe_int(txns.get("sells"))


def parse_pair(pair: Dict[str, Any], address: str, chain: ChainProfile) -> SentimentInfo:
    base = pair.get("baseToken") or {}
    token = base if (base.get("address") or "").lower() == address.lower() else (pair.get("quoteToken") or {})
    price_change = pair.get("priceChange") or {}
    volume = pair.get("volume") or {}
    info = pair.get("info") or {}

    change_h24 = safe_float(price_change.get("h24"))
    change_h1 = safe_float(price_change.get("h1"))
    buys_h1, sells_h1 = _txns(pair, "h1")
    buys_h24, sells_h24 = _txns(pair, "h24")
    volume_h24 = safe_float(volume.get("h24"))
    total_h24 = buys_h24 + sells_h24

    score = sentiment_score(change_h24, change_h1, buys_h24, sells_h24)
    pair_address = pair.get("pairAddress") or ""
    return SentimentInfo(
        sentiment_score=score,
        sentiment_level=sentiment_level(score),
        token_name=token.get("name") or "Unknown",
        token_symbol=token.get("symbol") or "Unknown",
        price_change_m5=safe_float(price_change.get("m5")),
        price_change_h1=change_h1,
        price_change_h6=safe_float(price_change.get("h6")),
        price_change_h24=change_h24,
        volume_h1=safe_float(volume.get("h1")),
        volume_h24=volume_h24,
        buys_h1=buys_h1,
        sells_h1=sells_h1,
        buys_h24=buys_h24,
        sells_h24=sells_h24,
        buy_ratio=round(buys_h24 / total_h24 * 100, 1) if total_h24 > 0 else None,
        volume_activity=volume_activity(volume_h24),
        websites=list(info.get("websites") or []),
        socials=list(info.get("socials") or []),
        dexscreener_url=chain.dexscreener_url(pair_address) if pair_address else "",
        pair_address=pair_address,
        dex_id=pair.get("dexId") or "",
        total_pairs=safe_int(pair.get("_totalPairs"), 1),
    )


class SentimentProbe:
    """
    Market mood from the main DexScreener pair. Informational only.
    """

    def __init__(self, dex: DexAPI):
        self.dex = dex

    async def fetch(self, address: str, chain: ChainProfile) -> SignalResult:
        logger.info(f"Reading market sentiment for {address}")
        try:
            pair: Optional[Dict[str, Any]] = await self.dex.get_main_pair(address, chain.dexscreener_id)
        except FetchError as e:
            logger.warning(f"DexScreener unavailable for {address}: {e}")
            return SignalResult.failed(SignalName.SENTIMENT, str(e))

        if not pair:
            return SignalResult.failed(SignalName.SENTIMENT, "Token not found on DexScreener")

        info = parse_pair(pair, address, chain)
        return SignalResult.ok(SignalName.SENTIMENT, info, sentiment_risk(info))
