import logging
from typing import Dict, Optional

from rugradar.cache import TTLCache
from rugradar.chains import ChainProfile
from rugradar.config import Config
from rugradar.errors import FetchError
from rugradar.scraper.dex_api import DexAPI
from rugradar.scraper.http import HttpClient

logger = logging.getLogger("Price")


class PriceOracle:
    """
    USD price of a chain's native coin.

    CoinGecko first, then the most liquid DexScreener pair of the wrapped
    native token, then the last price ever seen for the chain. Fresh prices are
    kept in the injected cache for Config.PRICE_CACHE_TTL seconds.
    """

    def __init__(self, http: HttpClient = None, dex: DexAPI = None, cache: Optional[TTLCache] = None):
        self.http = http or HttpClient()
        self.dex = dex or DexAPI(self.http)
        self.cache = cache if cache is not None else TTLCache(Config.PRICE_CACHE_TTL)
        self._last_known: Dict[str, float] = {}

    async def get_native_price(self, chain: ChainProfile) -> Optional[float]:
        cached = self.cache.get(chain.key)
        if cached is not None:
            return cached

        price = await self._from_coingecko(chain)
        if price is None:
            price = await self._from_dexscreener(chain)

        if price is None:
            fallback = self._last_known.get(chain.key)
            logger.warning(f"Could not fetch live {chain.native_symbol} price, "
                           f"using {'last known value' if fallback else 'nothing'}")
            return fallback

        self.cache.set(chain.key, price)
        self._last_known[chain.key] = price
        return price

    async def _from_coingecko(self, chain: ChainProfile) -> Optional[float]:
        url = f"{Config.COINGECKO_API_URL}/simple/price"
        try:
            data = await self.http.get_json(url, params={"ids": chain.coingecko_id, "vs_currencies": "usd"})
        except FetchError as e:
            logger.warning(f"CoinGecko price failed: {e}")
            return None
        return _positive((data or {}).get(chain.coingecko_id, {}).get("usd") if isinstance(data, dict) else None)

    async def _from_dexscreener(self, chain: ChainProfile) -> Optional[float]:
        if not chain.has_dex_factory:
            return None
        try:
            pair = await self.dex.get_main_pair(chain.wrapped_native, chain.dexscreener_id)
        except FetchError as e:
            logger.warning(f"DexScreener native price failed: {e}")
            return None
        if not pair:
            return None
        # Wrapped native must be the base token for priceUsd to be its price
        base = ((pair.get("baseToken") or {}).get("address") or "").lower()
        if base != chain.wrapped_native.lower():
            return None
        return _positive(pair.get("priceUsd"))


def _positive(value) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None
