import logging
from typing import List, Optional, Dict, Any
from rugradar.config import Config
from rugradar.scraper.http import HttpClient

logger = logging.getLogger(__name__)

class DexAPI:
    def __init__(self, http: HttpClient = None):
        self.http = http or HttpClient()
        self.base_url = Config.DEX_SCREENER_API_URL

    async def get_pairs_by_token_address(self, token_address: str) -> List[Dict[str, Any]]:
        """
        Fetches every pair DexScreener knows for a token, across all chains.
        Raises FetchError.
        """
        url = f"{self.base_url}/tokens/{token_address}"
        data = await self.http.get_json(url)
        return (data or {}).get("pairs") or []

    async def get_main_pair(self, token_address: str, chain_id: str) -> Optional[Dict[str, Any]]:
        """
        Highest-liquidity pair of the token on one chain, or None.
        Also returns the number of pairs seen on that chain under "_totalPairs".
        """
        pairs = await self.get_pairs_by_token_address(token_address)
        on_chain = [p for p in pairs if (p.get("chainId") or "").lower() == chain_id.lower()]
        if not on_chain:
            return None

        on_chain.sort(key=lambda p: self._liquidity(p), reverse=True)
        main = dict(on_chain[0])
        main["_totalPairs"] = len(on_chain)
        return main

    async def get_pair(self, chain_id: str, pair_address: str) -> Optional[Dict[str, Any]]:
        url = f"{self.base_url}/pairs/{chain_id}/{pair_address}"
        data = await self.http.get_json(url) or {}
        if data.get("pair"):
            return data["pair"]
        pairs = data.get("pairs") or []
        return pairs[0] if pairs else None

    @staticmethod
    def _liquidity(pair: Dict[str, Any]) -> float:
        try:
            return float((pair.get("liquidity") or {}).get("usd") or 0)
        except (TypeError, ValueError):
            return 0.0
