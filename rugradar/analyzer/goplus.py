import logging
from typing import Optional, Dict, Any
from rugradar.cache import TTLCache
from rugradar.chains import ChainProfile
from rugradar.config import Config
from rugradar.errors import FetchError
from rugradar.scraper.http import HttpClient

logger = logging.getLogger("GoPlus")

class GoPlusClient:
    """
    GoPlus token_security lookups. The same response feeds both the honeypot
    probe and the holder fallback, so it is cached for a short while.
    """

    def __init__(self, http: HttpClient = None, cache: Optional[TTLCache] = None):
        self.http = http or HttpClient()
        self.cache = cache if cache is not None else TTLCache(Config.GOPLUS_CACHE_TTL)
        self.base_url = Config.GOPLUS_API_URL
        self.key = Config.GOPLUS_KEY

    async def get_token_security(self, address: str, chain: ChainProfile) -> Dict[str, Any]:
        """
        Checks token security via GoPlus API.
        Raises FetchError when the API fails or does not know the token.
        """
        address = address.lower()
        cache_key = f"{chain.goplus_id}:{address}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        url = f"{self.base_url}/token_security/{chain.goplus_id}"
        params = {"contract_addresses": address}
        headers = {"Authorization": self.key} if self.key else None

        data = await self.http.get_json(url, params=params, headers=headers)
        # Structure: {"code": 1, "message": "OK", "result": {"addr": {...}}}
        if not isinstance(data, dict) or data.get("code") != 1:
            message = data.get("message") if isinstance(data, dict) else None
            raise FetchError(f"Security API failed{': ' + message if message else ''}")

        result = {k.lower(): v for k, v in (data.get("result") or {}).items()}
        token_data = result.get(address)
        if not token_data:
            raise FetchError("Token not in security database")

        self.cache.set(cache_key, token_data)
        return token_data
