import logging
from typing import Dict, Any, List
from rugradar.chains import ChainProfile
from rugradar.config import Config
from rugradar.errors import FetchError
from rugradar.scraper.http import HttpClient

logger = logging.getLogger("Moralis")

class MoralisClient:
    def __init__(self, http: HttpClient = None):
        self.http = http or HttpClient()
        self.base_url = Config.MORALIS_API_URL
        self.api_key = Config.MORALIS_API_KEY

    async def get_top_holders(self, address: str, chain: ChainProfile) -> List[Dict[str, Any]]:
        """
        Largest token owners, biggest first.
        Each entry carries owner_address and percentage_relative_to_total_supply.
        """
        if not self.api_key:
            raise FetchError("MORALIS_API_KEY not set")

        url = f"{self.base_url}/erc20/{address}/owners"
        params = {"chain": chain.moralis_id, "limit": Config.MORALIS_HOLDER_LIMIT, "order": "DESC"}
        headers = {"X-API-Key": self.api_key}

        data = await self.http.get_json(url, params=params, headers=headers)
        owners = (data or {}).get("result") if isinstance(data, dict) else None
        if owners is None:
            raise FetchError("Moralis returned no owner list")
        return owners
