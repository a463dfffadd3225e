import json
import logging
from typing import Any, Dict, List, Optional

from rugradar.chains import ChainProfile
from rugradar.config import Config
from rugradar.errors import FetchError
from rugradar.scraper.http import HttpClient

logger = logging.getLogger("Explorer")


class ExplorerClient:
    """
    Etherscan-family explorer (v2 multichain API, one key for every chain).
    """

    def __init__(self, http: HttpClient = None, api_key: str = None):
        self.http = http or HttpClient()
        self.api_key = api_key if api_key is not None else Config.ETHERSCAN_API_KEY

    async def _query(self, chain: ChainProfile, **params) -> Dict[str, Any]:
        query = {"chainid": chain.chain_id, **params}
        if self.api_key:
            query["apikey"] = self.api_key
        data = await self.http.get_json(chain.explorer_api, params=query)
        if not isinstance(data, dict):
            raise FetchError(f"{chain.explorer_name} returned an unexpected payload")
        return data

    async def get_abi(self, address: str, chain: ChainProfile) -> List[Dict[str, Any]]:
        """
        Verified contract ABI. Raises FetchError when the source is not verified.
        """
        data = await self._query(chain, module="contract", action="getabi", address=address)
        if data.get("status") != "1":
            raise FetchError(f"Contract not verified on {chain.explorer_name}")
        try:
            abi = json.loads(data.get("result") or "")
        except ValueError as e:
            raise FetchError(f"Unreadable ABI from {chain.explorer_name}: {e}") from e
        if not isinstance(abi, list):
            raise FetchError(f"Unreadable ABI from {chain.explorer_name}")
        return abi

    async def get_creation_timestamp(self, address: str, chain: ChainProfile) -> Optional[int]:
        """
        Unix time of the first transaction touching the contract, or None.
        """
        data = await self._query(
            chain, module="account", action="txlist", address=address,
            startblock=0, endblock=99999999, page=1, offset=1, sort="asc",
        )
        result = data.get("result")
        if not isinstance(result, list) or not result:
            return None
        try:
            return int(result[0]["timeStamp"])
        except (KeyError, TypeError, ValueError):
            return None
