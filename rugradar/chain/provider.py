import asyncio
import logging
from typing import Any, List, Optional

from web3 import AsyncWeb3, AsyncHTTPProvider
from web3.exceptions import BadFunctionCallOutput, ContractLogicError

from rugradar.cache import TTLCache
from rugradar.chains import ChainProfile, is_valid_address
from rugradar.config import Config
from rugradar.errors import NetworkError, RevertError

logger = logging.getLogger("Provider")


class ProviderPool:
    """
    Hands out one AsyncWeb3 per (chain, RPC url) and performs read-only
    contract calls. A call that fails on the network is tried once more on the
    chain's backup RPC; a revert is final.
    """

    def __init__(self, cache: Optional[TTLCache] = None, timeout: float = None):
        self.cache = cache if cache is not None else TTLCache(Config.PROVIDER_CACHE_TTL)
        self.timeout = timeout if timeout is not None else Config.RPC_TIMEOUT

    def get_web3(self, chain: ChainProfile, url: str) -> AsyncWeb3:
        key = f"{chain.key}:{url}"
        w3 = self.cache.get(key)
        if w3 is None:
            w3 = AsyncWeb3(AsyncHTTPProvider(url, request_kwargs={"timeout": self.timeout}))
            self.cache.set(key, w3)
        return w3

    def _endpoints(self, chain: ChainProfile) -> List[str]:
        # Primary plus at most one backup
        return [url for url in chain.rpc_urls if url][:2]

    async def call(self, chain: ChainProfile, address: str, abi: list, fn_name: str, *args) -> Any:
        """
        Read `fn_name(*args)` from the contract at `address`.
        Raises RevertError or NetworkError.
        """
        call_args = [AsyncWeb3.to_checksum_address(a) if isinstance(a, str) and is_valid_address(a) else a
                     for a in args]
        last_error: Optional[NetworkError] = None

        for url in self._endpoints(chain):
            w3 = self.get_web3(chain, url)
            contract = w3.eth.contract(address=AsyncWeb3.to_checksum_address(address), abi=abi)
            fn = getattr(contract.functions, fn_name)(*call_args)
            try:
                return await asyncio.wait_for(fn.call(), timeout=self.timeout)
            except (ContractLogicError, BadFunctionCallOutput) as e:
                raise RevertError(f"{fn_name}() reverted on {address}: {e}") from e
            except asyncio.TimeoutError:
                last_error = NetworkError(f"{fn_name}() timed out after {self.timeout:.0f}s on {url}")
            except Exception as e:
                last_error = NetworkError(f"{fn_name}() failed on {url}: {e}")
            logger.warning(f"RPC call failed ({chain.short_name}): {last_error}")

        if last_error is None:
            raise NetworkError(f"No RPC endpoint configured for {chain.short_name}")
        raise last_error
