import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional, Tuple

from rugradar.analyzer.explorer import ExplorerClient
from rugradar.analyzer.risk_flags import token_info_risk
from rugradar.chain.abi import ERC20_ABI
from rugradar.chain.provider import ProviderPool
from rugradar.chains import BURN_ADDRESSES, ChainProfile, is_burn_address
from rugradar.errors import ContractCallError, FetchError, RevertError
from rugradar.models.signal import SignalName, SignalResult
from rugradar.models.token import OwnerStatus, TokenInfo

logger = logging.getLogger("TokenInfo")

SECONDS_PER_DAY = 86400


class TokenInfoProbe:
    """
    ERC-20 basics, ownership, burned supply and contract age.
    """

    def __init__(self, provider: ProviderPool, explorer: ExplorerClient,
                 clock: Callable[[], float] = time.time):
        self.provider = provider
        self.explorer = explorer
        self._clock = clock

    async def fetch(self, address: str, chain: ChainProfile) -> SignalResult:
        logger.info(f"Reading token info for {address} on {chain.name}")
        try:
            name, symbol, decimals, raw_supply = await asyncio.gather(
                self.provider.call(chain, address, ERC20_ABI, "name"),
                self.provider.call(chain, address, ERC20_ABI, "symbol"),
                self.provider.call(chain, address, ERC20_ABI, "decimals"),
                self.provider.call(chain, address, ERC20_ABI, "totalSupply"),
            )
        except ContractCallError as e:
            logger.warning(f"Token basics unavailable for {address}: {e}")
            return SignalResult.failed(SignalName.TOKEN_INFO, str(e))

        decimals = int(decimals)
        total_supply = int(raw_supply) / (10 ** decimals)

        owner, owner_status = await self._owner(address, chain)
        burned_supply = await self._burned_supply(address, chain, decimals)
        age_days, creation_date = await self._age(address, chain)

        burned_percent = (burned_supply / total_supply) * 100 if total_supply > 0 else 0.0
        info = TokenInfo(
            name=str(name),
            symbol=str(symbol),
            decimals=decimals,
            total_supply=total_supply,
            owner_status=owner_status,
            owner=owner,
            burned_supply=burned_supply,
            burned_percent=burned_percent,
            circulating_supply=total_supply - burned_supply,
            contract_age_days=age_days,
            creation_date=creation_date,
        )
        return SignalResult.ok(SignalName.TOKEN_INFO, info, token_info_risk(info))

    async def _owner(self, address: str, chain: ChainProfile) -> Tuple[Optional[str], OwnerStatus]:
        try:
            owner = await self.provider.call(chain, address, ERC20_ABI, "owner")
        except RevertError:
            return None, OwnerStatus.NO_OWNER_FUNCTION
        except ContractCallError as e:
            logger.warning(f"owner() unreadable for {address}: {e}")
            return None, OwnerStatus.NO_OWNER_FUNCTION

        owner = str(owner).lower()
        if is_burn_address(owner):
            return owner, OwnerStatus.RENOUNCED
        return owner, OwnerStatus.ACTIVE

    async def _burned_supply(self, address: str, chain: ChainProfile, decimals: int) -> float:
        balances = await asyncio.gather(
            *(self.provider.call(chain, address, ERC20_ABI, "balanceOf", burn) for burn in BURN_ADDRESSES),
            return_exceptions=True,
        )
        burned = 0
        for balance in balances:
            # A failing read counts as nothing burned at that address
            if isinstance(balance, Exception):
                logger.debug(f"Burn balance read failed: {balance}")
                continue
            burned += int(balance)
        return burned / (10 ** decimals)

    async def _age(self, address: str, chain: ChainProfile) -> Tuple[Optional[int], Optional[datetime]]:
        try:
            created = await self.explorer.get_creation_timestamp(address, chain)
        except FetchError as e:
            logger.warning(f"Contract age unknown for {address}: {e}")
            return None, None
        if created is None:
            return None, None

        age_days = int(max(0, self._clock() - created) // SECONDS_PER_DAY)
        return age_days, datetime.fromtimestamp(created, tz=timezone.utc)
