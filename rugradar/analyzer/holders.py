import logging
from typing import Iterable, List, Optional, Tuple

from rugradar.analyzer.goplus import GoPlusClient
from rugradar.analyzer.moralis import MoralisClient
from rugradar.analyzer.risk_flags import holder_risk
from rugradar.analyzer.values import safe_float
from rugradar.chains import ChainProfile, is_burn_address
from rugradar.errors import FetchError
from rugradar.models.signal import SignalName, SignalResult
from rugradar.models.token import HolderEntry, HolderInfo

logger = logging.getLogger("Holders")


def summarize_holders(entries: Iterable[Tuple[str, float]], source: str) -> Optional[HolderInfo]:
    """
    Builds HolderInfo from (address, percent) pairs. Burn addresses are pulled
    out into burned_percent; the rest are ranked by size.
    """
    burned = 0.0
    holders: List[HolderEntry] = []
    for address, percent in entries:
        address = (address or "").lower()
        if is_burn_address(address):
            burned += percent
        else:
            holders.append(HolderEntry(address, percent))

    if not holders and burned == 0:
        return None

    holders.sort(key=lambda h: h.percent, reverse=True)
    return HolderInfo(
        top1_percent=holders[0].percent if holders else 0.0,
        top10_percent=sum(h.percent for h in holders[:10]),
        source=source,
        burned_percent=burned,
        top_holders=holders[:5],
    )


class HolderProbe:
    """
    Top holder concentration. Moralis first, GoPlus holder list when Moralis
    fails or returns nothing.
    """

    def __init__(self, moralis: MoralisClient, goplus: GoPlusClient):
        self.moralis = moralis
        self.goplus = goplus

    async def fetch(self, address: str, chain: ChainProfile) -> SignalResult:
        logger.info(f"Fetching holder distribution of {address}")
        info = None
        try:
            owners = await self.moralis.get_top_holders(address, chain)
            info = summarize_holders(
                ((o.get("owner_address"), safe_float(o.get("percentage_relative_to_total_supply")))
                 for o in owners),
                source="moralis",
            )
        except FetchError as e:
            logger.warning(f"Moralis holders unavailable, trying GoPlus: {e}")

        if info is None:
            try:
                security = await self.goplus.get_token_security(address, chain)
            except FetchError as e:
                logger.warning(f"GoPlus holders unavailable for {address}: {e}")
                return SignalResult.failed(SignalName.HOLDERS, "No holder data")

            # GoPlus reports fractions of supply
            info = summarize_holders(
                ((h.get("address"), safe_float(h.get("percent")) * 100)
                 for h in security.get("holders") or []),
                source="goplus",
            )

        if info is None:
            return SignalResult.failed(SignalName.HOLDERS, "No holder data")
        return SignalResult.ok(SignalName.HOLDERS, info, holder_risk(info))
