import dataclasses
import logging
from typing import Any, Dict, List, Tuple

from rugradar.analyzer.goplus import GoPlusClient
from rugradar.analyzer.risk_flags import honeypot_issues, honeypot_risk
from rugradar.analyzer.values import safe_float, safe_int, to_bool, to_percent
from rugradar.chains import ChainProfile, is_burn_address
from rugradar.errors import FetchError
from rugradar.models.signal import SignalName, SignalResult
from rugradar.models.token import HoneypotInfo, LpHolder

logger = logging.getLogger("Honeypot")


def classify_lp_holders(raw_holders: List[Dict[str, Any]]) -> Tuple[List[LpHolder], float, float, float]:
    """
    Splits GoPlus lp_holders into burned / locked / unlocked.
    Returns (holders, burned %, locked %, unlocked %).
    """
    holders = []
    burned = locked = unlocked = 0.0

    for raw in raw_holders:
        percent = safe_float(raw.get("percent")) * 100
        address = (raw.get("address") or "").lower()
        tag = raw.get("tag") or ""
        lowered_tag = tag.lower()

        # GoPlus tags burn wallets loosely; trust the 0xdead vanity prefix only for LP tokens
        if is_burn_address(address) or address.startswith("0xdead") or "burn" in lowered_tag or "dead" in lowered_tag:
            burned += percent
            holders.append(LpHolder(address, percent, "BURNED", tag or "Dead Address"))
        elif to_bool(raw.get("is_locked")) or "lock" in lowered_tag:
            locked += percent
            holders.append(LpHolder(address, percent, "LOCKED", tag or "Locked"))
        else:
            unlocked += percent
            holders.append(LpHolder(address, percent, "UNLOCKED", tag or "Wallet"))

    return holders, burned, locked, unlocked


def parse_security(token_data: Dict[str, Any]) -> HoneypotInfo:
    lp_holders, burned, locked, unlocked = classify_lp_holders(token_data.get("lp_holders") or [])

    info = HoneypotInfo(
        is_honeypot=to_bool(token_data.get("is_honeypot")),
        buy_tax=to_percent(token_data.get("buy_tax")),
        sell_tax=to_percent(token_data.get("sell_tax")),
        is_proxy=to_bool(token_data.get("is_proxy")),
        is_mintable=to_bool(token_data.get("is_mintable")),
        can_take_back_ownership=to_bool(token_data.get("can_take_back_ownership")),
        owner_can_change_balance=to_bool(token_data.get("owner_change_balance")),
        hidden_owner=to_bool(token_data.get("hidden_owner")),
        cannot_buy=to_bool(token_data.get("cannot_buy")),
        cannot_sell_all=to_bool(token_data.get("cannot_sell_all")),
        transfer_pausable=to_bool(token_data.get("transfer_pausable")),
        is_blacklisted=to_bool(token_data.get("is_blacklisted")),
        trading_cooldown=to_bool(token_data.get("trading_cooldown")),
        is_anti_whale=to_bool(token_data.get("is_anti_whale")),
        is_open_source=to_bool(token_data.get("is_open_source")),
        is_airdrop_scam=to_bool(token_data.get("is_airdrop_scam")),
        lp_holder_count=safe_int(token_data.get("lp_holder_count")),
        lp_holders=lp_holders,
        lp_burned_percent=burned,
        lp_locked_percent=locked,
        lp_unlocked_percent=unlocked,
    )
    return dataclasses.replace(info, issues=honeypot_issues(info))


class HoneypotProbe:
    def __init__(self, goplus: GoPlusClient):
        self.goplus = goplus

    async def fetch(self, address: str, chain: ChainProfile) -> SignalResult:
        logger.info(f"Running honeypot checks for {address}")
        try:
            token_data = await self.goplus.get_token_security(address, chain)
        except FetchError as e:
            logger.warning(f"Honeypot check failed for {address}: {e}")
            return SignalResult.failed(SignalName.HONEYPOT, str(e))

        info = parse_security(token_data)
        if info.is_honeypot:
            logger.warning(f"{address} flagged as HONEYPOT")
        return SignalResult.ok(SignalName.HONEYPOT, info, honeypot_risk(info))
