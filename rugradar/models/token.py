from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict


class OwnerStatus(str, Enum):
    RENOUNCED = "renounced"
    ACTIVE = "active"
    NO_OWNER_FUNCTION = "no-owner-function"


@dataclass(frozen=True)
class TokenInfo:
    """
    ERC-20 basics read over RPC, plus ownership and contract age.
    Supplies are in whole tokens (already divided by decimals).
    """
    name: str
    symbol: str
    decimals: int
    total_supply: float
    owner_status: OwnerStatus
    owner: Optional[str] = None
    burned_supply: float = 0.0
    burned_percent: float = 0.0
    circulating_supply: float = 0.0
    contract_age_days: Optional[int] = None # None when the explorer has no history
    creation_date: Optional[datetime] = None


@dataclass(frozen=True)
class FunctionFinding:
    name: str
    reason: str


@dataclass(frozen=True)
class ContractScan:
    """Dangerous function names found in a verified ABI."""
    function_count: int
    critical: List[FunctionFinding] = field(default_factory=list)
    high: List[FunctionFinding] = field(default_factory=list)
    medium: List[FunctionFinding] = field(default_factory=list)
    verified: bool = True

    @property
    def critical_count(self) -> int:
        return len(self.critical)

    @property
    def high_count(self) -> int:
        return len(self.high)

    @property
    def medium_count(self) -> int:
        return len(self.medium)


@dataclass(frozen=True)
class LiquidityInfo:
    """
    Main pool, price and LP-token security.
    safe_percent is the share of LP tokens burned or held by a known locker.
    """
    liquidity_usd: float
    safe_percent: float
    market_cap: float
    price_usd: float
    pair_address: Optional[str] = None
    main_dex: str = "Unknown"
    price_source: str = "DexScreener (aggregated)"
    price_native: float = 0.0
    native_price_usd: Optional[float] = None
    native_in_pool: float = 0.0
    token_in_pool: float = 0.0
    fdv: float = 0.0
    circulating_supply: float = 0.0
    lp_burned_percent: float = 0.0
    lp_locked_percent: float = 0.0

    @property
    def at_risk_percent(self) -> float:
        return max(0.0, 100.0 - self.safe_percent)


@dataclass(frozen=True)
class HolderEntry:
    address: str
    percent: float


@dataclass(frozen=True)
class HolderInfo:
    top1_percent: float
    top10_percent: float
    source: str = "moralis"
    burned_percent: float = 0.0
    top_holders: List[HolderEntry] = field(default_factory=list) # Up to 5, burn addresses excluded

    @property
    def top5_percent(self) -> float:
        return sum(h.percent for h in self.top_holders[:5])


@dataclass(frozen=True)
class LpHolder:
    address: str
    percent: float
    status: str # "BURNED", "LOCKED" or "UNLOCKED"
    tag: str = ""


@dataclass(frozen=True)
class HoneypotInfo:
    """
    Security flags from GoPlus. Taxes are percentages (0-100) or None when the
    API does not know them.
    """
    is_honeypot: bool = False
    buy_tax: Optional[float] = None
    sell_tax: Optional[float] = None
    is_proxy: bool = False
    is_mintable: bool = False
    can_take_back_ownership: bool = False
    owner_can_change_balance: bool = False
    hidden_owner: bool = False
    cannot_buy: bool = False
    cannot_sell_all: bool = False
    transfer_pausable: bool = False
    is_blacklisted: bool = False
    trading_cooldown: bool = False
    is_anti_whale: bool = False
    is_open_source: bool = False
    is_airdrop_scam: bool = False
    lp_holder_count: int = 0
    lp_holders: List[LpHolder] = field(default_factory=list)
    lp_burned_percent: float = 0.0
    lp_locked_percent: float = 0.0
    lp_unlocked_percent: float = 0.0
    issues: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def lp_safe_percent(self) -> float:
        return self.lp_burned_percent + self.lp_locked_percent


@dataclass(frozen=True)
class SentimentInfo:
    """
    Market activity of the main DexScreener pair.
    """
    sentiment_score: int
    sentiment_level: str
    token_name: str = "Unknown"
    token_symbol: str = "Unknown"
    price_change_m5: float = 0.0
    price_change_h1: float = 0.0
    price_change_h6: float = 0.0
    price_change_h24: float = 0.0
    volume_h1: float = 0.0
    volume_h24: float = 0.0
    buys_h1: int = 0
    sells_h1: int = 0
    buys_h24: int = 0
    sells_h24: int = 0
    buy_ratio: Optional[float] = None # Percent of 24h txns that were buys
    volume_activity: str = "LOW"
    websites: List[Dict[str, str]] = field(default_factory=list)
    socials: List[Dict[str, str]] = field(default_factory=list)
    dexscreener_url: str = ""
    pair_address: str = ""
    dex_id: str = ""
    total_pairs: int = 0
