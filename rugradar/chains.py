import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from rugradar.errors import InvalidAddressError, UnsupportedChainError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Same on every EVM chain
BURN_ADDRESSES = (
    ZERO_ADDRESS,
    "0x000000000000000000000000000000000000dead",
    "0xdead000000000000000042069420694206942069",
    "0x0000000000000000000000000000000000000001",
)

ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


@dataclass(frozen=True)
class ChainProfile:
    """
    Static per-chain constants. Read-only input for the probes.
    """
    key: str
    name: str
    short_name: str
    chain_id: int
    rpc: str
    explorer_name: str
    explorer_url: str
    explorer_api: str
    dex_name: str
    dex_factory: str
    native_symbol: str
    wrapped_native: str
    coingecko_id: str
    goplus_id: str
    dexscreener_id: str
    moralis_id: str
    rpc_backup: Tuple[str, ...] = ()
    native_decimals: int = 18
    additional_factories: Tuple[Tuple[str, str], ...] = ()
    lockers: Tuple[str, ...] = ()

    @property
    def rpc_urls(self) -> List[str]:
        return [self.rpc, *self.rpc_backup]

    @property
    def has_dex_factory(self) -> bool:
        return self.dex_factory.lower() != ZERO_ADDRESS

    def token_url(self, address: str) -> str:
        return f"{self.explorer_url}/token/{address}"

    def dexscreener_url(self, address: str) -> str:
        return f"https://dexscreener.com/{self.dexscreener_id}/{address}"


CHAINS: Dict[str, ChainProfile] = {
    "eth": ChainProfile(
        key="eth", name="Ethereum", short_name="ETH", chain_id=1,
        rpc="https://ethereum-rpc.publicnode.com",
        explorer_name="Etherscan", explorer_url="https://etherscan.io",
        explorer_api="https://api.etherscan.io/v2/api",
        dex_name="Uniswap V2", dex_factory="0x5C69bEe701ef814a2B6a3EDD4B1652CB9cc5aA6f",
        native_symbol="ETH", wrapped_native="0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
        coingecko_id="ethereum",
        goplus_id="1", dexscreener_id="ethereum", moralis_id="eth",
        lockers=(
            "0x663A5C229c09b049E36dCc11a9B0d4a8Eb9db214", # Unicrypt
            "0x71B5759d73262FBb223956913ecF4ecC51057641", # PinkLock
            "0xE2fE530C047f2d85298b07D9333C05737f1435fB", # Team.Finance
            "0xDba68f07d1b7Ca219f78ae8582C213d975c25cAf", # Mudra Locker
            "0x407993575c91ce7643a4d4cCACc9A98c36eE1BBE", # PinkLock V2
            "0x5E5b9bE5fd939c578ABE5800a90C566eeEbA44a5", # Gempad
        ),
    ),
    "bsc": ChainProfile(
        key="bsc", name="BNB Smart Chain", short_name="BSC", chain_id=56,
        rpc="https://bsc-rpc.publicnode.com",
        explorer_name="BscScan", explorer_url="https://bscscan.com",
        explorer_api="https://api.etherscan.io/v2/api",
        dex_name="PancakeSwap V2", dex_factory="0xcA143Ce32Fe78f1f7019d7d551a6402fC5350c73",
        native_symbol="BNB", wrapped_native="0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c",
        coingecko_id="binancecoin",
        goplus_id="56", dexscreener_id="bsc", moralis_id="bsc",
        lockers=(
            "0xc765bddB93b0D1c1A88282BA0fa6B2d00E3e0c83", # PinkLock BSC
            "0x407993575c91ce7643a4d4cCACc9A98c36eE1BBE", # PinkLock V2
            "0xeaEd594B5926A7D5FBBC61985390BaAf936a6b8d", # Mudra BSC
        ),
    ),
    "base": ChainProfile(
        key="base", name="Base", short_name="BASE", chain_id=8453,
        rpc="https://base-rpc.publicnode.com",
        explorer_name="BaseScan", explorer_url="https://basescan.org",
        explorer_api="https://api.etherscan.io/v2/api",
        dex_name="BaseSwap", dex_factory="0xFDa619b6d20975be80A10332cD39b9a4b0FAa8BB",
        native_symbol="ETH", wrapped_native="0x4200000000000000000000000000000000000006",
        coingecko_id="ethereum",
        goplus_id="8453", dexscreener_id="base", moralis_id="base",
    ),
    "polygon": ChainProfile(
        key="polygon", name="Polygon", short_name="MATIC", chain_id=137,
        rpc="https://polygon-bor-rpc.publicnode.com",
        explorer_name="PolygonScan", explorer_url="https://polygonscan.com",
        explorer_api="https://api.etherscan.io/v2/api",
        dex_name="QuickSwap", dex_factory="0x5757371414417b8C6CAad45bAeF941aBc7d3Ab32",
        native_symbol="MATIC", wrapped_native="0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270",
        coingecko_id="matic-network",
        goplus_id="137", dexscreener_id="polygon", moralis_id="polygon",
        lockers=("0xAf07aC755b6fE82dFDbA3b601e9Ef68aC36C0D2C",), # PinkLock Polygon
    ),
    "arbitrum": ChainProfile(
        key="arbitrum", name="Arbitrum One", short_name="ARB", chain_id=42161,
        rpc="https://arbitrum-one-rpc.publicnode.com",
        explorer_name="Arbiscan", explorer_url="https://arbiscan.io",
        explorer_api="https://api.etherscan.io/v2/api",
        dex_name="Camelot", dex_factory="0x6EcCab422D763aC031210895C81787E87B43A652",
        native_symbol="ETH", wrapped_native="0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
        coingecko_id="ethereum",
        goplus_id="42161", dexscreener_id="arbitrum", moralis_id="arbitrum",
    ),
    "avalanche": ChainProfile(
        key="avalanche", name="Avalanche C-Chain", short_name="AVAX", chain_id=43114,
        rpc="https://avalanche-c-chain-rpc.publicnode.com",
        explorer_name="SnowTrace", explorer_url="https://snowtrace.io",
        explorer_api="https://api.etherscan.io/v2/api",
        dex_name="Trader Joe", dex_factory="0x9Ad6C38BE94206cA50bb0d90783181c1A50Ae23e",
        native_symbol="AVAX", wrapped_native="0xB31f66AA3C1e785363F0875A1B74E27b85FD66c7",
        coingecko_id="avalanche-2",
        goplus_id="43114", dexscreener_id="avalanche", moralis_id="avalanche",
    ),
    "optimism": ChainProfile(
        key="optimism", name="Optimism", short_name="OP", chain_id=10,
        rpc="https://optimism-rpc.publicnode.com",
        explorer_name="Optimistic Etherscan", explorer_url="https://optimistic.etherscan.io",
        explorer_api="https://api.etherscan.io/v2/api",
        dex_name="Velodrome", dex_factory="0x25CbdDb98b35ab1FF77413456B31EC81A6B6B746",
        native_symbol="ETH", wrapped_native="0x4200000000000000000000000000000000000006",
        coingecko_id="ethereum",
        goplus_id="10", dexscreener_id="optimism", moralis_id="optimism",
    ),
    "fantom": ChainProfile(
        key="fantom", name="Fantom", short_name="FTM", chain_id=250,
        rpc="https://fantom-rpc.publicnode.com",
        explorer_name="FTMScan", explorer_url="https://ftmscan.com",
        explorer_api="https://api.ftmscan.com/api",
        dex_name="SpookySwap", dex_factory="0x152eE697f2E276fA89E96742e9bB9aB1F2E61bE3",
        native_symbol="FTM", wrapped_native="0x21be370D5312f44cB42ce377BC9b8a0cEF1A4C83",
        coingecko_id="fantom",
        goplus_id="250", dexscreener_id="fantom", moralis_id="fantom",
    ),
    "cronos": ChainProfile(
        key="cronos", name="Cronos", short_name="CRO", chain_id=25,
        rpc="https://cronos-evm-rpc.publicnode.com",
        explorer_name="CronoScan", explorer_url="https://cronoscan.com",
        explorer_api="https://api.cronoscan.com/api",
        dex_name="VVS Finance", dex_factory="0x3B44B2a187a7b3824131F8db5a74194D0a42Fc15",
        native_symbol="CRO", wrapped_native="0x5C7F8A570d578ED84E63fdFA7b1eE72dEae1AE23",
        coingecko_id="crypto-com-chain",
        goplus_id="25", dexscreener_id="cronos", moralis_id="cronos",
    ),
    "linea": ChainProfile(
        key="linea", name="Linea", short_name="LINEA", chain_id=59144,
        rpc="https://linea-rpc.publicnode.com",
        explorer_name="LineaScan", explorer_url="https://lineascan.build",
        explorer_api="https://api.etherscan.io/v2/api",
        dex_name="SyncSwap", dex_factory="0x37BAc764494c8db4e54BDE72f6965beA9fa0AC2d",
        native_symbol="ETH", wrapped_native="0xe5D7C2a44FfDDf6b295A15c148167daaAf5Cf34f",
        coingecko_id="ethereum",
        goplus_id="59144", dexscreener_id="linea", moralis_id="linea",
    ),
    "monad": ChainProfile(
        key="monad", name="Monad", short_name="MONAD", chain_id=143,
        rpc="https://monad-mainnet.drpc.org",
        rpc_backup=("https://rpc2.monad.xyz",),
        explorer_name="Monadscan", explorer_url="https://monadscan.com",
        explorer_api="https://api.etherscan.io/v2/api",
        dex_name="Pinot Finance", dex_factory="0x6B7dD9D985BB9Cc42D01E6D9d1E6Ea3c082E61C4",
        additional_factories=(("Nad.fun", "0x39314025E1f0E2D430b65fb7d2A4a2D4Fd740576"),),
        native_symbol="MON", wrapped_native="0xB744F5CDb792d8187640214C4A1c9aCE29af7777",
        coingecko_id="monad",
        goplus_id="143", dexscreener_id="monad", moralis_id="monad",
    ),
    "abstract": ChainProfile(
        key="abstract", name="Abstract", short_name="ABS", chain_id=2741,
        rpc="https://api.mainnet.abs.xyz",
        explorer_name="Abstract Explorer", explorer_url="https://explorer.abs.xyz",
        explorer_api="https://api.etherscan.io/v2/api",
        dex_name="Abstract DEX", dex_factory=ZERO_ADDRESS, # No canonical V2 factory yet
        native_symbol="ETH", wrapped_native=ZERO_ADDRESS,
        coingecko_id="ethereum",
        goplus_id="2741", dexscreener_id="abstract", moralis_id="abstract",
    ),
}

ALIASES = {
    "ethereum": "eth",
    "binance": "bsc",
    "bnb": "bsc",
    "poly": "polygon",
    "matic": "polygon",
    "arb": "arbitrum",
    "avax": "avalanche",
    "op": "optimism",
    "ftm": "fantom",
    "cro": "cronos",
    "mon": "monad",
    "abs": "abstract",
}


def get_chain(chain_key: str) -> ChainProfile:
    """Resolve a chain key or alias (case-insensitive) to its profile."""
    key = (chain_key or "").strip().lower()
    key = ALIASES.get(key, key)
    profile = CHAINS.get(key)
    if profile is None:
        raise UnsupportedChainError(f"Unsupported chain: {chain_key!r}")
    return profile


def supported_chains() -> List[Tuple[str, str, str]]:
    return [(p.key, p.name, p.short_name) for p in CHAINS.values()]


def normalize_address(address: Optional[str]) -> str:
    """Validate a 20-byte hex address and return it lowercased."""
    candidate = (address or "").strip()
    if not ADDRESS_RE.match(candidate):
        raise InvalidAddressError(f"Invalid token address: {address!r}")
    return candidate.lower()


def is_valid_address(address: Optional[str]) -> bool:
    return bool(ADDRESS_RE.match((address or "").strip()))


def is_burn_address(address: Optional[str]) -> bool:
    addr = (address or "").lower()
    return addr in BURN_ADDRESSES
