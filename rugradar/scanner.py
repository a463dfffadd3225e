import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Dict, Optional

from rugradar.analyzer.contract_scan import ContractFunctionScan
from rugradar.analyzer.explorer import ExplorerClient
from rugradar.analyzer.goplus import GoPlusClient
from rugradar.analyzer.holders import HolderProbe
from rugradar.analyzer.honeypot import HoneypotProbe
from rugradar.analyzer.liquidity import LiquidityProbe
from rugradar.analyzer.moralis import MoralisClient
from rugradar.analyzer.price import PriceOracle
from rugradar.analyzer.scoring import ScoringEngine
from rugradar.analyzer.sentiment import SentimentProbe
from rugradar.analyzer.token_info import TokenInfoProbe
from rugradar.cache import TTLCache
from rugradar.chain.provider import ProviderPool
from rugradar.chains import ChainProfile, get_chain, normalize_address
from rugradar.config import Config
from rugradar.models.report import ScanResult
from rugradar.models.signal import SignalName, SignalResult
from rugradar.scraper.dex_api import DexAPI
from rugradar.scraper.http import HttpClient

logger = logging.getLogger("Scanner")


class RugScanner:
    """
    Runs the six probes for one token and scores the result.

    Probes run concurrently; only liquidity waits for token info (it needs
    decimals and supply). Every probe has its own deadline and the whole scan
    has another. A probe that times out or blows up becomes a failed signal,
    it never takes the others down with it.
    """

    def __init__(self, provider: ProviderPool = None, http: HttpClient = None,
                 price_cache: TTLCache = None, goplus_cache: TTLCache = None,
                 probe_timeout: float = None, scan_timeout: float = None,
                 token_info=None, contract_scan=None, liquidity=None,
                 holders=None, honeypot=None, sentiment=None):
        self.provider = provider or ProviderPool()
        self.http = http or HttpClient()
        self.probe_timeout = probe_timeout if probe_timeout is not None else Config.PROBE_TIMEOUT
        self.scan_timeout = scan_timeout if scan_timeout is not None else Config.SCAN_TIMEOUT

        dex = DexAPI(self.http)
        explorer = ExplorerClient(self.http)
        goplus = GoPlusClient(self.http, goplus_cache)
        price = PriceOracle(self.http, dex, price_cache)

        self.token_info = token_info or TokenInfoProbe(self.provider, explorer)
        self.contract_scan = contract_scan or ContractFunctionScan(explorer)
        self.liquidity = liquidity or LiquidityProbe(self.provider, dex, price)
        self.holders = holders or HolderProbe(MoralisClient(self.http), goplus)
        self.honeypot = honeypot or HoneypotProbe(goplus)
        self.sentiment = sentiment or SentimentProbe(dex)
        self.scoring = ScoringEngine()

    async def scan(self, address: str, chain: str = None) -> ScanResult:
        """
        Raises InvalidAddressError / UnsupportedChainError before any network
        call. Everything after that is reported inside the ScanResult.
        """
        address = normalize_address(address)
        profile = get_chain(chain or Config.DEFAULT_CHAIN)
        logger.info(f"🔎 Scanning {address} on {profile.name}")

        token_task = asyncio.ensure_future(
            self._guard(SignalName.TOKEN_INFO, self.token_info.fetch(address, profile)))
        tasks: Dict[str, asyncio.Future] = {
            SignalName.TOKEN_INFO: token_task,
            SignalName.CONTRACT_SCAN: asyncio.ensure_future(
                self._guard(SignalName.CONTRACT_SCAN, self.contract_scan.fetch(address, profile))),
            SignalName.LIQUIDITY: asyncio.ensure_future(self._liquidity(address, profile, token_task)),
            SignalName.HOLDERS: asyncio.ensure_future(
                self._guard(SignalName.HOLDERS, self.holders.fetch(address, profile))),
            SignalName.HONEYPOT: asyncio.ensure_future(
                self._guard(SignalName.HONEYPOT, self.honeypot.fetch(address, profile))),
            SignalName.SENTIMENT: asyncio.ensure_future(
                self._guard(SignalName.SENTIMENT, self.sentiment.fetch(address, profile))),
        }

        done, pending = await asyncio.wait(list(tasks.values()), timeout=self.scan_timeout)
        if pending:
            logger.warning(f"Scan deadline ({self.scan_timeout:.0f}s) hit with {len(pending)} probe(s) running")
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        signals = {
            name: task.result() if task in done
            else SignalResult.failed(name, f"Scan timed out after {self.scan_timeout:.0f}s")
            for name, task in tasks.items()
        }

        risk = self.scoring.aggregate(signals)
        logger.info(f"Scan complete: {address} scored {risk.points}/100 ({risk.verdict.value})")
        return ScanResult(
            token_address=address,
            chain=profile.key,
            signals=signals,
            risk=risk,
            timestamp=datetime.now(timezone.utc),
        )

    async def _liquidity(self, address: str, chain: ChainProfile,
                         token_task: "asyncio.Future[SignalResult]") -> SignalResult:
        # Shielded so a cancelled liquidity probe leaves token info running
        token_result = await asyncio.shield(token_task)
        token_info = token_result.data if token_result.success else None
        return await self._guard(SignalName.LIQUIDITY, self.liquidity.fetch(address, chain, token_info))

    async def _guard(self, name: str, probe: Awaitable[SignalResult]) -> SignalResult:
        try:
            return await asyncio.wait_for(probe, timeout=self.probe_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{name} probe timed out after {self.probe_timeout:.0f}s")
            return SignalResult.failed(name, f"Timed out after {self.probe_timeout:.0f}s")
        except Exception as e:
            logger.error(f"{name} probe crashed: {e}")
            return SignalResult.failed(name, f"Unexpected error: {e}")
