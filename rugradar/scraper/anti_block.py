import asyncio
import random
import logging
from typing import Optional

from rugradar.config import Config

logger = logging.getLogger(__name__)

# Longest single wait between rate-limited attempts
MAX_BACKOFF = 30.0


class AntiBlock:
    """Request pacing for the public JSON APIs (DexScreener, GoPlus, CoinGecko)."""

    def __init__(self):
        # Public APIs throttle blank or library user agents harder
        self.user_agents = [
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_4) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
            "Mozilla/5.0 (X11; Linux x86_64; rv:125.0) Gecko/20100101 Firefox/125.0",
        ]

    def pick_agent(self) -> str:
        if not Config.USER_AGENT_ROTATION:
            return self.user_agents[0]
        return random.choice(self.user_agents)

    def get_headers(self, extra: dict = None) -> dict:
        """
        JSON request headers. Per-API headers (API keys) win over the defaults.
        """
        headers = {"Accept": "application/json", "User-Agent": self.pick_agent()}
        headers.update(extra or {})
        return headers

    @staticmethod
    def parse_retry_after(value: Optional[str]) -> Optional[float]:
        # Only the delta-seconds form; HTTP-date values fall back to the exponent
        try:
            return max(0.0, float(value))
        except (TypeError, ValueError):
            return None

    async def backoff(self, attempt: int, retry_after: Optional[float] = None):
        if retry_after is not None:
            delay = retry_after
        else:
            delay = Config.RETRY_DELAY_EXPONENT ** attempt + random.uniform(0, 1)
        delay = min(delay, MAX_BACKOFF)
        logger.warning(f"Rate limited, waiting {delay:.1f}s before attempt {attempt + 1}")
        await asyncio.sleep(delay)
