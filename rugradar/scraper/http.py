import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp

from rugradar.config import Config
from rugradar.errors import FetchError
from rugradar.scraper.anti_block import AntiBlock

logger = logging.getLogger(__name__)


class HttpClient:
    """
    GET-a-JSON-document helper shared by every API client.

    Every request is bounded by Config.REQUEST_TIMEOUT. Rate limits (429) are
    retried with backoff; timeouts, other status codes and undecodable bodies
    raise FetchError straight away.
    """

    def __init__(self, timeout: float = None, max_retries: int = None):
        self.anti_block = AntiBlock()
        self.timeout = timeout if timeout is not None else Config.REQUEST_TIMEOUT
        self.max_retries = max_retries if max_retries is not None else Config.MAX_RETRIES

    async def get_json(self, url: str, params: Optional[Dict[str, Any]] = None,
                       headers: Optional[Dict[str, str]] = None) -> Any:
        request_headers = self.anti_block.get_headers(headers)
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        for attempt in range(self.max_retries + 1):
            try:
                async with aiohttp.ClientSession(timeout=timeout) as session:
                    async with session.get(url, params=params, headers=request_headers) as response:
                        if response.status == 200:
                            text = await response.text()
                            try:
                                return json.loads(text)
                            except ValueError as e:
                                raise FetchError(f"Invalid JSON from {url}: {e}") from e
                        if response.status == 429 and attempt < self.max_retries:
                            logger.warning(f"Rate limited on {url}. Retrying...")
                            retry_after = self.anti_block.parse_retry_after(response.headers.get("Retry-After"))
                            await self.anti_block.backoff(attempt + 1, retry_after)
                            continue
                        raise FetchError(f"{url} returned HTTP {response.status}")
            except asyncio.TimeoutError as e:
                raise FetchError(f"{url} timed out after {self.timeout:.0f}s") from e
            except aiohttp.ClientError as e:
                raise FetchError(f"Request to {url} failed: {e}") from e

        raise FetchError(f"{url} still rate limited after {self.max_retries} retries")
