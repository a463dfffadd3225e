import asyncio

from aiohttp import test_utils

from rugradar.chains import get_chain, normalize_address
from rugradar.server import create_app


class StubScanner:
    def __init__(self, result):
        self.result = result
        self.calls = []

    async def scan(self, address, chain=None):
        # Same input checks as RugScanner
        normalize_address(address)
        get_chain(chain)
        self.calls.append((address, chain))
        return self.result


async def _get(app, path):
    async with test_utils.TestClient(test_utils.TestServer(app)) as client:
        resp = await client.get(path)
        if resp.content_type == "application/json":
            return resp.status, await resp.json()
        return resp.status, await resp.text()


def test_keep_alive_root(make_result):
    status, body = asyncio.run(_get(create_app(StubScanner(make_result())), "/"))
    assert status == 200
    assert "RugRadar is Active" in body


def test_scan_endpoint(make_result):
    scanner = StubScanner(make_result())
    token = "0x6982508145454ce325ddbe47a25d4ec3d2311933"
    status, body = asyncio.run(_get(create_app(scanner), f"/scan/eth/{token}"))

    assert status == 200
    assert scanner.calls == [(token, "eth")]
    assert body["risk_level"] == "LOW"
    assert body["risk_score"] == 0
    assert body["signals"]["liquidity"]["data"]["liquidity_usd"] == 200_000
    assert body["timestamp"].startswith("2026-01-01")


def test_bad_input_is_a_400(make_result):
    scanner = StubScanner(make_result())
    status, body = asyncio.run(_get(create_app(scanner), "/scan/eth/0x123"))
    assert status == 400
    assert "Invalid token address" in body["error"]

    status, body = asyncio.run(_get(create_app(scanner), "/scan/solana/0x6982508145454ce325ddbe47a25d4ec3d2311933"))
    assert status == 400
    assert "Unsupported chain" in body["error"]
    assert scanner.calls == []
