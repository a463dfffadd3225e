from datetime import datetime, timezone

import pytest

from rugradar.chains import get_chain
from rugradar.errors import FetchError, RevertError
from rugradar.models.report import ScanResult
from rugradar.models.signal import RiskLevel, SignalName, SignalResult
from rugradar.models.token import (
    ContractScan, HolderInfo, HoneypotInfo, LiquidityInfo, OwnerStatus, SentimentInfo, TokenInfo,
)
from rugradar.analyzer.scoring import aggregate

TOKEN = "0x6982508145454ce325ddbe47a25d4ec3d2311933"


class FakeHttp:
    """
    Stands in for HttpClient. routes maps a URL substring to a JSON payload,
    an exception to raise, or a callable(url, params) returning either.
    """

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.calls = []

    async def get_json(self, url, params=None, headers=None):
        self.calls.append((url, params, headers))
        for fragment, response in self.routes.items():
            if fragment in url:
                if callable(response):
                    response = response(url, params)
                if isinstance(response, Exception):
                    raise response
                return response
        raise FetchError(f"no route for {url}")


class FakeProvider:
    """
    Stands in for ProviderPool. responses maps (address, fn_name, *args), all
    lowercased, to a return value or an exception. Unknown calls revert.
    """

    def __init__(self, responses=None):
        self.responses = {self._key(*k): v for k, v in (responses or {}).items()}
        self.calls = []

    @staticmethod
    def _key(address, fn_name, *args):
        return (address.lower(), fn_name, *[a.lower() if isinstance(a, str) else a for a in args])

    async def call(self, chain, address, abi, fn_name, *args):
        key = self._key(address, fn_name, *args)
        self.calls.append(key)
        if key not in self.responses:
            raise RevertError(f"{fn_name}() reverted")
        value = self.responses[key]
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def eth():
    return get_chain("eth")


@pytest.fixture
def token_address():
    return TOKEN


@pytest.fixture
def fake_http():
    return FakeHttp


@pytest.fixture
def fake_provider():
    return FakeProvider


def _clean_payloads():
    return {
        SignalName.TOKEN_INFO: TokenInfo(
            name="Pepe", symbol="PEPE", decimals=18, total_supply=1_000_000.0,
            owner_status=OwnerStatus.RENOUNCED, owner="0x0000000000000000000000000000000000000000",
            circulating_supply=1_000_000.0, contract_age_days=400,
        ),
        SignalName.CONTRACT_SCAN: ContractScan(function_count=20),
        SignalName.LIQUIDITY: LiquidityInfo(
            liquidity_usd=200_000, safe_percent=95, market_cap=5_000_000, price_usd=5.0,
            lp_burned_percent=95,
        ),
        SignalName.HOLDERS: HolderInfo(top1_percent=5, top10_percent=20),
        SignalName.HONEYPOT: HoneypotInfo(buy_tax=2.0, sell_tax=2.0, is_open_source=True),
        SignalName.SENTIMENT: SentimentInfo(sentiment_score=50, sentiment_level="NEUTRAL"),
    }


@pytest.fixture
def clean_signals():
    """
    Factory for a full signal set describing a safe token. Keyword overrides
    replace a signal by name: pass a payload for a successful signal, None for
    a failed one, or a ready SignalResult.
    """

    def build(**overrides):
        signals = {}
        for name, payload in _clean_payloads().items():
            value = overrides.get(name, payload)
            if isinstance(value, SignalResult):
                signals[name] = value
            elif value is None:
                signals[name] = SignalResult.failed(name, "unavailable")
            else:
                signals[name] = SignalResult.ok(name, value, RiskLevel.LOW)
        return signals

    return build


@pytest.fixture
def all_failed():
    return {name: SignalResult.failed(name, "unavailable") for name in SignalName.ALL}


@pytest.fixture
def make_result(clean_signals):
    def build(chain="eth", **overrides):
        signals = clean_signals(**overrides)
        return ScanResult(
            token_address=TOKEN,
            chain=chain,
            signals=signals,
            risk=aggregate(signals),
            timestamp=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )

    return build
