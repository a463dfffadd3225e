import asyncio

import pytest

from rugradar.analyzer.goplus import GoPlusClient
from rugradar.analyzer.honeypot import HoneypotProbe, classify_lp_holders, parse_security
from rugradar.cache import TTLCache
from rugradar.errors import FetchError
from rugradar.models.signal import RiskLevel, SignalName

PEPE = "0x6982508145454ce325ddbe47a25d4ec3d2311933"

PEPE_SECURITY = {
    "is_honeypot": "0",
    "buy_tax": "0",
    "sell_tax": "0",
    "is_proxy": "0",
    "is_mintable": "0",
    "owner_change_balance": "0",
    "hidden_owner": "0",
    "cannot_buy": "0",
    "cannot_sell_all": "0",
    "is_open_source": "1",
    "is_anti_whale": "0",
    "lp_holder_count": "3",
    "lp_holders": [
        {"address": "0x000000000000000000000000000000000000dead", "percent": "0.9", "is_locked": 0, "tag": ""},
        {"address": "0x663a5c229c09b049e36dcc11a9b0d4a8eb9db214", "percent": "0.07", "is_locked": 1,
         "tag": "UniCrypt"},
        {"address": "0x1111111111111111111111111111111111111111", "percent": "0.03", "is_locked": 0, "tag": ""},
    ],
    "holders": [
        {"address": "0xf977814e90da44bfa03b6295a0616a897441acec", "percent": "0.0437", "is_locked": 0},
    ],
}


def goplus_response(token_data, address=PEPE):
    return {"code": 1, "message": "OK", "result": {address.upper().replace("0X", "0x"): token_data}}


def test_token_security_is_fetched_and_cached(fake_http, eth):
    http = fake_http({"token_security/1": goplus_response(PEPE_SECURITY)})
    client = GoPlusClient(http, TTLCache(60))

    first = asyncio.run(client.get_token_security(PEPE, eth))
    second = asyncio.run(client.get_token_security(PEPE.upper().replace("0X", "0x"), eth))

    assert first["is_open_source"] == "1"
    assert second is first
    assert len(http.calls) == 1
    url, params, _ = http.calls[0]
    assert url.endswith("/token_security/1")
    assert params == {"contract_addresses": PEPE}


@pytest.mark.parametrize("payload,message", [
    ({"code": 2, "message": "rate limited"}, "Security API failed"),
    ({"code": 1, "result": {}}, "Token not in security database"),
    ([], "Security API failed"),
])
def test_token_security_errors(fake_http, eth, payload, message):
    client = GoPlusClient(fake_http({"token_security": payload}), TTLCache(60))
    with pytest.raises(FetchError, match=message):
        asyncio.run(client.get_token_security(PEPE, eth))


def test_lp_holders_are_classified():
    holders, burned, locked, unlocked = classify_lp_holders(PEPE_SECURITY["lp_holders"])
    assert [h.status for h in holders] == ["BURNED", "LOCKED", "UNLOCKED"]
    assert holders[0].tag == "Dead Address"
    assert holders[1].tag == "UniCrypt"
    assert burned == pytest.approx(90.0)
    assert locked == pytest.approx(7.0)
    assert unlocked == pytest.approx(3.0)


def test_dead_prefixed_lp_holder_is_burned():
    holders, burned, _, unlocked = classify_lp_holders([
        {"address": "0xdead000000000000000000000000000000000000", "percent": "0.8"},
        {"address": "0x4444444444444444444444444444444444444444", "percent": "0.2"},
    ])
    assert [h.status for h in holders] == ["BURNED", "UNLOCKED"]
    assert burned == pytest.approx(80.0)
    assert unlocked == pytest.approx(20.0)


def test_lp_holder_tags_mark_burns_and_locks():
    holders, burned, locked, _ = classify_lp_holders([
        {"address": "0x2222222222222222222222222222222222222222", "percent": "0.5", "tag": "Burn wallet"},
        {"address": "0x3333333333333333333333333333333333333333", "percent": "0.5", "tag": "Team Finance Lock"},
    ])
    assert [h.status for h in holders] == ["BURNED", "LOCKED"]
    assert burned == pytest.approx(50.0)
    assert locked == pytest.approx(50.0)


def test_parse_security_defaults():
    info = parse_security({"buy_tax": "", "sell_tax": None, "cannot_buy": 1, "lp_holder_count": None})
    assert info.buy_tax is None
    assert info.sell_tax is None
    assert info.cannot_buy is True
    assert info.is_honeypot is False
    assert info.lp_holder_count == 0
    assert info.issues["critical"] == ["Cannot buy"]


def test_taxes_become_percentages():
    info = parse_security({"buy_tax": "0.05", "sell_tax": "0.6"})
    assert info.buy_tax == pytest.approx(5.0)
    assert info.sell_tax == pytest.approx(60.0)


def test_honeypot_probe_success(fake_http, eth):
    probe = HoneypotProbe(GoPlusClient(fake_http({"token_security": goplus_response(PEPE_SECURITY)})))
    result = asyncio.run(probe.fetch(PEPE, eth))

    assert result.success
    assert result.name == SignalName.HONEYPOT
    assert result.risk == RiskLevel.LOW
    assert result.data.lp_safe_percent == pytest.approx(97.0)
    assert "97.0% LP locked/burned" in result.data.issues["info"]


def test_honeypot_probe_flags_honeypot(fake_http, eth):
    data = {**PEPE_SECURITY, "is_honeypot": "1", "sell_tax": "1"}
    probe = HoneypotProbe(GoPlusClient(fake_http({"token_security": goplus_response(data)})))
    result = asyncio.run(probe.fetch(PEPE, eth))
    assert result.risk == RiskLevel.CRITICAL
    assert result.data.is_honeypot


def test_honeypot_probe_absorbs_api_failure(fake_http, eth):
    probe = HoneypotProbe(GoPlusClient(fake_http({"token_security": FetchError("HTTP 503")})))
    result = asyncio.run(probe.fetch(PEPE, eth))
    assert not result.success
    assert result.risk == RiskLevel.UNKNOWN
    assert "503" in result.error
