import dataclasses

import pytest

from rugradar.analyzer import risk_flags
from rugradar.models.signal import RiskLevel
from rugradar.models.token import (
    ContractScan, FunctionFinding, HolderInfo, HoneypotInfo, LiquidityInfo, LpHolder, OwnerStatus,
    SentimentInfo, TokenInfo,
)


def test_token_info_risk_follows_owner():
    info = TokenInfo(name="T", symbol="T", decimals=18, total_supply=1.0, owner_status=OwnerStatus.ACTIVE)
    assert risk_flags.token_info_risk(info) == RiskLevel.MEDIUM
    for status in (OwnerStatus.RENOUNCED, OwnerStatus.NO_OWNER_FUNCTION):
        assert risk_flags.token_info_risk(dataclasses.replace(info, owner_status=status)) == RiskLevel.LOW


@pytest.mark.parametrize("critical,high,medium,expected", [
    (1, 0, 0, RiskLevel.CRITICAL),
    (0, 2, 0, RiskLevel.HIGH),
    (0, 1, 0, RiskLevel.MEDIUM),
    (0, 0, 2, RiskLevel.MEDIUM),
    (0, 0, 1, RiskLevel.LOW),
    (0, 0, 0, RiskLevel.LOW),
])
def test_contract_scan_ladder(critical, high, medium, expected):
    scan = ContractScan(
        function_count=5,
        critical=[FunctionFinding("mint", "x")] * critical,
        high=[FunctionFinding("pause", "x")] * high,
        medium=[FunctionFinding("setfee", "x")] * medium,
    )
    assert risk_flags.contract_scan_risk(scan) == expected


@pytest.mark.parametrize("usd,safe,expected", [
    (5_000, 10, RiskLevel.CRITICAL),
    (20_000, 10, RiskLevel.HIGH),
    (500_000, 49, RiskLevel.HIGH),
    (100_000, 30, RiskLevel.HIGH),
    (20_000, 90, RiskLevel.MEDIUM),
    (500_000, 60, RiskLevel.MEDIUM),
    (500_000, 80, RiskLevel.LOW),
])
def test_liquidity_ladder(usd, safe, expected):
    info = LiquidityInfo(liquidity_usd=usd, safe_percent=safe, market_cap=0, price_usd=1.0)
    assert risk_flags.liquidity_risk(info) == expected


@pytest.mark.parametrize("top1,top10,expected", [
    (31, 40, RiskLevel.CRITICAL),
    (21, 40, RiskLevel.HIGH),
    (5, 71, RiskLevel.HIGH),
    (11, 40, RiskLevel.MEDIUM),
    (5, 51, RiskLevel.MEDIUM),
    (10, 50, RiskLevel.LOW),
])
def test_holder_ladder(top1, top10, expected):
    assert risk_flags.holder_risk(HolderInfo(top1_percent=top1, top10_percent=top10)) == expected


def test_honeypot_issues_are_categorised():
    info = HoneypotInfo(
        is_honeypot=True, sell_tax=30.0, buy_tax=0.0, is_proxy=True, hidden_owner=True,
        is_open_source=True, is_anti_whale=True,
    )
    issues = risk_flags.honeypot_issues(info)
    assert issues["critical"] == ["HONEYPOT - Cannot sell"]
    assert issues["high"] == ["Hidden owner", "High sell tax: 30.0%"]
    assert issues["medium"] == ["Proxy contract (upgradeable)"]
    assert issues["info"] == ["Contract verified", "Anti-whale mechanism"]


@pytest.mark.parametrize("sell_tax,category", [(60.0, "critical"), (25.0, "high"), (15.0, "medium")])
def test_sell_tax_issue_bands(sell_tax, category):
    issues = risk_flags.honeypot_issues(HoneypotInfo(sell_tax=sell_tax))
    assert len(issues[category]) == 1
    assert "sell tax" in issues[category][0]


def test_lp_findings_need_known_lp_holders():
    unknown = HoneypotInfo(lp_burned_percent=0.0)
    assert not any("LP" in i for bucket in risk_flags.honeypot_issues(unknown).values() for i in bucket)

    holders = [LpHolder("0xabc", 10.0, "UNLOCKED")]
    exposed = HoneypotInfo(lp_holders=holders, lp_unlocked_percent=100.0)
    assert "HIGH RUG RISK" in risk_flags.honeypot_issues(exposed)["critical"][0]

    partly = HoneypotInfo(lp_holders=holders, lp_locked_percent=30.0)
    assert risk_flags.honeypot_issues(partly)["high"] == ["30.0% LP secured - some rug risk"]

    secured = HoneypotInfo(lp_holders=holders, lp_burned_percent=90.0)
    assert risk_flags.honeypot_issues(secured)["info"] == ["90.0% LP locked/burned"]


def test_honeypot_risk_ladder():
    assert risk_flags.honeypot_risk(HoneypotInfo(is_honeypot=True)) == RiskLevel.CRITICAL
    assert risk_flags.honeypot_risk(HoneypotInfo(hidden_owner=True, is_mintable=True)) == RiskLevel.HIGH
    assert risk_flags.honeypot_risk(HoneypotInfo(hidden_owner=True)) == RiskLevel.MEDIUM
    assert risk_flags.honeypot_risk(HoneypotInfo(is_proxy=True, trading_cooldown=True)) == RiskLevel.MEDIUM
    assert risk_flags.honeypot_risk(HoneypotInfo(is_proxy=True)) == RiskLevel.LOW
    assert risk_flags.honeypot_risk(HoneypotInfo(is_open_source=True)) == RiskLevel.LOW


@pytest.mark.parametrize("level,expected", [
    ("VERY BEARISH", RiskLevel.HIGH),
    ("BEARISH", RiskLevel.MEDIUM),
    ("NEUTRAL", RiskLevel.LOW),
    ("VERY BULLISH", RiskLevel.LOW),
])
def test_sentiment_risk(level, expected):
    assert risk_flags.sentiment_risk(SentimentInfo(sentiment_score=50, sentiment_level=level)) == expected
