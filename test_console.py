import pytest

from rugradar.alerts import formatting
from rugradar.alerts.console import ConsoleReport, print_report, render
from rugradar.models.signal import RiskLevel, SignalName, SignalResult
from rugradar.models.token import HoneypotInfo, OwnerStatus, TokenInfo


def test_clean_report(make_result):
    text = render(make_result())
    assert "RUG RADAR - Comprehensive Token Security Scan" in text
    assert "Chain: Ethereum" in text
    assert text.count("[PASS]") == 6
    assert "OVERALL RISK" in text
    assert "SCORE:   0/100" in text
    assert "LOW RISK - Basic checks passed" in text
    assert "Never invest more than you can lose." in text


def test_failed_and_warning_sections(make_result):
    active = TokenInfo(name="Pepe", symbol="PEPE", decimals=18, total_supply=1.0,
                       owner_status=OwnerStatus.ACTIVE, owner="0xabc")
    result = make_result(**{
        SignalName.TOKEN_INFO: SignalResult.ok(SignalName.TOKEN_INFO, active, RiskLevel.MEDIUM),
        SignalName.HOLDERS: None,
    })
    text = render(result)
    assert "[WARN]" in text
    assert "[FAIL]" in text
    assert "Error: unavailable" in text
    assert "Owner Status: ACTIVE" in text


def test_honeypot_report(make_result):
    trap = HoneypotInfo(is_honeypot=True, sell_tax=99.0, buy_tax=0.0,
                        issues={"critical": ["HONEYPOT - Cannot sell"]})
    result = make_result(**{SignalName.HONEYPOT: SignalResult.ok(SignalName.HONEYPOT, trap, RiskLevel.CRITICAL)})
    text = render(result)
    assert "HONEYPOT DETECTED" in text
    assert "[CRITICAL]" in text
    assert "Sell Tax:     99.00%" in text
    assert "EXTREME RISK - DO NOT INVEST" in text


def test_other_chains_render(make_result):
    report = ConsoleReport(make_result(chain="bsc"))
    text = report.render()
    assert "Chain: BNB Smart Chain" in text
    assert "https://bscscan.com/token/" in text
    # Rendering twice gives the same text
    assert report.render() == text


def test_print_report(make_result, capsys):
    print_report(make_result())
    assert "FINAL RISK ASSESSMENT" in capsys.readouterr().out


# --- shared formatting ---

@pytest.mark.parametrize("days,expected", [(None, "Unknown"), (3, "3d"), (45, "1mo"), (400, "1y 1mo")])
def test_format_age(days, expected):
    assert formatting.format_age(days) == expected


@pytest.mark.parametrize("value,expected", [
    (0, "0"),
    (1234.5, "1,234.5"),
    (0.25, "0.25"),
    (0.00000123456789, "0.00000123456"),
])
def test_format_small_number(value, expected):
    assert formatting.format_small_number(value) == expected


def test_compact_and_change():
    assert formatting.format_compact(1_500_000) == "1.5M"
    assert formatting.format_compact(2_000_000_000) == "2.0B"
    assert formatting.format_compact(999) == "999"
    assert formatting.format_change(3.14159) == "+3.14%"
    assert formatting.format_change(-2) == "-2.00%"


def test_score_bar_and_addresses():
    assert formatting.score_bar(35) == "███░░░░░░░"
    assert formatting.score_bar(100) == "█" * 10
    assert formatting.short_addr("0x6982508145454ce325ddbe47a25d4ec3d2311933") == "0x6982...1933"
    assert formatting.short_addr(None) == "Unknown"
    assert formatting.risk_emoji(RiskLevel.UNKNOWN) == "⚪"


def test_category_risk_shows_sentiment_level(make_result):
    result = make_result(**{SignalName.LIQUIDITY: None})
    assert formatting.category_risk(result, SignalName.SENTIMENT) == "NEUTRAL"
    assert formatting.category_risk(result, SignalName.LIQUIDITY) == "UNKNOWN"
    assert formatting.category_risk(result, SignalName.HOLDERS) == "LOW"


def test_key_findings(make_result):
    findings = formatting.key_findings(make_result())
    assert ("+", "Established token (1 years)") in findings
    assert ("+", "Ownership BURNED - no owner control") in findings
    assert ("+", "Good liquidity ($200,000)") in findings
    assert ("+", "Low taxes (Buy: 2.0%, Sell: 2.0%)") in findings
    assert ("i", "Sentiment: NEUTRAL (50/100)") in findings

    unverified = formatting.key_findings(make_result(**{SignalName.CONTRACT_SCAN: None}))
    assert ("!", "Contract source not verified") in unverified
