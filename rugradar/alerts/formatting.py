from typing import List, Optional, Tuple
from rugradar.models.report import ScanResult
from rugradar.models.signal import RiskLevel, SignalName
from rugradar.models.token import OwnerStatus

# Shared by the console and Telegram reporters

RISK_EMOJI = {
    RiskLevel.CRITICAL: "🔴",
    RiskLevel.HIGH: "🟠",
    RiskLevel.MEDIUM: "🟡",
    RiskLevel.LOW: "🟢",
}

RECOMMENDATIONS = {
    RiskLevel.CRITICAL: "EXTREME RISK - DO NOT INVEST",
    RiskLevel.HIGH: "HIGH RISK - Significant concerns",
    RiskLevel.MEDIUM: "MEDIUM RISK - Proceed with caution",
    RiskLevel.LOW: "LOW RISK - Basic checks passed",
}

DISCLAIMER = [
    "Technical analysis only. Cannot detect:",
    "• Social engineering scams",
    "• Future contract changes",
    "• Market manipulation",
    "Never invest more than you can lose.",
]

CATEGORY_LABELS = [
    (SignalName.TOKEN_INFO, "Token Info"),
    (SignalName.CONTRACT_SCAN, "Contract"),
    (SignalName.LIQUIDITY, "Liquidity"),
    (SignalName.HOLDERS, "Holders"),
    (SignalName.HONEYPOT, "Honeypot"),
    (SignalName.SENTIMENT, "Sentiment"),
]


def risk_emoji(level: RiskLevel) -> str:
    return RISK_EMOJI.get(level, "⚪")


def short_addr(address: Optional[str]) -> str:
    if not address:
        return "Unknown"
    return f"{address[:6]}...{address[-4:]}"


def format_age(days: Optional[int]) -> str:
    if days is None:
        return "Unknown"
    if days < 30:
        return f"{days}d"
    if days < 365:
        return f"{days // 30}mo"
    return f"{days // 365}y {(days % 365) // 30}mo"


def format_small_number(num: float) -> str:
    """
    Prices: thousands separators above 1, otherwise enough decimals to show
    six significant digits of a tiny price.
    """
    if num == 0:
        return "0"
    if num >= 1:
        return f"{num:,.6f}".rstrip("0").rstrip(".")
    text = f"{num:.18f}".rstrip("0")
    fraction = text.split(".")[1] if "." in text else ""
    if not fraction:
        return "0"
    zeros = len(fraction) - len(fraction.lstrip("0"))
    return f"0.{fraction[:zeros + 6]}".rstrip("0") or "0"


def format_compact(num: float) -> str:
    for size, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K")):
        if num >= size:
            return f"{num / size:.1f}{suffix}"
    return f"{num:,.0f}"


def format_change(value: float) -> str:
    return f"{'+' if value >= 0 else ''}{value:.2f}%"


def score_bar(points: int, width: int = 10) -> str:
    filled = min(width, max(0, points * width // 100))
    return "█" * filled + "░" * (width - filled)


def category_risk(result: ScanResult, name: str) -> str:
    signal = result.signals.get(name)
    if name == SignalName.SENTIMENT and signal is not None and signal.success:
        return signal.data.sentiment_level
    return signal.risk.value if signal is not None else RiskLevel.UNKNOWN.value


def key_findings(result: ScanResult) -> List[Tuple[str, str]]:
    """
    Headline observations as (marker, text). Markers: "+" positive, "-"
    negative, "!" warning, "!!!" honeypot, "i" informational.
    """
    findings = []
    token = result.data(SignalName.TOKEN_INFO)
    scan = result.data(SignalName.CONTRACT_SCAN)
    liquidity = result.data(SignalName.LIQUIDITY)
    holders = result.data(SignalName.HOLDERS)
    honeypot = result.data(SignalName.HONEYPOT)
    sentiment = result.data(SignalName.SENTIMENT)

    if token is not None:
        if token.contract_age_days is not None:
            if token.contract_age_days >= 365:
                findings.append(("+", f"Established token ({token.contract_age_days // 365} years)"))
            elif token.contract_age_days < 7:
                findings.append(("!", f"Very new token ({token.contract_age_days} days)"))
        if token.owner_status == OwnerStatus.RENOUNCED:
            findings.append(("+", "Ownership BURNED - no owner control"))
        elif token.owner_status == OwnerStatus.ACTIVE:
            findings.append(("-", "Owner still active"))

    if scan is not None:
        risky = scan.critical_count + scan.high_count
        if risky == 0:
            findings.append(("+", "No critical functions detected"))
        else:
            findings.append(("!", f"{risky} risky functions found"))
    else:
        findings.append(("!", "Contract source not verified"))

    if liquidity is not None:
        if liquidity.liquidity_usd > 100_000:
            findings.append(("+", f"Good liquidity (${liquidity.liquidity_usd:,.0f})"))
        elif liquidity.liquidity_usd < 10_000:
            findings.append(("-", "Low liquidity"))
        if liquidity.safe_percent >= 80:
            findings.append(("+", f"{liquidity.safe_percent:.1f}% of LP locked/burned"))
        elif liquidity.safe_percent < 50:
            findings.append(("!", f"Only {liquidity.safe_percent:.1f}% LP secured"))

    if holders is not None:
        if holders.burned_percent > 30:
            findings.append(("+", f"{holders.burned_percent:.1f}% of supply burned"))
        if holders.top1_percent > 20:
            findings.append(("-", f"Top holder owns {holders.top1_percent:.1f}% - whale risk"))
        if holders.top10_percent > 70:
            findings.append(("-", f"Top 10 holders own {holders.top10_percent:.1f}% - concentrated"))

    if honeypot is not None:
        if honeypot.is_honeypot:
            findings.append(("!!!", "HONEYPOT DETECTED"))
        else:
            findings.append(("+", "Not a honeypot (verified)"))
        if honeypot.buy_tax is not None and honeypot.sell_tax is not None:
            if honeypot.buy_tax <= 5 and honeypot.sell_tax <= 5:
                findings.append(("+", f"Low taxes (Buy: {honeypot.buy_tax:.1f}%, Sell: {honeypot.sell_tax:.1f}%)"))
            elif honeypot.sell_tax > 20:
                findings.append(("!", f"High sell tax: {honeypot.sell_tax:.1f}%"))

    if sentiment is not None:
        findings.append(("i", f"Sentiment: {sentiment.sentiment_level} ({sentiment.sentiment_score}/100)"))
        if sentiment.websites or sentiment.socials:
            findings.append(("+", "Has website and social media"))

    return findings
