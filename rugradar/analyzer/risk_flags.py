from typing import Dict, List
from rugradar.models.signal import RiskLevel
from rugradar.models.token import (
    TokenInfo, ContractScan, LiquidityInfo, HolderInfo, HoneypotInfo, SentimentInfo, OwnerStatus
)

# Categorical labels for each signal. Shown in reports only; the numeric score
# is computed from the raw payloads by scoring.py.


def token_info_risk(info: TokenInfo) -> RiskLevel:
    return RiskLevel.MEDIUM if info.owner_status == OwnerStatus.ACTIVE else RiskLevel.LOW


def _ladder(critical: int, high: int, medium: int) -> RiskLevel:
    if critical > 0:
        return RiskLevel.CRITICAL
    if high >= 2:
        return RiskLevel.HIGH
    if high > 0 or medium >= 2:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def contract_scan_risk(scan: ContractScan) -> RiskLevel:
    return _ladder(scan.critical_count, scan.high_count, scan.medium_count)


def liquidity_risk(info: LiquidityInfo) -> RiskLevel:
    # HIGH is checked before MEDIUM on purpose; the other order never yields HIGH
    if info.liquidity_usd < 10_000 and info.safe_percent < 50:
        return RiskLevel.CRITICAL
    if info.safe_percent < 50:
        return RiskLevel.HIGH
    if info.liquidity_usd < 50_000 or info.safe_percent < 80:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def holder_risk(info: HolderInfo) -> RiskLevel:
    if info.top1_percent > 30:
        return RiskLevel.CRITICAL
    if info.top1_percent > 20 or info.top10_percent > 70:
        return RiskLevel.HIGH
    if info.top1_percent > 10 or info.top10_percent > 50:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def honeypot_issues(info: HoneypotInfo) -> Dict[str, List[str]]:
    """
    Sorts the GoPlus flags into critical / high / medium / info findings.
    """
    issues = {"critical": [], "high": [], "medium": [], "info": []}
    sell_tax = info.sell_tax

    if info.is_honeypot: issues["critical"].append("HONEYPOT - Cannot sell")
    if info.cannot_buy: issues["critical"].append("Cannot buy")
    if info.cannot_sell_all: issues["critical"].append("Cannot sell all tokens")
    if info.is_airdrop_scam: issues["critical"].append("Flagged as airdrop scam")
    if sell_tax is not None and sell_tax > 50:
        issues["critical"].append(f"Extreme sell tax: {sell_tax:.1f}%")

    if info.owner_can_change_balance: issues["high"].append("Owner can change balances")
    if info.can_take_back_ownership: issues["high"].append("Can reclaim ownership")
    if info.hidden_owner: issues["high"].append("Hidden owner")
    if info.is_mintable: issues["high"].append("Mintable supply")
    if sell_tax is not None and 20 < sell_tax <= 50:
        issues["high"].append(f"High sell tax: {sell_tax:.1f}%")

    if info.is_proxy: issues["medium"].append("Proxy contract (upgradeable)")
    if info.transfer_pausable: issues["medium"].append("Transfers can be paused")
    if info.is_blacklisted: issues["medium"].append("Blacklist function")
    if info.trading_cooldown: issues["medium"].append("Trading cooldown")
    if sell_tax is not None and 10 < sell_tax <= 20:
        issues["medium"].append(f"Moderate sell tax: {sell_tax:.1f}%")

    if info.is_open_source: issues["info"].append("Contract verified")
    if info.is_anti_whale: issues["info"].append("Anti-whale mechanism")

    # LP findings only when GoPlus listed the LP holders
    if info.lp_holders:
        safe = info.lp_safe_percent
        if safe < 20:
            issues["critical"].append(f"Only {safe:.1f}% LP secured - HIGH RUG RISK")
        elif safe < 50:
            issues["high"].append(f"{safe:.1f}% LP secured - some rug risk")
        elif safe >= 80:
            issues["info"].append(f"{safe:.1f}% LP locked/burned")

    return issues


def honeypot_risk(info: HoneypotInfo) -> RiskLevel:
    issues = info.issues or honeypot_issues(info)
    if info.is_honeypot:
        return RiskLevel.CRITICAL
    return _ladder(len(issues.get("critical", [])), len(issues.get("high", [])), len(issues.get("medium", [])))


def sentiment_risk(info: SentimentInfo) -> RiskLevel:
    if info.sentiment_level == "VERY BEARISH":
        return RiskLevel.HIGH
    if info.sentiment_level == "BEARISH":
        return RiskLevel.MEDIUM
    return RiskLevel.LOW
