import logging
from typing import Dict, Mapping, Optional
from rugradar.models.report import RiskScore
from rugradar.models.signal import RiskLevel, SignalName, SignalResult
from rugradar.models.token import (
    TokenInfo, ContractScan, LiquidityInfo, HolderInfo, HoneypotInfo, OwnerStatus
)

logger = logging.getLogger("Scoring")

# Penalties for a signal that could not be fetched at all
FAILED_CONTRACT_SCAN = 15 # Unverified source is a red flag on its own
FAILED_LIQUIDITY = 20 # No pool found

MAX_SCORE = 100


class ScoringEngine:
    """
    Folds the six signal results into one 0-100 risk score.

    Pure and synchronous: only successful payloads add points, failures add
    their fixed penalty (or nothing), and the sentiment signal never counts.
    """

    def aggregate(self, signals: Mapping[str, SignalResult]) -> RiskScore:
        breakdown: Dict[str, int] = {
            SignalName.TOKEN_INFO: self._score_token_info(self._data(signals, SignalName.TOKEN_INFO)),
            SignalName.CONTRACT_SCAN: self._score_contract_scan(self._data(signals, SignalName.CONTRACT_SCAN)),
            SignalName.LIQUIDITY: self._score_liquidity(self._data(signals, SignalName.LIQUIDITY)),
            SignalName.HOLDERS: self._score_holders(self._data(signals, SignalName.HOLDERS)),
            SignalName.HONEYPOT: self._score_honeypot(self._data(signals, SignalName.HONEYPOT)),
        }

        total = sum(breakdown.values())
        points = max(0, min(MAX_SCORE, total))
        if total > MAX_SCORE:
            logger.debug(f"Raw score {total} clamped to {MAX_SCORE}")

        return RiskScore(points=points, verdict=verdict_for(points), breakdown=breakdown)

    @staticmethod
    def _data(signals: Mapping[str, SignalResult], name: str):
        # A missing key counts as a failed signal
        result = signals.get(name)
        if result is None or not result.success:
            return None
        return result.data

    def _score_token_info(self, info: Optional[TokenInfo]) -> int:
        if info is None:
            return 0
        score = 0
        if info.owner_status == OwnerStatus.ACTIVE:
            score += 15
        if info.contract_age_days is not None:
            if info.contract_age_days < 7:
                score += 10
            elif info.contract_age_days < 30:
                score += 5
        return score

    def _score_contract_scan(self, scan: Optional[ContractScan]) -> int:
        if scan is None:
            return FAILED_CONTRACT_SCAN
        return scan.critical_count * 10 + scan.high_count * 5 + scan.medium_count * 2

    def _score_liquidity(self, info: Optional[LiquidityInfo]) -> int:
        if info is None:
            return FAILED_LIQUIDITY
        score = 0
        if info.liquidity_usd < 1_000:
            score += 15
        elif info.liquidity_usd < 10_000:
            score += 10
        elif info.liquidity_usd < 50_000:
            score += 5

        if info.safe_percent < 20:
            score += 10
        elif info.safe_percent < 50:
            score += 7
        elif info.safe_percent < 80:
            score += 3
        return score

    def _score_holders(self, info: Optional[HolderInfo]) -> int:
        if info is None:
            return 0
        score = 0
        if info.top1_percent > 30:
            score += 15
        elif info.top1_percent > 20:
            score += 10
        elif info.top1_percent > 10:
            score += 5

        if info.top10_percent > 70:
            score += 10
        elif info.top10_percent > 50:
            score += 5
        return score

    def _score_honeypot(self, info: Optional[HoneypotInfo]) -> int:
        if info is None:
            return 0
        score = 0
        if info.is_honeypot: score += 50
        if info.cannot_buy: score += 20
        if info.cannot_sell_all: score += 20
        if info.owner_can_change_balance: score += 15
        if info.hidden_owner: score += 10
        if info.can_take_back_ownership: score += 10

        sell_tax = info.sell_tax
        if sell_tax is not None:
            if sell_tax > 50:
                score += 25
            elif sell_tax > 20:
                score += 10
            elif sell_tax > 10:
                score += 5
        return score


def verdict_for(points: int) -> RiskLevel:
    if points >= 75:
        return RiskLevel.CRITICAL
    if points >= 50:
        return RiskLevel.HIGH
    if points >= 25:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


_engine = ScoringEngine()


def aggregate(signals: Mapping[str, SignalResult]) -> RiskScore:
    return _engine.aggregate(signals)
