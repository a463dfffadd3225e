from dataclasses import dataclass, field, asdict, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict

from rugradar.models.signal import RiskLevel, SignalResult


@dataclass(frozen=True)
class RiskScore:
    """
    Aggregated scan verdict. points is clamped to 0-100; breakdown keeps the
    raw per-signal contributions so the total can be recomputed by hand.
    """
    points: int
    verdict: RiskLevel
    breakdown: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ScanResult:
    token_address: str
    chain: str
    signals: Dict[str, SignalResult]
    risk: RiskScore
    timestamp: datetime

    def signal(self, name: str) -> SignalResult:
        return self.signals[name]

    def data(self, name: str):
        """Payload of a signal, or None when it failed."""
        result = self.signals.get(name)
        return result.data if result is not None and result.success else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token_address": self.token_address,
            "chain": self.chain,
            "risk_score": self.risk.points,
            "risk_level": self.risk.verdict.value,
            "breakdown": dict(self.risk.breakdown),
            "timestamp": self.timestamp.isoformat(),
            "signals": {
                name: {
                    "success": result.success,
                    "risk": result.risk.value,
                    "data": _jsonable(result.data) if result.data is not None else None,
                    "error": result.error,
                }
                for name, result in self.signals.items()
            },
        }


def _jsonable(value: Any) -> Any:
    if is_dataclass(value):
        return _jsonable(asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value
