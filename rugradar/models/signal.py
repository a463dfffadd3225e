from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"
    UNKNOWN = "UNKNOWN"


class SignalName:
    TOKEN_INFO = "token_info"
    CONTRACT_SCAN = "contract_scan"
    LIQUIDITY = "liquidity"
    HOLDERS = "holders"
    HONEYPOT = "honeypot"
    SENTIMENT = "sentiment"

    ALL = (TOKEN_INFO, CONTRACT_SCAN, LIQUIDITY, HOLDERS, HONEYPOT, SENTIMENT)


@dataclass(frozen=True)
class SignalResult:
    """
    Output of one probe: either a typed payload with its categorical risk, or
    a failure reason with risk UNKNOWN. Failures are values, never exceptions.
    """
    name: str
    success: bool
    risk: RiskLevel
    data: Optional[Any] = None
    error: Optional[str] = None

    def __post_init__(self):
        if self.success:
            if self.risk == RiskLevel.UNKNOWN:
                raise ValueError(f"{self.name}: successful signal needs a risk level")
            if self.data is None:
                raise ValueError(f"{self.name}: successful signal needs data")
        else:
            if self.risk != RiskLevel.UNKNOWN:
                raise ValueError(f"{self.name}: failed signal must be UNKNOWN risk")
            if not self.error:
                raise ValueError(f"{self.name}: failed signal needs an error reason")

    @classmethod
    def ok(cls, name: str, data: Any, risk: RiskLevel) -> "SignalResult":
        return cls(name=name, success=True, risk=risk, data=data)

    @classmethod
    def failed(cls, name: str, error: str) -> "SignalResult":
        return cls(name=name, success=False, risk=RiskLevel.UNKNOWN, error=error)
