"""
Exception types for RugRadar.

Only the input errors ever reach a caller of the scanner. Everything below
``FetchError`` and ``ContractCallError`` is raised inside the data-source
clients and turned into a failed ``SignalResult`` by the probe that called them.
"""


class RugRadarError(Exception):
    """Base exception for RugRadar"""
    pass


# ============================================================================
# Input Exceptions
# ============================================================================

class InvalidAddressError(RugRadarError, ValueError):
    """Token address is not 0x followed by 40 hex digits"""
    pass


class UnsupportedChainError(RugRadarError, ValueError):
    """Chain key or alias has no profile"""
    pass


# ============================================================================
# Data Source Exceptions
# ============================================================================

class FetchError(RugRadarError):
    """HTTP API call failed, timed out or returned unusable JSON"""
    pass


class ContractCallError(RugRadarError):
    """Base exception for RPC contract reads"""
    pass


class NetworkError(ContractCallError):
    """RPC endpoint unreachable or timed out"""
    pass


class RevertError(ContractCallError):
    """Call reached the contract but reverted or returned nothing"""
    pass
