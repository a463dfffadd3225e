import logging

from rugradar.analyzer.explorer import ExplorerClient
from rugradar.analyzer.risk_flags import contract_scan_risk
from rugradar.chains import ChainProfile
from rugradar.errors import FetchError
from rugradar.models.signal import SignalName, SignalResult
from rugradar.models.token import ContractScan, FunctionFinding

logger = logging.getLogger("ContractScan")

# Substrings of lowercased function names, per family
DANGEROUS_KEYWORDS = {
    "minting": ("mint", "issue", "create", "inflate"),
    "pausing": ("pause", "freeze", "halt", "suspend"),
    "blacklisting": ("blacklist", "blocklist", "ban", "exclude"),
    "fees": ("setfee", "settax", "updatefee", "updatetax"),
}


def scan_functions(function_names) -> ContractScan:
    """
    Matches function names against the keyword families. A name can land in
    more than one bucket.
    """
    names = [n.lower() for n in function_names]
    critical, high, medium = [], [], []

    for func in names:
        if any(k in func for k in DANGEROUS_KEYWORDS["minting"]):
            critical.append(FunctionFinding(func, "Can create new tokens"))
        if any(k in func for k in DANGEROUS_KEYWORDS["pausing"]):
            high.append(FunctionFinding(func, "Can freeze trading"))
        if any(k in func for k in DANGEROUS_KEYWORDS["blacklisting"]):
            high.append(FunctionFinding(func, "Can block wallets"))
        if any(k in func for k in DANGEROUS_KEYWORDS["fees"]):
            medium.append(FunctionFinding(func, "Can change fees"))

    return ContractScan(function_count=len(names), critical=critical, high=high, medium=medium)


class ContractFunctionScan:
    def __init__(self, explorer: ExplorerClient):
        self.explorer = explorer

    async def fetch(self, address: str, chain: ChainProfile) -> SignalResult:
        logger.info(f"Scanning verified ABI of {address} on {chain.explorer_name}")
        try:
            abi = await self.explorer.get_abi(address, chain)
        except FetchError as e:
            logger.warning(f"ABI scan skipped for {address}: {e}")
            return SignalResult.failed(SignalName.CONTRACT_SCAN, str(e))

        functions = [item.get("name") or "" for item in abi
                     if isinstance(item, dict) and item.get("type") == "function"]
        scan = scan_functions(functions)
        return SignalResult.ok(SignalName.CONTRACT_SCAN, scan, contract_scan_risk(scan))
