from typing import List
from colorama import Fore, Style

from rugradar.alerts.formatting import (
    CATEGORY_LABELS, DISCLAIMER, RECOMMENDATIONS, category_risk, format_age, format_change,
    format_small_number, key_findings, short_addr,
)
from rugradar.chains import get_chain
from rugradar.models.report import ScanResult
from rugradar.models.signal import RiskLevel, SignalName
from rugradar.models.token import OwnerStatus

RISK_COLORS = {
    "CRITICAL": Fore.RED,
    "HIGH": Fore.MAGENTA,
    "MEDIUM": Fore.YELLOW,
    "LOW": Fore.GREEN,
    "VERY BEARISH": Fore.RED,
    "BEARISH": Fore.YELLOW,
    "NEUTRAL": Fore.WHITE,
    "BULLISH": Fore.GREEN,
    "VERY BULLISH": Fore.GREEN,
}

FINDING_COLORS = {"+": Fore.GREEN, "-": Fore.YELLOW, "!": Fore.RED, "!!!": Fore.RED, "i": Fore.CYAN}

WIDTH = 60


class ConsoleReport:
    """
    Plain-terminal rendering of a ScanResult. render() returns the text so it
    can be printed, logged or compared in tests.
    """

    def __init__(self, result: ScanResult):
        self.result = result
        self.chain = get_chain(result.chain)
        self.lines: List[str] = []

    def render(self) -> str:
        self.lines = []
        self._header()
        self._token_info()
        self._contract_scan()
        self._liquidity()
        self._holders()
        self._honeypot()
        self._sentiment()
        self._assessment()
        return "\n".join(self.lines)

    # --- helpers ---
    def _out(self, text: str = ""):
        self.lines.append(text)

    def _section(self, number: int, title: str, name: str):
        signal = self.result.signals.get(name)
        status = "PASS" if signal is not None and signal.success and signal.risk == RiskLevel.LOW else (
            "FAIL" if signal is None or not signal.success else "WARN")
        color = {"PASS": Fore.GREEN, "WARN": Fore.YELLOW, "FAIL": Fore.RED}[status]
        self._out()
        self._out(f"{color}[{status}]{Style.RESET_ALL} {Style.BRIGHT}{number}. {title}{Style.RESET_ALL}")
        self._out("-" * 50)

    def _risk_line(self, name: str):
        label = category_risk(self.result, name)
        self._out(f"   Risk:         {RISK_COLORS.get(label, Fore.WHITE)}{label}{Style.RESET_ALL}")

    def _error(self, name: str):
        signal = self.result.signals.get(name)
        error = signal.error if signal is not None else "Not run"
        self._out(f"   {Fore.RED}Error: {error}{Style.RESET_ALL}")
        self._out("   Risk:  UNKNOWN")

    # --- sections ---
    def _header(self):
        self._out("=" * WIDTH)
        self._out(f"{Style.BRIGHT}   RUG RADAR - Comprehensive Token Security Scan{Style.RESET_ALL}")
        self._out("=" * WIDTH)
        self._out(f"   Token: {self.result.token_address}")
        self._out(f"   Chain: {self.chain.name}")
        self._out(f"   Time:  {self.result.timestamp.isoformat()}")
        self._out("=" * WIDTH)

    def _token_info(self):
        self._section(1, "TOKEN INFO", SignalName.TOKEN_INFO)
        info = self.result.data(SignalName.TOKEN_INFO)
        if info is None:
            return self._error(SignalName.TOKEN_INFO)

        self._out(f"   Name:         {info.name}")
        self._out(f"   Symbol:       {info.symbol}")
        self._out(f"   Decimals:     {info.decimals}")
        self._out(f"   Total Supply: {info.total_supply:,.2f}")
        if info.burned_percent > 0:
            self._out(f"   Burned:       {info.burned_supply:,.2f} ({info.burned_percent:.2f}%)")
            self._out(f"   Circulating:  {info.circulating_supply:,.2f}")
        renounced = " [BURN ADDRESS]" if info.owner_status == OwnerStatus.RENOUNCED else ""
        self._out(f"   Owner:        {info.owner or 'None'}{renounced}")
        self._out(f"   Owner Status: {info.owner_status.value.upper()}")
        if info.contract_age_days is not None:
            created = info.creation_date.date().isoformat() if info.creation_date else "Unknown"
            self._out(f"   Age:          {format_age(info.contract_age_days)} (created {created})")
        self._risk_line(SignalName.TOKEN_INFO)

    def _contract_scan(self):
        self._section(2, "CONTRACT FUNCTIONS", SignalName.CONTRACT_SCAN)
        scan = self.result.data(SignalName.CONTRACT_SCAN)
        if scan is None:
            self._out(f"   Verified:     {Fore.RED}No{Style.RESET_ALL}")
            self._out("   Note:         Unverified contracts are higher risk")
            return self._error(SignalName.CONTRACT_SCAN)

        self._out(f"   Verified:     {Fore.GREEN}Yes{Style.RESET_ALL}")
        self._out(f"   Functions:    {scan.function_count}")
        self._out(f"   Critical:     {scan.critical_count}")
        self._out(f"   High:         {scan.high_count}")
        self._out(f"   Medium:       {scan.medium_count}")
        for label, findings in (("Critical", scan.critical), ("High", scan.high), ("Medium", scan.medium)):
            for finding in findings:
                self._out(f"     [{label}] {finding.name}() - {finding.reason}")
        self._risk_line(SignalName.CONTRACT_SCAN)

    def _liquidity(self):
        self._section(3, "LIQUIDITY & MARKET DATA", SignalName.LIQUIDITY)
        liq = self.result.data(SignalName.LIQUIDITY)
        if liq is None:
            return self._error(SignalName.LIQUIDITY)

        native = self.chain.native_symbol
        if liq.native_price_usd:
            self._out(f"   {native} Price:    ${liq.native_price_usd:,.2f}")
        self._out(f"   Token Price:  ${format_small_number(liq.price_usd)}")
        if liq.price_native:
            self._out(f"   Token Price:  {format_small_number(liq.price_native)} {native}")
        self._out(f"   Market Cap:   ${liq.market_cap:,.0f}")
        self._out(f"   FDV:          ${liq.fdv:,.0f}")
        self._out(f"   Main DEX:     {liq.main_dex} ({liq.price_source})")
        if liq.pair_address:
            self._out(f"   Pool:         {liq.pair_address}")
        if liq.native_in_pool:
            self._out(f"   {native} in Pool:  {liq.native_in_pool:,.4f}")
        self._out(f"   Liquidity:    ${liq.liquidity_usd:,.0f}")
        self._out(f"   LP Burned:    {liq.lp_burned_percent:.2f}%")
        self._out(f"   LP Locked:    {liq.lp_locked_percent:.2f}%")
        self._out(f"   LP Safe:      {liq.safe_percent:.2f}%")
        self._out(f"   LP At Risk:   {liq.at_risk_percent:.2f}%")
        self._risk_line(SignalName.LIQUIDITY)

    def _holders(self):
        self._section(4, "HOLDER DISTRIBUTION", SignalName.HOLDERS)
        holders = self.result.data(SignalName.HOLDERS)
        if holders is None:
            return self._error(SignalName.HOLDERS)

        self._out(f"   Source:       {holders.source}")
        self._out(f"   Burned/Dead:  {holders.burned_percent:.4f}%")
        self._out(f"   Circulating:  {100 - holders.burned_percent:.4f}%")
        self._out(f"   Top 1 Holder: {holders.top1_percent:.4f}%")
        self._out(f"   Top 5 Hold:   {holders.top5_percent:.4f}%")
        self._out(f"   Top 10 Hold:  {holders.top10_percent:.4f}%")
        for i, holder in enumerate(holders.top_holders, 1):
            self._out(f"     {i}. {short_addr(holder.address)}  {holder.percent:.4f}%")
        self._risk_line(SignalName.HOLDERS)

    def _honeypot(self):
        self._section(5, "HONEYPOT DETECTION", SignalName.HONEYPOT)
        hp = self.result.data(SignalName.HONEYPOT)
        if hp is None:
            return self._error(SignalName.HONEYPOT)

        status = f"{Fore.RED}HONEYPOT DETECTED" if hp.is_honeypot else f"{Fore.GREEN}Not a honeypot"
        self._out(f"   Status:       {status}{Style.RESET_ALL}")
        self._out(f"   Buy Tax:      {_tax(hp.buy_tax)}")
        self._out(f"   Sell Tax:     {_tax(hp.sell_tax)}")
        if hp.lp_holders:
            self._out(f"   LP Holders:   {hp.lp_holder_count or len(hp.lp_holders)}")
            self._out(f"   LP Safe:      {hp.lp_safe_percent:.2f}%")
            for i, lp in enumerate(hp.lp_holders[:3], 1):
                self._out(f"     {i}. {lp.percent:.2f}% [{lp.status}] {lp.tag}")
        for category, color in (("critical", Fore.RED), ("high", Fore.MAGENTA),
                                ("medium", Fore.YELLOW), ("info", Fore.CYAN)):
            for issue in hp.issues.get(category, []):
                self._out(f"   {color}[{category.upper()}]{Style.RESET_ALL} {issue}")
        self._risk_line(SignalName.HONEYPOT)

    def _sentiment(self):
        self._section(6, "SOCIAL & MARKET SENTIMENT", SignalName.SENTIMENT)
        s = self.result.data(SignalName.SENTIMENT)
        if s is None:
            return self._error(SignalName.SENTIMENT)

        self._out(f"   5 min:        {format_change(s.price_change_m5)}")
        self._out(f"   1 hour:       {format_change(s.price_change_h1)}")
        self._out(f"   6 hours:      {format_change(s.price_change_h6)}")
        self._out(f"   24 hours:     {format_change(s.price_change_h24)}")
        self._out(f"   Volume 24h:   ${s.volume_h24:,.0f} ({s.volume_activity})")
        self._out(f"   Buys/Sells:   {s.buys_h24}/{s.sells_h24} (24h)")
        self._out(f"   Buy Ratio:    {'N/A' if s.buy_ratio is None else f'{s.buy_ratio:.1f}%'}")
        self._out(f"   Score:        {s.sentiment_score}/100")
        for site in s.websites:
            if site.get("url"):
                self._out(f"   [WEB] {site['url']}")
        for social in s.socials:
            if social.get("type") and social.get("url"):
                self._out(f"   [{social['type'].upper()}] {social['url']}")
        if s.dexscreener_url:
            self._out(f"   DexScreener:  {s.dexscreener_url}")
        self._out(f"   {self.chain.explorer_name}: {self.chain.token_url(self.result.token_address)}")
        self._risk_line(SignalName.SENTIMENT)

    def _assessment(self):
        risk = self.result.risk
        color = RISK_COLORS.get(risk.verdict.value, Fore.WHITE)

        self._out()
        self._out("=" * WIDTH)
        self._out(f"{Style.BRIGHT}   FINAL RISK ASSESSMENT{Style.RESET_ALL}")
        self._out("=" * WIDTH)
        self._out("   +-----------------------+------------+")
        self._out("   | Category              | Risk       |")
        self._out("   +-----------------------+------------+")
        for name, label in CATEGORY_LABELS:
            self._out(f"   | {label:<21} | {category_risk(self.result, name):<10} |")
        self._out("   +-----------------------+------------+")

        filled = min(20, risk.points // 5)
        bar = "█" * filled + "░" * (20 - filled)
        self._out()
        self._out("   +" + "-" * 40 + "+")
        self._out(f"   |  OVERALL RISK: {color}{risk.verdict.value:<24}{Style.RESET_ALL}|")
        self._out(f"   |  SCORE: {risk.points:>3}/100{' ' * 24}|")
        self._out(f"   |  [{color}{bar}{Style.RESET_ALL}]{' ' * 16}|")
        self._out("   +" + "-" * 40 + "+")

        self._out()
        self._out(f"{Style.BRIGHT}   KEY FINDINGS:{Style.RESET_ALL}")
        for marker, text in key_findings(self.result):
            self._out(f"   {FINDING_COLORS.get(marker, '')}[{marker}]{Style.RESET_ALL} {text}")

        self._out()
        self._out(f"{Style.BRIGHT}   RECOMMENDATION:{Style.RESET_ALL}")
        self._out(f"   {color}{RECOMMENDATIONS[risk.verdict]}{Style.RESET_ALL}")
        if risk.verdict == RiskLevel.LOW:
            self._out("   Always DYOR - past safety is not future safety")

        self._out()
        self._out(f"{Style.DIM}   DISCLAIMER:{Style.RESET_ALL}")
        for line in DISCLAIMER:
            self._out(f"{Style.DIM}   {line}{Style.RESET_ALL}")
        self._out("=" * WIDTH)


def _tax(value) -> str:
    return "Unknown" if value is None else f"{value:.2f}%"


def render(result: ScanResult) -> str:
    return ConsoleReport(result).render()


def print_report(result: ScanResult):
    print(render(result))
