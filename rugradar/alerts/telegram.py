import aiohttp
import asyncio
import html
import logging
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Set, Tuple
from rugradar.alerts.formatting import (
    CATEGORY_LABELS, DISCLAIMER, RECOMMENDATIONS, category_risk, format_age, format_change,
    format_compact, format_small_number, key_findings, risk_emoji, score_bar, short_addr,
)
from rugradar.chains import get_chain, is_valid_address, CHAINS
from rugradar.config import Config
from rugradar.errors import RugRadarError, UnsupportedChainError
from rugradar.models.report import ScanResult
from rugradar.models.signal import RiskLevel, SignalName
from rugradar.models.token import OwnerStatus

logger = logging.getLogger("Telegram")

RULE = "════════════════════════════════"
THIN_RULE = "──────────────────────────────"


def esc(value: Any) -> str:
    return html.escape(str(value), quote=False)


# ================================================================
# MESSAGE FORMATTING
# ================================================================

def format_summary(result: ScanResult) -> str:
    """
    Compact one-screen view sent right after a scan.
    """
    chain = get_chain(result.chain)
    token = result.data(SignalName.TOKEN_INFO)
    liquidity = result.data(SignalName.LIQUIDITY)
    holders = result.data(SignalName.HOLDERS)
    honeypot = result.data(SignalName.HONEYPOT)
    sentiment = result.data(SignalName.SENTIMENT)
    emoji = risk_emoji(result.risk.verdict)

    lines = []
    if token is not None:
        lines.append(f"{emoji} <b>{esc(token.name)}</b> ({esc(token.symbol)})")
    else:
        lines.append(f"{emoji} <b>Token Scan</b>")
    lines.append(f"⛓ | {esc(chain.name)}")
    lines.append("")

    verified = result.signals.get(SignalName.CONTRACT_SCAN)
    lines.append("✅ | Verified Contract" if verified is not None and verified.success else "❌ | Unverified Contract")

    if token is not None:
        ownership = {
            OwnerStatus.RENOUNCED: "Renounced",
            OwnerStatus.ACTIVE: "Active ⚠️",
        }.get(token.owner_status, "Unknown")
        lines.append(f"👤 | Ownership: {ownership}")
        if token.contract_age_days is not None:
            lines.append(f"⏰ | Age: {format_age(token.contract_age_days)}")
    lines.append("")

    if liquidity is not None:
        liq_share = (liquidity.liquidity_usd / liquidity.market_cap * 100) if liquidity.market_cap > 0 else 0
        lines.append(f"💲 | Price: ${format_small_number(liquidity.price_usd)}")
        lines.append(f"💎 | MC: ${liquidity.market_cap:,.0f}")
        lines.append(f"💧 | Liq: ${liquidity.liquidity_usd:,.0f} ({liq_share:.1f}%)")

    if honeypot is not None and honeypot.buy_tax is not None:
        sell = f"{honeypot.sell_tax:.1f}%" if honeypot.sell_tax is not None else "?"
        lines.append(f"💳 | Tax: B: {honeypot.buy_tax:.1f}% | S: {sell}")

    if liquidity is not None:
        if liquidity.lp_burned_percent > 50:
            suffix = "burned"
        elif liquidity.lp_locked_percent > 50:
            suffix = "locked"
        else:
            suffix = "⚠️"
        lines.append(f"🔒 | LP Lock: {liquidity.safe_percent:.1f}% {suffix}")

    if token is not None:
        lines.append(f"🟢 | Supply: {format_compact(token.circulating_supply or token.total_supply)}")

    if holders is not None:
        lines.append(f"👥 | Top 10: {holders.top10_percent:.2f}%")
    lines.append("")

    if sentiment is not None:
        trend = "📈" if sentiment.price_change_h24 >= 0 else "📉"
        lines.append(f"{trend} | 24h: {format_change(sentiment.price_change_h24)}")
        links = []
        if sentiment.websites and sentiment.websites[0].get("url"):
            links.append(f"<a href=\"{esc(sentiment.websites[0]['url'])}\">Website</a>")
        for social in sentiment.socials:
            if social.get("type") == "twitter":
                links.append(f"<a href=\"{esc(social.get('url', ''))}\">𝕏</a>")
            elif social.get("type") == "telegram":
                links.append(f"<a href=\"{esc(social.get('url', ''))}\">Telegram</a>")
        if links:
            lines.append(f"🔗 Links: {' • '.join(links)}")
        lines.append("")

    lines.append(f"<code>{esc(result.token_address)}</code>")
    lines.append("")
    lines.append(f"{emoji} <b>Risk: {result.risk.verdict.value}</b> ({result.risk.points}/100)")
    lines.append(f"[{score_bar(result.risk.points)}]")
    return "\n".join(lines)


def _section(lines: List[str], number: int, title: str):
    lines.append(f"<b>[INFO] {number}. {title}</b>")
    lines.append(THIN_RULE)


def _failed(lines: List[str], result: ScanResult, name: str, fallback: str):
    signal = result.signals.get(name)
    lines.append(f"Error: {esc(signal.error if signal is not None else fallback)}")


def format_full_report(result: ScanResult) -> str:
    """
    Everything the console report shows, as Telegram HTML.
    """
    chain = get_chain(result.chain)
    lines = [
        RULE,
        "🔍 <b>RUG RADAR - Full Report</b>",
        RULE,
        f"Token: <code>{esc(result.token_address)}</code>",
        f"Chain: {esc(chain.name)}",
        f"Time: {esc(result.timestamp.isoformat())}",
        RULE,
        "",
    ]

    # 1. Token info
    _section(lines, 1, "TOKEN INFO")
    token = result.data(SignalName.TOKEN_INFO)
    if token is not None:
        lines.append(f"Name: {esc(token.name)}")
        lines.append(f"Symbol: {esc(token.symbol)}")
        lines.append(f"Decimals: {token.decimals}")
        lines.append(f"Total Supply: {token.total_supply:,.0f}")
        if token.burned_percent > 0:
            lines.append(f"Burned: {token.burned_supply:,.0f} ({token.burned_percent:.2f}%)")
            lines.append(f"Circulating: {token.circulating_supply:,.0f}")
        owner = f"<code>{esc(short_addr(token.owner))}</code>"
        if token.owner_status == OwnerStatus.RENOUNCED:
            owner += " [BURN ADDRESS]"
        lines.append(f"Owner: {owner}")
        lines.append(f"Owner Status: {token.owner_status.value.upper()}")
        if token.contract_age_days is not None:
            created = token.creation_date.date().isoformat() if token.creation_date else "Unknown"
            lines.append(f"Age: {format_age(token.contract_age_days)} (created {created})")
        lines.append(f"Risk: {category_risk(result, SignalName.TOKEN_INFO)}")
    else:
        _failed(lines, result, SignalName.TOKEN_INFO, "Could not fetch token info")
    lines.append("")

    # 2. Contract functions
    _section(lines, 2, "CONTRACT FUNCTIONS")
    scan = result.data(SignalName.CONTRACT_SCAN)
    if scan is not None:
        lines.append("Verified: ✅ Yes")
        lines.append(f"Total Funcs: {scan.function_count}")
        lines.append(f"Critical: {scan.critical_count} issues")
        lines.append(f"High: {scan.high_count} issues")
        lines.append(f"Medium: {scan.medium_count} issues")
        for label, findings in (("Critical Functions", scan.critical), ("High Risk Functions", scan.high)):
            if findings:
                lines.append(f"\n⚠️ {label}:")
                lines.extend(f"  • {esc(f.name)}() - {esc(f.reason)}" for f in findings)
        lines.append(f"Risk: {category_risk(result, SignalName.CONTRACT_SCAN)}")
    else:
        lines.append("Verified: ❌ No")
        lines.append("Note: Unverified contracts are higher risk")
    lines.append("")

    # 3. Liquidity
    _section(lines, 3, "LIQUIDITY &amp; MARKET DATA")
    liq = result.data(SignalName.LIQUIDITY)
    if liq is not None:
        native = chain.native_symbol
        lines.append("<b>PRICE &amp; MARKET DATA:</b>")
        if liq.native_price_usd:
            lines.append(f"{native} Price: ${liq.native_price_usd:,.2f}")
        lines.append(f"Token Price: ${format_small_number(liq.price_usd)}")
        if liq.price_native:
            lines.append(f"Token Price: {format_small_number(liq.price_native)} {native}")
        lines.append(f"Market Cap: ${liq.market_cap:,.0f}")
        lines.append(f"FDV: ${liq.fdv:,.0f}")
        lines.append("\n<b>LIQUIDITY POOL:</b>")
        if liq.pair_address:
            lines.append(f"Pool Address: <code>{esc(short_addr(liq.pair_address))}</code>")
        lines.append(f"DEX: {esc(liq.main_dex)}")
        lines.append(f"{native} in Pool: {liq.native_in_pool:.4f}")
        lines.append(f"Liquidity: ${liq.liquidity_usd:,.0f}")
        lines.append("\n<b>LP TOKEN SECURITY:</b>")
        lines.append(f"LP Burned: {liq.lp_burned_percent:.2f}%")
        lines.append(f"LP Locked: {liq.lp_locked_percent:.2f}%")
        lines.append(f"LP Safe: {liq.safe_percent:.2f}%")
        lines.append(f"LP At Risk: {liq.at_risk_percent:.2f}%")
        lines.append(f"Risk: {category_risk(result, SignalName.LIQUIDITY)}")
    else:
        _failed(lines, result, SignalName.LIQUIDITY, "No liquidity pool found")
    lines.append("")

    # 4. Holders
    _section(lines, 4, "HOLDER DISTRIBUTION")
    holders = result.data(SignalName.HOLDERS)
    if holders is not None:
        lines.append(f"Burned/Dead: {holders.burned_percent:.2f}%")
        lines.append(f"Circulating: {100 - holders.burned_percent:.2f}%")
        lines.append(f"Top 1 Holder: {holders.top1_percent:.2f}%")
        if len(holders.top_holders) >= 5:
            lines.append(f"Top 5 Hold: {holders.top5_percent:.2f}%")
        lines.append(f"Top 10 Hold: {holders.top10_percent:.2f}%")
        if holders.top_holders:
            lines.append("\n<b>TOP 5 HOLDERS:</b>")
            for i, h in enumerate(holders.top_holders, 1):
                lines.append(f"  {i}. <code>{esc(short_addr(h.address))}</code> {h.percent:.2f}%")
        lines.append(f"Risk: {category_risk(result, SignalName.HOLDERS)}")
    else:
        _failed(lines, result, SignalName.HOLDERS, "No holder data")
    lines.append("")

    # 5. Honeypot
    _section(lines, 5, "HONEYPOT DETECTION")
    hp = result.data(SignalName.HONEYPOT)
    if hp is not None:
        yes_no = lambda flag, bad="⚠️": f"{bad} Yes" if flag else "✅ No"
        tax = lambda t: "Unknown" if t is None else f"{t:.2f}%"
        lines.append(f"Status: {'❌ HONEYPOT DETECTED' if hp.is_honeypot else '✅ Not a honeypot'}")
        lines.append(f"Buy Tax: {tax(hp.buy_tax)}")
        lines.append(f"Sell Tax: {tax(hp.sell_tax)}")
        lines.append(f"Open Source: {'✅ Yes' if hp.is_open_source else '❌ No'}")
        lines.append(f"Proxy: {yes_no(hp.is_proxy)}")
        lines.append(f"Mintable: {yes_no(hp.is_mintable)}")
        lines.append(f"Hidden Owner: {yes_no(hp.hidden_owner)}")
        lines.append(f"Can Reclaim: {yes_no(hp.can_take_back_ownership)}")
        lines.append(f"Cannot Buy: {yes_no(hp.cannot_buy, '❌')}")
        lines.append(f"Cannot Sell All: {yes_no(hp.cannot_sell_all, '❌')}")
        lines.append(f"Pausable: {yes_no(hp.transfer_pausable)}")
        lines.append(f"Blacklist: {yes_no(hp.is_blacklisted)}")
        lines.append(f"Anti-Whale: {yes_no(hp.is_anti_whale)}")
        if hp.lp_holders:
            lines.append("\n<b>LP SECURITY:</b>")
            lines.append(f"LP Holders: {hp.lp_holder_count or len(hp.lp_holders)}")
            lines.append(f"LP Safe: {hp.lp_safe_percent:.2f}%")
            for i, lp in enumerate(hp.lp_holders[:3], 1):
                lines.append(f"  {i}. {lp.percent:.2f}% [{lp.status}] {esc(lp.tag)}")
        lines.append(f"Risk: {category_risk(result, SignalName.HONEYPOT)}")
    else:
        _failed(lines, result, SignalName.HONEYPOT, "Token not in security database")
    lines.append("")

    # 6. Sentiment
    _section(lines, 6, "SOCIAL &amp; MARKET SENTIMENT")
    s = result.data(SignalName.SENTIMENT)
    if s is not None:
        lines.append(f"5 min: {format_change(s.price_change_m5)}")
        lines.append(f"1 hour: {format_change(s.price_change_h1)}")
        lines.append(f"6 hours: {format_change(s.price_change_h6)}")
        lines.append(f"24 hours: {format_change(s.price_change_h24)}")
        lines.append(f"Volume 24h: ${s.volume_h24:,.0f} ({s.volume_activity})")
        lines.append(f"Buys 24h: {s.buys_h24}")
        lines.append(f"Sells 24h: {s.sells_h24}")
        lines.append(f"Buy Ratio: {'N/A' if s.buy_ratio is None else f'{s.buy_ratio:.1f}%'}")
        lines.append(f"Score: {s.sentiment_score}/100")
        lines.append(f"Level: {esc(s.sentiment_level)}")
        if s.dexscreener_url:
            lines.append(f"DexScreener: {esc(s.dexscreener_url)}")
        lines.append(f"{esc(chain.explorer_name)}: {esc(chain.token_url(result.token_address))}")
    else:
        _failed(lines, result, SignalName.SENTIMENT, "Token not found on DexScreener")
    lines.append("")

    # Assessment
    emoji = risk_emoji(result.risk.verdict)
    lines += [RULE, "<b>FINAL RISK ASSESSMENT</b>", RULE, "", "<b>RISK BY CATEGORY:</b>"]
    lines.extend(f"{label}: {category_risk(result, name)}" for name, label in CATEGORY_LABELS)
    lines += [
        "",
        RULE,
        f"{emoji} <b>OVERALL RISK: {result.risk.verdict.value}</b>",
        f"<b>SCORE: {result.risk.points}/100</b>",
        f"[{score_bar(result.risk.points)}]",
        RULE,
        "",
        "<b>KEY FINDINGS:</b>",
    ]
    lines.extend(f"[{marker}] {esc(text)}" for marker, text in key_findings(result))
    lines += ["", "<b>RECOMMENDATIONS:</b>", f"{emoji} <b>{RECOMMENDATIONS[result.risk.verdict]}</b>"]
    if result.risk.verdict == RiskLevel.LOW:
        lines.append("Always DYOR - past safety ≠ future safety")
    lines += ["", "<b>DISCLAIMER:</b>", *DISCLAIMER]
    return "\n".join(lines)


def split_message(text: str, limit: int = None) -> List[str]:
    """
    Splits on line boundaries so every chunk stays under the Telegram limit.
    A single line longer than the limit is cut hard.
    """
    limit = limit or Config.TELEGRAM_MAX_MESSAGE
    chunks, current = [], ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


# ================================================================
# KEYBOARDS & COMMANDS
# ================================================================

def summary_keyboard(result: ScanResult) -> Dict[str, Any]:
    chain = get_chain(result.chain)
    address = result.token_address
    keyboard = [
        [
            {"text": "📋 Full Report", "callback_data": f"full_{chain.key}_{address}"},
            {"text": "🔄 Rescan", "callback_data": f"scan_{chain.key}_{address}"},
        ],
        [
            {"text": "📊 DexScreener", "url": chain.dexscreener_url(address)},
            {"text": f"🔍 {chain.explorer_name}", "url": chain.token_url(address)},
        ],
    ]
    sentiment = result.data(SignalName.SENTIMENT)
    if sentiment is not None:
        social_buttons = []
        if sentiment.websites and sentiment.websites[0].get("url"):
            social_buttons.append({"text": "🌐 Website", "url": sentiment.websites[0]["url"]})
        for social in sentiment.socials:
            if len(social_buttons) >= 3 or not social.get("url"):
                continue
            if social.get("type") == "twitter":
                social_buttons.append({"text": "𝕏", "url": social["url"]})
            elif social.get("type") == "telegram":
                social_buttons.append({"text": "💬 TG", "url": social["url"]})
        if social_buttons:
            keyboard.append(social_buttons)
    return {"inline_keyboard": keyboard}


def full_keyboard(result: ScanResult) -> Dict[str, Any]:
    return {"inline_keyboard": [[
        {"text": "📊 Summary", "callback_data": f"summary_{result.chain}_{result.token_address}"},
        {"text": "🔄 Rescan", "callback_data": f"scan_{result.chain}_{result.token_address}"},
    ]]}


def parse_callback(data: str) -> Optional[Tuple[str, str, str]]:
    """
    "full_eth_0xabc..." -> ("full", "eth", "0xabc..."). None for anything else.
    """
    parts = (data or "").split("_")
    if len(parts) != 3 or parts[0] not in ("full", "summary", "scan"):
        return None
    action, chain, address = parts
    if chain not in CHAINS or not is_valid_address(address):
        return None
    return action, chain, address.lower()


def parse_scan_request(text: str) -> Optional[Tuple[str, str]]:
    """
    A pasted address, optionally followed by a chain key or alias.
    Returns (address, chain) or None when the text is not a scan request.
    Raises UnsupportedChainError for an unknown chain.
    """
    parts = (text or "").split()
    if not parts or not is_valid_address(parts[0]):
        return None
    chain = get_chain(parts[1]).key if len(parts) > 1 else Config.DEFAULT_CHAIN
    return parts[0].lower(), chain


START_TEXT = (
    "🔍 <b>RugRadar</b>\n"
    "Your token security scanner.\n\n"
    "Paste any token address to scan, optionally followed by a chain "
    "(e.g. <code>0x... bsc</code>).\n\n"
    "Features:\n"
    "• Honeypot detection\n"
    "• Tax analysis\n"
    "• LP security\n"
    "• Holder analysis\n"
    "• Market sentiment"
)

HELP_TEXT = (
    "<b>How to use:</b>\n"
    "1. Paste a token contract address (and a chain, default {default})\n"
    "2. Get instant summary\n"
    "3. Click \"Full Report\" for details\n\n"
    "<b>Chains:</b> {chains}\n\n"
    "<b>Risk Levels:</b>\n"
    "🟢 LOW - Looks safe\n"
    "🟡 MEDIUM - Be careful\n"
    "🟠 HIGH - Risky\n"
    "🔴 CRITICAL - Avoid"
)


def help_text() -> str:
    return HELP_TEXT.format(default=Config.DEFAULT_CHAIN, chains=", ".join(CHAINS))


# ================================================================
# BOT API
# ================================================================

class TelegramAlert:
    """
    Thin Bot API wrapper. Failures are logged and reported as None, the
    polling loop carries on.
    """

    @staticmethod
    def _url(method: str) -> str:
        return f"{Config.TELEGRAM_API_URL}/bot{Config.TELEGRAM_BOT_TOKEN}/{method}"

    @staticmethod
    async def _post(method: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if not Config.TELEGRAM_ENABLED or not Config.TELEGRAM_BOT_TOKEN:
            return None
        try:
            timeout = aiohttp.ClientTimeout(total=Config.REQUEST_TIMEOUT)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(TelegramAlert._url(method), json=payload) as resp:
                    if resp.status == 200:
                        data = await resp.json()
                        return data.get("result")
                    logger.error(f"Telegram {method} failed: {resp.status} {await resp.text()}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error calling Telegram {method}: {e}")
        return None

    @staticmethod
    async def send_message(chat_id, text: str, reply_markup: Dict[str, Any] = None) -> Optional[int]:
        """
        Sends an HTML message. Returns message_id.
        """
        payload = {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }
        if reply_markup:
            payload["reply_markup"] = reply_markup
        result = await TelegramAlert._post("sendMessage", payload)
        return result.get("message_id") if isinstance(result, dict) else None

    @staticmethod
    async def edit_message(chat_id, message_id: int, text: str, reply_markup: Dict[str, Any] = None):
        payload = {
            "chat_id": chat_id,
            "message_id": message_id,
            "text": text,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }
        if reply_markup:
            payload["reply_markup"] = reply_markup
        return await TelegramAlert._post("editMessageText", payload)

    @staticmethod
    async def answer_callback(callback_id: str):
        # Expired queries fail; nothing to do about it
        await TelegramAlert._post("answerCallbackQuery", {"callback_query_id": callback_id})

    @staticmethod
    async def get_updates(offset: int = 0, timeout: int = 25):
        """
        Long-polls for new updates (messages and button presses).
        Returns Tuple(updates_list, next_offset)
        """
        if not Config.TELEGRAM_ENABLED or not Config.TELEGRAM_BOT_TOKEN:
            return [], offset

        params = {"offset": offset, "timeout": timeout}
        try:
            client_timeout = aiohttp.ClientTimeout(total=timeout + Config.REQUEST_TIMEOUT)
            async with aiohttp.ClientSession(timeout=client_timeout) as session:
                async with session.get(TelegramAlert._url("getUpdates"), params=params) as resp:
                    if resp.status != 200:
                        logger.warning(f"getUpdates returned {resp.status}")
                        return [], offset
                    data = await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"getUpdates failed: {e}")
            return [], offset

        result = data.get("result", [])
        if not result:
            return [], offset

        # Calculate next offset
        return result, result[-1]["update_id"] + 1


# ================================================================
# BOT
# ================================================================

class TelegramBot:
    """
    Long-poll bot: /start, /help, pasted addresses and the inline buttons.
    Recent scans are kept per chat so the Full Report / Summary buttons do
    not rescan.
    """

    def __init__(self, scanner, api=TelegramAlert, cache_size: int = None):
        self.scanner = scanner
        self.api = api
        self.cache_size = cache_size or Config.TELEGRAM_SCAN_CACHE_SIZE
        self.scan_cache: "OrderedDict[str, ScanResult]" = OrderedDict()
        self.offset = 0
        self.running = True
        # Strong refs so in-flight handlers are not garbage collected
        self.tasks: Set[asyncio.Task] = set()

    async def start(self):
        if not Config.TELEGRAM_BOT_TOKEN:
            logger.error("TELEGRAM_BOT_TOKEN not set, bot cannot start")
            return
        logger.info("🤖 RugRadar bot started")
        while self.running:
            try:
                updates, self.offset = await self.api.get_updates(self.offset)
                for update in updates:
                    self.dispatch(update)
            except Exception as e:
                logger.error(f"Polling error: {e}")
                await asyncio.sleep(5)

    def stop(self):
        self.running = False
        logger.info("Stopping bot...")

    def dispatch(self, update: Dict[str, Any]) -> asyncio.Task:
        """Handle an update in its own task so a slow scan never blocks other chats."""
        task = asyncio.ensure_future(self.handle_update(update))
        self.tasks.add(task)
        task.add_done_callback(self._handler_done)
        return task

    def _handler_done(self, task: asyncio.Task):
        self.tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Update handler failed: {error!r}")

    # --- scan cache ---
    def remember(self, chat_id, result: ScanResult):
        key = f"{chat_id}_{result.chain}_{result.token_address}"
        self.scan_cache[key] = result
        self.scan_cache.move_to_end(key)
        while len(self.scan_cache) > self.cache_size:
            self.scan_cache.popitem(last=False)

    def recall(self, chat_id, chain: str, address: str) -> Optional[ScanResult]:
        return self.scan_cache.get(f"{chat_id}_{chain}_{address}")

    # --- dispatch ---
    async def handle_update(self, update: Dict[str, Any]):
        if "callback_query" in update:
            await self.handle_callback(update["callback_query"])
            return

        message = update.get("message") or {}
        text = (message.get("text") or "").strip()
        chat_id = (message.get("chat") or {}).get("id")
        if chat_id is None or not text:
            return

        if text.startswith("/start"):
            await self.api.send_message(chat_id, START_TEXT, {
                "inline_keyboard": [[{"text": "📖 How to Use", "callback_data": "help"}]]
            })
        elif text.startswith("/help"):
            await self.api.send_message(chat_id, help_text())
        else:
            try:
                request = parse_scan_request(text)
            except UnsupportedChainError as e:
                await self.api.send_message(chat_id, f"❌ {esc(e)}\nSupported: {', '.join(CHAINS)}")
                return
            if request is None:
                await self.api.send_message(chat_id, "❌ Invalid address. Paste a 0x... token contract address.")
                return
            address, chain = request
            await self.handle_scan(chat_id, address, chain)

    async def handle_scan(self, chat_id, address: str, chain: str, message_id: int = None):
        if message_id:
            await self.api.edit_message(chat_id, message_id, "🔍 Scanning...")
        else:
            message_id = await self.api.send_message(chat_id, "🔍 Scanning...")

        try:
            result = await self.scanner.scan(address, chain)
        except RugRadarError as e:
            await self._reply(chat_id, message_id, f"❌ Error: {esc(e)}")
            return

        self.remember(chat_id, result)
        await self._reply(chat_id, message_id, format_summary(result), summary_keyboard(result))
        logger.info(f"✓ Scanned: {address} ({chain}) - {result.risk.verdict.value}")

    async def handle_callback(self, query: Dict[str, Any]):
        message = query.get("message") or {}
        chat_id = (message.get("chat") or {}).get("id")
        message_id = message.get("message_id")
        data = query.get("data") or ""

        await self.api.answer_callback(query.get("id"))
        if chat_id is None:
            return

        if data == "help":
            await self.api.send_message(chat_id, help_text())
            return

        parsed = parse_callback(data)
        if parsed is None:
            logger.warning(f"Ignoring unknown callback: {data}")
            return
        action, chain, address = parsed

        if action == "scan":
            await self.handle_scan(chat_id, address, chain, message_id)
            return

        result = self.recall(chat_id, chain, address)
        if result is None:
            # Evicted or bot restarted
            await self.handle_scan(chat_id, address, chain, message_id)
            return

        if action == "summary":
            await self._reply(chat_id, message_id, format_summary(result), summary_keyboard(result))
            return

        chunks = split_message(format_full_report(result))
        if len(chunks) == 1:
            await self._reply(chat_id, message_id, chunks[0], full_keyboard(result))
            return
        await self._reply(chat_id, message_id, chunks[0])
        for chunk in chunks[1:-1]:
            await self.api.send_message(chat_id, chunk)
        await self.api.send_message(chat_id, chunks[-1], full_keyboard(result))

    async def _reply(self, chat_id, message_id: Optional[int], text: str, markup: Dict[str, Any] = None):
        if message_id:
            await self.api.edit_message(chat_id, message_id, text, markup)
        else:
            await self.api.send_message(chat_id, text, markup)
