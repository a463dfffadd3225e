import argparse
import asyncio
import json
import logging
import sys
import colorama
from colorama import Fore, Style

from rugradar.alerts.console import print_report
from rugradar.alerts.telegram import TelegramBot
from rugradar.chains import supported_chains
from rugradar.config import Config
from rugradar.errors import RugRadarError
from rugradar.scanner import RugScanner
from rugradar.server import start_server

logger = logging.getLogger("Main")

EXIT_INVALID_INPUT = 2


def setup_logging(level: str = None):
    logging.basicConfig(
        level=getattr(logging, (level or Config.LOG_LEVEL).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rugradar", description="Token rug-pull risk scanner")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING (default: $LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    scan = sub.add_parser("scan", help="Scan one token and print the report")
    scan.add_argument("address", help="Token contract address (0x + 40 hex)")
    scan.add_argument("--chain", default=Config.DEFAULT_CHAIN, help="Chain key or alias (default: %(default)s)")
    scan.add_argument("--json", action="store_true", help="Print the raw result as JSON")

    sub.add_parser("bot", help="Run the Telegram bot (with the HTTP server for keep-alive)")
    serve = sub.add_parser("serve", help="Run the HTTP scan endpoint")
    serve.add_argument("--port", type=int, default=None)
    sub.add_parser("chains", help="List supported chains")
    return parser


async def run_scan(address: str, chain: str, as_json: bool) -> int:
    scanner = RugScanner()
    try:
        result = await scanner.scan(address, chain)
    except RugRadarError as e:
        print(f"{Fore.RED}Error: {e}{Style.RESET_ALL}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_report(result)
    return 0


async def run_bot() -> int:
    scanner = RugScanner()
    runner = await start_server(scanner)
    bot = TelegramBot(scanner)
    try:
        await bot.start()
    finally:
        await runner.cleanup()
    return 0


async def run_server(port: int = None) -> int:
    runner = await start_server(RugScanner(), port)
    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        await runner.cleanup()


def print_chains():
    print(f"{Style.BRIGHT}Supported chains:{Style.RESET_ALL}")
    for key, name, short in supported_chains():
        print(f"  {Fore.CYAN}{key:<10}{Style.RESET_ALL} {name} ({short})")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    # Initialize Colorama
    colorama.init(autoreset=True)

    # Windows selector loop policy fix
    if sys.platform == 'win32':
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

    try:
        if args.command == "scan":
            return asyncio.run(run_scan(args.address, args.chain, args.json))
        if args.command == "bot":
            return asyncio.run(run_bot())
        if args.command == "serve":
            return asyncio.run(run_server(args.port))
        if args.command == "chains":
            print_chains()
            return 0
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
