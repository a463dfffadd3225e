from aiohttp import web
import logging
from rugradar.config import Config
from rugradar.errors import RugRadarError

logger = logging.getLogger("Server")

SCANNER_KEY = web.AppKey("scanner", object)


async def root_handler(request):
    return web.Response(text="🛡️ RugRadar is Active & Running 24/7!")


async def scan_handler(request):
    """
    GET /scan/{chain}/{address} -> ScanResult as JSON.
    """
    scanner = request.app[SCANNER_KEY]
    chain = request.match_info["chain"]
    address = request.match_info["address"]
    try:
        result = await scanner.scan(address, chain)
    except RugRadarError as e:
        return web.json_response({"error": str(e)}, status=400)
    return web.json_response(result.to_dict())


def create_app(scanner) -> web.Application:
    app = web.Application()
    app[SCANNER_KEY] = scanner
    app.router.add_get('/', root_handler)
    app.router.add_get('/scan/{chain}/{address}', scan_handler)
    return app


async def start_server(scanner, port: int = None) -> web.AppRunner:
    app = create_app(scanner)

    # Render provides PORT environment variable
    port = port or Config.PORT
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, '0.0.0.0', port)

    logger.info(f"🌍 HTTP server started on port {port}")
    await site.start()
    return runner
