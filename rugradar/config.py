import os

class Config:
    # --- SCAN TARGET ---
    DEFAULT_CHAIN = os.getenv("RUGRADAR_CHAIN", "eth")

    # --- HTTP ---
    REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "15"))
    MAX_RETRIES = 2 # Only for rate limits (429), timeouts are never retried
    RETRY_DELAY_EXPONENT = 2
    USER_AGENT_ROTATION = True

    # --- RPC ---
    RPC_TIMEOUT = float(os.getenv("RPC_TIMEOUT", "15"))
    PROVIDER_CACHE_TTL = 600 # Rebuild web3 providers every 10 minutes

    # --- DEADLINES ---
    # A single probe may chain several calls (RPC + explorer + DexScreener)
    PROBE_TIMEOUT = float(os.getenv("PROBE_TIMEOUT", "45"))
    SCAN_TIMEOUT = float(os.getenv("SCAN_TIMEOUT", "90"))

    # --- PRICES (CoinGecko, DexScreener fallback) ---
    COINGECKO_API_URL = "https://api.coingecko.com/api/v3"
    PRICE_CACHE_TTL = 60

    # --- MARKET DATA (DexScreener, no key) ---
    DEX_SCREENER_API_URL = "https://api.dexscreener.com/latest/dex"

    # --- EXPLORER (Etherscan family) ---
    ETHERSCAN_API_KEY = os.getenv("ETHERSCAN_API_KEY", "")

    # --- SECURITY (GoPlus) ---
    GOPLUS_API_URL = "https://api.gopluslabs.io/api/v1"
    GOPLUS_KEY = os.getenv("GOPLUS_KEY", "")
    GOPLUS_CACHE_TTL = 60 # Honeypot probe and holder fallback share one response

    # --- ANALYTICS (Moralis) ---
    MORALIS_API_URL = "https://deep-index.moralis.io/api/v2.2"
    MORALIS_API_KEY = os.getenv("MORALIS_API_KEY", "")
    MORALIS_HOLDER_LIMIT = 20

    # --- ALERTS (Telegram) ---
    TELEGRAM_ENABLED = True
    TELEGRAM_API_URL = "https://api.telegram.org"
    TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
    TELEGRAM_MAX_MESSAGE = 4000
    TELEGRAM_SCAN_CACHE_SIZE = 100

    # --- SERVER ---
    PORT = int(os.getenv("PORT", "8080"))

    # --- SYSTEM ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
