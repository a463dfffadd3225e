import asyncio
import logging
from typing import Any, Dict, Optional, Tuple

from rugradar.analyzer.price import PriceOracle
from rugradar.analyzer.risk_flags import liquidity_risk
from rugradar.analyzer.values import safe_float
from rugradar.chain.abi import FACTORY_ABI, PAIR_ABI
from rugradar.chain.provider import ProviderPool
from rugradar.chains import BURN_ADDRESSES, ZERO_ADDRESS, ChainProfile
from rugradar.errors import ContractCallError, FetchError
from rugradar.models.signal import SignalName, SignalResult
from rugradar.models.token import LiquidityInfo, TokenInfo
from rugradar.scraper.dex_api import DexAPI

logger = logging.getLogger("Liquidity")


class V2Pool:
    """Reserves of the token / wrapped-native pair on a Uniswap V2 style DEX."""

    def __init__(self, address: str, dex_name: str, native_amount: float, token_amount: float):
        self.address = address
        self.dex_name = dex_name
        self.native_amount = native_amount
        self.token_amount = token_amount


class LiquidityProbe:
    """
    Main pool, USD price, market cap and LP-token security.

    Price comes from DexScreener when it knows the token, otherwise from the
    V2 reserves against the wrapped native coin. LP burned/locked shares can
    only be read from a V2 pair.
    """

    def __init__(self, provider: ProviderPool, dex: DexAPI, price: PriceOracle):
        self.provider = provider
        self.dex = dex
        self.price = price

    async def fetch(self, address: str, chain: ChainProfile,
                    token_info: Optional[TokenInfo] = None) -> SignalResult:
        logger.info(f"Checking liquidity of {address} on {chain.name}")
        decimals = token_info.decimals if token_info else 18

        main_pair = await self._main_pair(address, chain)
        native_price = await self.price.get_native_price(chain)
        pool = await self._v2_pool(address, chain, decimals)

        price_usd = safe_float(main_pair.get("priceUsd")) if main_pair else 0.0
        price_native = safe_float(main_pair.get("priceNative")) if main_pair else 0.0
        dex_liquidity = safe_float((main_pair.get("liquidity") or {}).get("usd")) if main_pair else 0.0
        main_dex = (main_pair.get("dexId") or "Unknown") if main_pair else "Unknown"
        pair_address = main_pair.get("pairAddress") if main_pair else None
        price_source = "DexScreener (aggregated)"

        v2_liquidity = 0.0
        if pool is not None and native_price:
            v2_liquidity = pool.native_amount * native_price * 2

        if price_usd == 0 and pool is not None and pool.token_amount > 0 and native_price:
            price_native = pool.native_amount / pool.token_amount
            price_usd = price_native * native_price
            main_dex = pool.dex_name
            pair_address = pool.address
            price_source = pool.dex_name

        if price_usd == 0:
            return SignalResult.failed(SignalName.LIQUIDITY, "No liquidity pool found")

        total_supply = token_info.total_supply if token_info else 0.0
        circulating = token_info.circulating_supply if token_info else 0.0
        if circulating > 0:
            market_cap = price_usd * circulating
        else:
            market_cap = safe_float(main_pair.get("marketCap")) if main_pair else 0.0
        fdv = price_usd * total_supply if total_supply > 0 else (
            safe_float(main_pair.get("fdv")) if main_pair else 0.0)

        burned, locked = (0.0, 0.0)
        if pool is not None:
            burned, locked = await self._lp_security(chain, pool.address)

        info = LiquidityInfo(
            liquidity_usd=max(dex_liquidity, v2_liquidity),
            safe_percent=burned + locked,
            market_cap=market_cap,
            price_usd=price_usd,
            pair_address=pair_address or (pool.address if pool else None),
            main_dex=main_dex,
            price_source=price_source,
            price_native=price_native,
            native_price_usd=native_price,
            native_in_pool=pool.native_amount if pool else 0.0,
            token_in_pool=pool.token_amount if pool else 0.0,
            fdv=fdv,
            circulating_supply=circulating,
            lp_burned_percent=burned,
            lp_locked_percent=locked,
        )
        return SignalResult.ok(SignalName.LIQUIDITY, info, liquidity_risk(info))

    async def _main_pair(self, address: str, chain: ChainProfile) -> Optional[Dict[str, Any]]:
        try:
            return await self.dex.get_main_pair(address, chain.dexscreener_id)
        except FetchError as e:
            logger.warning(f"DexScreener lookup failed for {address}: {e}")
            return None

    async def _v2_pool(self, address: str, chain: ChainProfile, decimals: int) -> Optional[V2Pool]:
        if not chain.has_dex_factory:
            return None

        factories = [(chain.dex_name, chain.dex_factory), *chain.additional_factories]
        for dex_name, factory in factories:
            try:
                pair = await self.provider.call(chain, factory, FACTORY_ABI, "getPair",
                                                address, chain.wrapped_native)
                if not pair or str(pair).lower() == ZERO_ADDRESS:
                    continue
                token0, reserves = await asyncio.gather(
                    self.provider.call(chain, pair, PAIR_ABI, "token0"),
                    self.provider.call(chain, pair, PAIR_ABI, "getReserves"),
                )
            except ContractCallError as e:
                logger.warning(f"{dex_name} pair lookup failed: {e}")
                continue

            if str(token0).lower() == chain.wrapped_native.lower():
                native_reserve, token_reserve = reserves[0], reserves[1]
            else:
                native_reserve, token_reserve = reserves[1], reserves[0]

            return V2Pool(
                address=str(pair).lower(),
                dex_name=dex_name,
                native_amount=int(native_reserve) / (10 ** chain.native_decimals),
                token_amount=int(token_reserve) / (10 ** decimals),
            )
        return None

    async def _lp_security(self, chain: ChainProfile, pair: str) -> Tuple[float, float]:
        """
        Percent of LP tokens held by burn addresses and by known lockers.
        """
        try:
            lp_supply = int(await self.provider.call(chain, pair, PAIR_ABI, "totalSupply"))
        except ContractCallError as e:
            logger.warning(f"LP supply unreadable for {pair}: {e}")
            return 0.0, 0.0
        if lp_supply <= 0:
            return 0.0, 0.0

        holders = [*BURN_ADDRESSES, *chain.lockers]
        balances = await asyncio.gather(
            *(self.provider.call(chain, pair, PAIR_ABI, "balanceOf", h) for h in holders),
            return_exceptions=True,
        )
        burned = locked = 0
        for i, balance in enumerate(balances):
            if isinstance(balance, Exception):
                continue
            if i < len(BURN_ADDRESSES):
                burned += int(balance)
            else:
                locked += int(balance)

        # Basis points, as the pair reports integer balances
        burned_pct = (burned * 10000 // lp_supply) / 100
        locked_pct = (locked * 10000 // lp_supply) / 100
        return burned_pct, locked_pct
