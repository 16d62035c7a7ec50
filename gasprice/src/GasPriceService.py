"""GasPriceService: Registry of tracked chains and their refresh loops.

Architecture:
    - One ChainContext, CachedGasPrice and asyncio task per started chain
    - Each task refreshes immediately, then sleeps update_interval after
      every completed cycle, so slow sources stretch the period instead of
      stacking cycles
    - Only a chain's own task writes to its cache; get_price() only reads
    - Starting a chain again cancels that chain's previous task; other
      chains keep running
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Mapping

from .ChainContext import (
    CachedGasPrice,
    ChainContext,
    ChainSettings,
    UnrecognizedChainError,
    check_chain_id,
)
from .ContractUtility import ContractUtility
from .fetchers import BaseFetcher
from .GasPriceOptions import GasPriceRequest, process_gas_price_options
from .GasPriceRefresher import GasPriceRefresher, RefreshOutcome

logger = logging.getLogger(__name__)


def default_chain_query(settings: ChainSettings) -> Any:
    """Build the bridge contract handle for a chain.

    :param settings: Chain settings.
    :returns: AsyncContract, or None when RPC URL or bridge address is
        missing or the contract cannot be built (the fallback source then
        fails every cycle).
    """
    if not settings.rpc_url or not settings.bridge_address:
        logger.warning(
            f"[{settings.chain_id}] No RPC URL or bridge address configured, "
            "contract fallback disabled"
        )
        return None
    try:
        return ContractUtility(settings.rpc_url).bridge_contract(
            settings.bridge_address, settings.bridge_abi_path
        )
    except (OSError, ValueError) as e:
        logger.error(
            f"[{settings.chain_id}] Cannot build bridge contract, "
            f"contract fallback disabled: {e}"
        )
        return None


class GasPriceService:
    """Keeps a fresh gas price for each started chain.

    :ivar settings: Static settings per chain id.
    :ivar refresher: Refresh cycle implementation shared by all chains.
    :ivar contexts: Started chains.
    :ivar caches: Cached gas price per started chain.
    """

    def __init__(
        self,
        settings: Mapping[str, ChainSettings],
        refresher: GasPriceRefresher | None = None,
        chain_query_factory: Callable[[ChainSettings], Any] = default_chain_query,
    ) -> None:
        """Initialize the service.

        :param settings: Settings for each chain that may be started.
        :param refresher: Refresh cycle implementation (default: oracle with
            default bounds, then bridge contract).
        :param chain_query_factory: Builds the bridge contract handle for a
            chain when it is started.
        """
        self.settings = dict(settings)
        self.refresher = refresher or GasPriceRefresher()
        self.chain_query_factory = chain_query_factory
        self.contexts: dict[str, ChainContext] = {}
        self.caches: dict[str, CachedGasPrice] = {}
        self._tasks: dict[str, asyncio.Task] = {}

    def _resolve_settings(self, chain_id: str) -> ChainSettings:
        check_chain_id(chain_id)
        if chain_id not in self.settings:
            raise UnrecognizedChainError(chain_id)
        return self.settings[chain_id]

    def register(self, chain_id: str) -> ChainContext:
        """Build a chain's context and reset its cache to the fallback price.

        Cancels the chain's running refresh loop, if any, but schedules
        nothing.

        :param chain_id: "home" or "foreign".
        :returns: The new context.
        :raises UnrecognizedChainError: For an unknown or unconfigured chain;
            no state is touched in that case.
        """
        settings = self._resolve_settings(chain_id)
        context = ChainContext.from_settings(
            settings, self.chain_query_factory(settings)
        )

        previous = self._tasks.pop(chain_id, None)
        if previous is not None and not previous.done():
            logger.info(f"[{chain_id}] Cancelling previous refresh loop")
            previous.cancel()

        self.contexts[chain_id] = context
        self.caches[chain_id] = CachedGasPrice(context.fallback_gas_price)
        return context

    def start(self, chain_id: str) -> asyncio.Task:
        """Start (or restart) the refresh loop of a chain.

        Must be called from a running event loop. The cache is reset to the
        chain's fallback gas price and the first refresh runs as soon as
        the loop gets control.

        :param chain_id: "home" or "foreign".
        :returns: The refresh task.
        :raises UnrecognizedChainError: For an unknown or unconfigured chain;
            nothing is cancelled or scheduled in that case.
        """
        self._resolve_settings(chain_id)
        loop = asyncio.get_running_loop()
        context = self.register(chain_id)
        cache = self.caches[chain_id]

        task = loop.create_task(
            self._refresh_loop(context, cache), name=f"gas-price-{chain_id}"
        )
        self._tasks[chain_id] = task
        logger.info(
            f"[{chain_id}] Gas price refresh started: oracle={context.oracle_url}, "
            f"speed={context.speed_type}, interval={context.update_interval}s, "
            f"fallback={context.fallback_gas_price}"
        )
        return task

    async def _refresh_loop(self, context: ChainContext, cache: CachedGasPrice) -> None:
        while True:
            try:
                outcome = await self.refresher.refresh_once(context)
            except Exception:
                logger.exception(f"[{context.chain_id}] Unexpected error refreshing gas price")
                outcome = RefreshOutcome()
            cache.apply(outcome)
            await asyncio.sleep(context.update_interval)

    async def refresh(self, chain_id: str) -> int:
        """Run one refresh cycle for a registered chain and apply it.

        :param chain_id: "home" or "foreign".
        :returns: The cached gas price after the cycle.
        :raises UnrecognizedChainError: If the chain has not been registered.
        """
        context = self._context(chain_id)
        cache = self.caches[chain_id]
        outcome = await self.refresher.refresh_once(context)
        cache.apply(outcome)
        return cache.gas_price

    def _context(self, chain_id: str) -> ChainContext:
        check_chain_id(chain_id)
        if chain_id not in self.contexts:
            raise UnrecognizedChainError(chain_id)
        return self.contexts[chain_id]

    def get_price(
        self,
        chain_id: str,
        request: GasPriceRequest | Mapping[str, Any] | None = None,
    ) -> Any:
        """Gas price to use right now for a chain.

        :param chain_id: "home" or "foreign".
        :param request: Optional override, as a GasPriceRequest or a
            ``{"type": "gasPrice"|"speed", "value": ...}`` mapping.
        :returns: Gas price in wei (or the verbatim override value).
        :raises UnrecognizedChainError: If the chain has not been registered.
        """
        self._context(chain_id)
        if request is not None and not isinstance(request, GasPriceRequest):
            request = GasPriceRequest.from_dict(request)
        cache = self.caches[chain_id]
        return process_gas_price_options(request, cache.gas_price, cache.speeds)

    def is_running(self, chain_id: str) -> bool:
        task = self._tasks.get(chain_id)
        return task is not None and not task.done()

    async def stop(self, chain_id: str | None = None) -> None:
        """Cancel the refresh loop of one chain, or of all chains.

        Cached prices stay readable after stopping.
        """
        chain_ids = list(self._tasks) if chain_id is None else [chain_id]
        tasks = [self._tasks.pop(c) for c in chain_ids if c in self._tasks]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def close(self) -> None:
        """Stop all chains and release the shared HTTP client."""
        await self.stop()
        await BaseFetcher.close_shared_client()
