"""GasPriceRefresher: One refresh cycle for one chain.

The oracle is asked first. If it fails for any reason the bridge contract is
asked instead. If both fail the cycle yields nothing and the cached value is
kept. Every source is tried exactly once per cycle; the next scheduled cycle
is the only retry.

Each attempt is captured as a SourceResult so the decision logic branches
on explicit outcomes rather than on nested exception handlers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, TypeVar

from .ChainContext import ChainContext
from .fetchers import (
    BridgeGasPriceFetcher,
    FetcherError,
    OracleGasPrice,
    OracleGasPriceFetcher,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SourceResult(Generic[T]):
    """Outcome of a single source attempt.

    :ivar value: The fetched value when the attempt succeeded.
    :ivar error: The failure when the attempt failed.
    """

    value: T | None = None
    error: FetcherError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    async def attempt(cls, call: Awaitable[T]) -> SourceResult[T]:
        """Await a source call, capturing fetcher failures."""
        try:
            return cls(value=await call)
        except FetcherError as e:
            return cls(error=e)


@dataclass(frozen=True)
class RefreshOutcome:
    """What a refresh cycle learned.

    :ivar gas_price: New gas price in wei, or None to keep the cached one.
    :ivar speeds: New oracle speed table, or None to keep the cached one.
    """

    gas_price: int | None = None
    speeds: dict[str, Any] | None = None


class GasPriceRefresher:
    """Runs the oracle-then-contract refresh cycle.

    :ivar oracle_fetcher: Primary source.
    :ivar contract_fetcher: Fallback source.
    """

    def __init__(
        self,
        oracle_fetcher: OracleGasPriceFetcher | None = None,
        contract_fetcher: BridgeGasPriceFetcher | None = None,
    ) -> None:
        self.oracle_fetcher = oracle_fetcher or OracleGasPriceFetcher()
        self.contract_fetcher = contract_fetcher or BridgeGasPriceFetcher()

    async def refresh_once(self, context: ChainContext) -> RefreshOutcome:
        """Fetch a fresh gas price for a chain.

        Does not touch the chain's cache; the caller applies the outcome.

        :param context: Chain to refresh.
        :returns: The new gas price and speed table, each None when unknown.
        """
        chain = context.chain_id

        oracle: SourceResult[OracleGasPrice] = await SourceResult.attempt(
            self.oracle_fetcher.fetch(context.oracle_url, context.speed_type)
        )
        if oracle.ok:
            logger.debug(
                f"[{chain}] Gas price updated using the oracle: {oracle.value.gas_price}"
            )
            return RefreshOutcome(
                gas_price=oracle.value.gas_price, speeds=oracle.value.speeds
            )

        logger.error(f"[{chain}] Gas Price API is not available. {oracle.error}")

        contract: SourceResult[int] = await SourceResult.attempt(
            self.contract_fetcher.fetch(context.chain_query)
        )
        if contract.ok:
            logger.debug(
                f"[{chain}] Gas price updated using the contracts: {contract.value}"
            )
            return RefreshOutcome(gas_price=contract.value)

        logger.error(
            f"[{chain}] There was a problem getting the gas price from the contract. "
            f"{contract.error}"
        )
        return RefreshOutcome()
