"""Bridge contract gas price fetcher.

Reads the ``gasPrice()`` view of the bridge contract. The contract value is
already in wei and is trusted as-is: no conversion, no clamping.
"""

from typing import Any

from .base import ChainQueryError


class BridgeGasPriceFetcher:
    """Fetcher for the on-chain fallback gas price."""

    async def fetch(self, chain_query: Any) -> int:
        """Query the bridge contract for its gas price.

        :param chain_query: Bridge contract handle exposing an async
            ``functions.gasPrice().call()``.
        :returns: Gas price in wei.
        :raises ChainQueryError: If the handle is missing or the call fails.
        """
        if chain_query is None:
            raise ChainQueryError("Bridge contract is not configured")

        try:
            gas_price = await chain_query.functions.gasPrice().call()
        except Exception as e:  # web3, provider and transport errors alike
            raise ChainQueryError(f"{type(e).__name__}: {e}") from e

        if isinstance(gas_price, bool) or not isinstance(gas_price, int):
            raise ChainQueryError(f"Unexpected gasPrice() result: {gas_price!r}")
        return gas_price
