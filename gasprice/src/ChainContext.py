"""ChainContext: Per-chain configuration and cached gas price state.

Each tracked chain ("home" or "foreign") has:

- ChainSettings: static configuration read from environment variables,
  prefixed with ``HOME_`` or ``FOREIGN_``.
- ChainContext: the immutable runtime view of those settings, holding the
  bridge contract handle used for fallback queries.
- CachedGasPrice: the last known gas price and oracle speed table, written
  only by that chain's refresh task.

.. code-block:: python

    >>> settings = ChainSettings.from_env("home", {"HOME_GAS_PRICE_FALLBACK": "5000000000"})
    >>> settings.fallback_gas_price
    5000000000
    >>> settings.update_interval
    600.0
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping

from web3 import Web3

if TYPE_CHECKING:
    from .GasPriceRefresher import RefreshOutcome

CHAIN_IDS = ("home", "foreign")

# Refresh interval used when a chain does not configure one (milliseconds).
DEFAULT_UPDATE_INTERVAL = 600000


class UnrecognizedChainError(ValueError):
    """Raised for a chain id other than "home" or "foreign"."""

    def __init__(self, chain_id: object):
        self.chain_id = chain_id
        super().__init__(f"Unrecognized chainId '{chain_id}'")


def check_chain_id(chain_id: object) -> str:
    """Validate a chain id.

    :param chain_id: Candidate chain id.
    :returns: The chain id.
    :raises UnrecognizedChainError: If it is not a known chain.
    """
    if chain_id not in CHAIN_IDS:
        raise UnrecognizedChainError(chain_id)
    return chain_id  # type: ignore[return-value]


def _int_env(env: Mapping[str, str], name: str) -> int | None:
    raw = (env.get(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class ChainSettings:
    """Static configuration of one chain.

    :ivar chain_id: "home" or "foreign".
    :ivar rpc_url: JSON-RPC endpoint used for the bridge contract.
    :ivar bridge_address: Bridge contract address.
    :ivar bridge_abi_path: Optional bridge ABI JSON file.
    :ivar oracle_url: Gas price oracle endpoint.
    :ivar speed_type: Oracle speed type to track (e.g. "fast").
    :ivar update_interval_ms: Refresh interval in milliseconds; ``None`` or
        zero selects DEFAULT_UPDATE_INTERVAL.
    :ivar fallback_gas_price: Initial gas price in wei.
    """

    chain_id: str
    fallback_gas_price: int
    rpc_url: str | None = None
    bridge_address: str | None = None
    bridge_abi_path: str | None = None
    oracle_url: str | None = None
    speed_type: str | None = None
    update_interval_ms: int | None = None

    def __post_init__(self) -> None:
        check_chain_id(self.chain_id)
        if self.fallback_gas_price < 0:
            raise ValueError(
                f"[{self.chain_id}] fallback gas price must not be negative"
            )
        if self.update_interval_ms is not None and self.update_interval_ms < 0:
            raise ValueError(
                f"[{self.chain_id}] update interval must not be negative"
            )
        if self.bridge_address is not None and not Web3.is_address(self.bridge_address):
            raise ValueError(
                f"[{self.chain_id}] invalid bridge address {self.bridge_address!r}"
            )

    @property
    def update_interval(self) -> float:
        """Refresh interval in seconds."""
        return (self.update_interval_ms or DEFAULT_UPDATE_INTERVAL) / 1000

    @classmethod
    def from_env(
        cls, chain_id: str, env: Mapping[str, str] | None = None
    ) -> ChainSettings:
        """Read a chain's settings from environment variables.

        Looks for: {PREFIX}_RPC_URL, {PREFIX}_BRIDGE_ADDRESS,
        {PREFIX}_BRIDGE_ABI_PATH, {PREFIX}_GAS_PRICE_ORACLE_URL,
        {PREFIX}_GAS_PRICE_SPEED_TYPE, {PREFIX}_GAS_PRICE_UPDATE_INTERVAL,
        {PREFIX}_GAS_PRICE_FALLBACK, where PREFIX is HOME or FOREIGN.

        :param chain_id: "home" or "foreign".
        :param env: Mapping to read from (default: ``os.environ``).
        :returns: Parsed settings.
        :raises UnrecognizedChainError: For an unknown chain id.
        :raises ValueError: If a numeric variable or the bridge address is
            malformed, or the fallback gas price is unset.
        """
        check_chain_id(chain_id)
        env = os.environ if env is None else env
        prefix = chain_id.upper()

        fallback_gas_price = _int_env(env, f"{prefix}_GAS_PRICE_FALLBACK")
        if fallback_gas_price is None:
            raise ValueError(f"{prefix}_GAS_PRICE_FALLBACK must be set")

        return cls(
            chain_id=chain_id,
            rpc_url=env.get(f"{prefix}_RPC_URL") or None,
            bridge_address=env.get(f"{prefix}_BRIDGE_ADDRESS") or None,
            bridge_abi_path=env.get(f"{prefix}_BRIDGE_ABI_PATH") or None,
            oracle_url=env.get(f"{prefix}_GAS_PRICE_ORACLE_URL") or None,
            speed_type=env.get(f"{prefix}_GAS_PRICE_SPEED_TYPE") or None,
            update_interval_ms=_int_env(env, f"{prefix}_GAS_PRICE_UPDATE_INTERVAL"),
            fallback_gas_price=fallback_gas_price,
        )


@dataclass(frozen=True)
class ChainContext:
    """Runtime view of a started chain.

    :ivar chain_id: "home" or "foreign".
    :ivar chain_query: Bridge contract handle, or None if not configured.
    :ivar oracle_url: Gas price oracle endpoint.
    :ivar speed_type: Oracle speed type to track.
    :ivar update_interval: Seconds between the end of one refresh cycle and
        the start of the next.
    :ivar fallback_gas_price: Initial gas price in wei.
    """

    chain_id: str
    chain_query: Any
    oracle_url: str | None
    speed_type: str | None
    update_interval: float
    fallback_gas_price: int

    @classmethod
    def from_settings(cls, settings: ChainSettings, chain_query: Any) -> ChainContext:
        """Build a context from static settings and a contract handle."""
        return cls(
            chain_id=settings.chain_id,
            chain_query=chain_query,
            oracle_url=settings.oracle_url,
            speed_type=settings.speed_type,
            update_interval=settings.update_interval,
            fallback_gas_price=settings.fallback_gas_price,
        )


class CachedGasPrice:
    """Last known gas price of one chain.

    ``gas_price`` starts at the chain's fallback default and is only ever
    replaced by a fetched value. ``speeds`` starts unset and is only
    replaced by a successful oracle fetch.

    The two fields are assigned one after the other; a reader may pair a
    freshly fetched gas price with the previous speed table.

    :ivar gas_price: Current gas price in wei.
    :ivar speeds: Last oracle response (gwei units), or None.
    """

    def __init__(self, fallback_gas_price: int) -> None:
        self.gas_price: int = fallback_gas_price
        self.speeds: dict[str, Any] | None = None

    def apply(self, outcome: RefreshOutcome) -> None:
        """Fold a refresh outcome into the cache, keeping absent fields."""
        if outcome.gas_price is not None:
            self.gas_price = outcome.gas_price
        if outcome.speeds is not None:
            self.speeds = outcome.speeds

    def __repr__(self) -> str:
        return f"CachedGasPrice(gas_price={self.gas_price!r}, speeds={self.speeds!r})"
