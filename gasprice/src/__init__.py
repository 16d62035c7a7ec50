"""
Bridge Gas Price Oracle - Refresh and Fallback Module

This module keeps a bounded, fallback-aware gas price per bridge chain:
- GasPriceBounds: Clamping of oracle gas prices into a safe range
- ChainContext: Per-chain settings, context and cached gas price
- GasPriceRefresher: Oracle-then-contract refresh cycle
- GasPriceOptions: Caller overrides for gas price lookups
- GasPriceService: Per-chain refresh loops and lookups
- fetchers: HTTP oracle and bridge contract gas price sources
"""

from .ChainContext import (
    CHAIN_IDS,
    DEFAULT_UPDATE_INTERVAL,
    CachedGasPrice,
    ChainContext,
    ChainSettings,
    UnrecognizedChainError,
)
from .GasPriceBounds import GasPriceBounds, gas_price_within_limits
from .GasPriceOptions import GAS_PRICE, SPEED, GasPriceRequest, process_gas_price_options
from .GasPriceRefresher import GasPriceRefresher, RefreshOutcome, SourceResult
from .GasPriceService import GasPriceService

__all__ = [
    "CHAIN_IDS",
    "DEFAULT_UPDATE_INTERVAL",
    "GAS_PRICE",
    "SPEED",
    "CachedGasPrice",
    "ChainContext",
    "ChainSettings",
    "GasPriceBounds",
    "GasPriceRefresher",
    "GasPriceRequest",
    "GasPriceService",
    "RefreshOutcome",
    "SourceResult",
    "UnrecognizedChainError",
    "gas_price_within_limits",
    "process_gas_price_options",
]
