"""
Gas price fetchers.

This module provides the two gas price sources used by each chain: the
HTTP oracle (primary) and the bridge contract (fallback).

Usage:
    from gasprice.src.fetchers import BridgeGasPriceFetcher, OracleGasPriceFetcher

    oracle = OracleGasPriceFetcher()
    result = await oracle.fetch("https://gasprice.poa.network/", "fast")
    result.gas_price  # wei

    gas_price = await BridgeGasPriceFetcher().fetch(bridge_contract)
"""

from .base import (
    BaseFetcher,
    ChainQueryError,
    FetcherConfigError,
    FetcherError,
    FetcherHTTPError,
    OracleDataMissingError,
    OracleNetworkError,
    OracleParseError,
)
from .contract import BridgeGasPriceFetcher
from .oracle import OracleGasPrice, OracleGasPriceFetcher

__all__ = [
    # Base classes
    "BaseFetcher",
    "FetcherError",
    "FetcherConfigError",
    "FetcherHTTPError",
    "OracleNetworkError",
    "OracleParseError",
    "OracleDataMissingError",
    "ChainQueryError",
    # Fetcher implementations
    "BridgeGasPriceFetcher",
    "OracleGasPrice",
    "OracleGasPriceFetcher",
]
