"""HTTP gas price oracle fetcher.

The oracle answers a GET with a JSON object mapping speed types to gwei
values, e.g. ``{"slow": 10, "standard": 12.5, "fast": 20}``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from ..GasPriceBounds import DEFAULT_GAS_PRICE_BOUNDS, GasPriceBounds
from ..units import gwei_to_wei
from .base import (
    BaseFetcher,
    FetcherConfigError,
    OracleDataMissingError,
    OracleParseError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OracleGasPrice:
    """Result of a successful oracle fetch.

    :ivar gas_price: Selected speed's gas price, clamped and converted to wei.
    :ivar speeds: Full oracle response, in the oracle's own (gwei) units.
    """

    gas_price: int
    speeds: dict[str, Any] = field(default_factory=dict)


def _as_gwei(speed_type: str, raw: Any) -> Decimal:
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise OracleParseError(
            f"Gas price for {speed_type} type is not a number: {raw!r}"
        )
    try:
        amount = Decimal(str(raw).strip())
    except InvalidOperation as e:
        raise OracleParseError(
            f"Gas price for {speed_type} type is not a number: {raw!r}"
        ) from e
    if not amount.is_finite():
        raise OracleParseError(
            f"Gas price for {speed_type} type is not a number: {raw!r}"
        )
    return amount


class OracleGasPriceFetcher(BaseFetcher):
    """Fetcher for an HTTP gas price oracle.

    :ivar bounds: Range the selected gwei value is clamped into.
    """

    def __init__(
        self,
        bounds: GasPriceBounds = DEFAULT_GAS_PRICE_BOUNDS,
        timeout: float | None = None,
    ) -> None:
        super().__init__(timeout=timeout)
        self.bounds = bounds

    async def fetch(self, oracle_url: str | None, speed_type: str | None) -> OracleGasPrice:
        """Fetch the gas price for ``speed_type`` from the oracle.

        A speed value of zero is a real answer and is clamped like any
        other; only a missing key or ``null`` counts as no answer.

        :param oracle_url: Oracle endpoint.
        :param speed_type: Key to select from the oracle response.
        :returns: Selected gas price in wei plus the full response.
        :raises FetcherConfigError: If no oracle URL is configured.
        :raises OracleNetworkError: On transport failure or non-2xx status.
        :raises OracleParseError: If the body is not a JSON object or the
            selected value is not numeric.
        :raises OracleDataMissingError: If the speed type is absent.
        """
        if not oracle_url:
            raise FetcherConfigError("Gas price oracle URL is not configured")

        response = await self._get(oracle_url)

        try:
            data = response.json()
        except ValueError as e:
            raise OracleParseError(f"Oracle response is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise OracleParseError(
                f"Oracle response is not a JSON object: {type(data).__name__}"
            )

        logger.debug(f"Oracle {oracle_url} returned {data}")

        raw = data.get(speed_type) if speed_type else None
        if raw is None:
            raise OracleDataMissingError(speed_type)

        gas_price_gwei = self.bounds.clamp(_as_gwei(speed_type, raw))
        return OracleGasPrice(gas_price=gwei_to_wei(gas_price_gwei), speeds=data)
