"""GasPriceOptions: Resolve the gas price a caller should pay.

A transaction sender may override the cached gas price either with an
explicit value or by naming an oracle speed type:

.. code-block:: python

    >>> process_gas_price_options(None, 20000000000, {"fast": 50})
    20000000000
    >>> process_gas_price_options(GasPriceRequest("gasPrice", 99), 20000000000, None)
    99
    >>> process_gas_price_options(GasPriceRequest("speed", "fast"), 20000000000, {"fast": 50})
    50000000000
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .units import gwei_to_wei

GAS_PRICE = "gasPrice"
SPEED = "speed"


@dataclass(frozen=True)
class GasPriceRequest:
    """Caller override for a single lookup.

    :ivar type: GAS_PRICE to pay ``value`` verbatim, SPEED to look ``value``
        up in the oracle speed table.
    :ivar value: Gas price in wei, or a speed type name.
    """

    type: str | None = None
    value: Any = None

    @classmethod
    def from_dict(cls, options: Mapping[str, Any] | None) -> GasPriceRequest | None:
        """Build a request from a ``{"type": ..., "value": ...}`` mapping."""
        if options is None:
            return None
        return cls(type=options.get("type"), value=options.get("value"))


def process_gas_price_options(
    request: GasPriceRequest | None,
    gas_price: int,
    speeds: Mapping[str, Any] | None,
) -> Any:
    """Pick the gas price for a lookup.

    Never fails: anything that cannot be honoured falls through to the
    cached ``gas_price``.

    :param request: Optional caller override.
    :param gas_price: Cached gas price in wei.
    :param speeds: Cached oracle speed table in gwei, or None.
    :returns: ``request.value`` for GAS_PRICE requests, the converted speed
        value for SPEED requests when available, else ``gas_price``.
    """
    if request is None or request.type is None or request.value is None:
        return gas_price

    if request.type == GAS_PRICE:
        return request.value

    if request.type == SPEED:
        speed = speeds.get(request.value) if speeds else None
        if speed is None:
            return gas_price
        try:
            return gwei_to_wei(speed)
        except ValueError:
            return gas_price

    return gas_price
