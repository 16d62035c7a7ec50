"""GasPriceBounds: Safe operating range for oracle-reported gas prices.

Oracle values are expressed in gwei and clamped before they are converted
to wei. Values read from the bridge contract are not clamped.

.. code-block:: python

    >>> bounds = GasPriceBounds(1, 100)
    >>> bounds.clamp(0)
    1
    >>> bounds.clamp(150)
    100
    >>> bounds.clamp(42)
    42
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

Numeric = int | float | Decimal

# Default boundaries, in gwei.
MIN_GAS_PRICE_GWEI = 1
MAX_GAS_PRICE_GWEI = 250


@dataclass(frozen=True)
class GasPriceBounds:
    """Inclusive [min_gwei, max_gwei] range applied to oracle gas prices.

    :ivar min_gwei: Lowest gas price accepted from the oracle.
    :ivar max_gwei: Highest gas price accepted from the oracle.
    """

    min_gwei: Numeric = MIN_GAS_PRICE_GWEI
    max_gwei: Numeric = MAX_GAS_PRICE_GWEI

    def __post_init__(self) -> None:
        if self.min_gwei > self.max_gwei:
            raise ValueError(
                f"Minimum gas price {self.min_gwei} exceeds maximum {self.max_gwei}"
            )

    def clamp(self, value: Numeric) -> Numeric:
        """Clamp a gwei value into the configured range.

        :param value: Gas price in gwei.
        :returns: ``min_gwei`` if below range, ``max_gwei`` if above range,
            otherwise ``value`` unchanged.
        """
        if value < self.min_gwei:
            return self.min_gwei
        if value > self.max_gwei:
            return self.max_gwei
        return value


DEFAULT_GAS_PRICE_BOUNDS = GasPriceBounds()


def gas_price_within_limits(value: Numeric) -> Numeric:
    """Clamp a gwei value using the default boundaries."""
    return DEFAULT_GAS_PRICE_BOUNDS.clamp(value)
