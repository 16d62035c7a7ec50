"""Gas price unit conversion.

Oracles report gas prices in gwei, possibly fractional. Everything else in
the service works in integer wei.
"""

from decimal import Decimal, InvalidOperation

from web3 import Web3


def gwei_to_wei(value: int | float | str | Decimal) -> int:
    """Convert a gwei amount to an integer number of wei.

    Sub-wei fractions are truncated.

    :param value: Amount in gwei.
    :returns: Amount in wei.
    :raises ValueError: If the value is not a finite, non-negative number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid gas price {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Invalid gas price {value!r}")
        return value * 10**9

    try:
        # str() keeps floats at their shortest repr, so 1.1 gwei stays exact
        amount = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError(f"Invalid gas price {value!r}") from e

    if not amount.is_finite() or amount < 0:
        raise ValueError(f"Invalid gas price {value!r}")

    return int(Web3.to_wei(amount, "gwei"))
