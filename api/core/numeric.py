"""
Request number types that fit the DECIMAL(p,2) storage columns.

Values stay floats in the API; anything the column would round, overflow or
store as NaN is rejected during request validation.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, Field


def _at_most_two_decimal_places(value: float) -> float:
    exponent = Decimal(str(value)).as_tuple().exponent
    if isinstance(exponent, int) and exponent < -2:
        raise ValueError("must have at most 2 decimal places")
    return value


# DECIMAL(10,2): up to 99999999.99
Amount = Annotated[
    float,
    Field(allow_inf_nan=False, lt=100_000_000),
    AfterValidator(_at_most_two_decimal_places),
]

# DECIMAL(3,2): up to 9.99 either way
Rating = Annotated[
    float,
    Field(allow_inf_nan=False, gt=-10, lt=10),
    AfterValidator(_at_most_two_decimal_places),
]
