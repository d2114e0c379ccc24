"""Grid cell coordinates and validation helpers."""

import math
from numbers import Integral, Real
from typing import NamedTuple, Optional


class GridCell(NamedTuple):
    """A cell coordinate: x is the column, y the row."""

    x: int
    y: int


def as_grid_index(value) -> Optional[int]:
    """
    Return value as an int when it denotes an integral coordinate.

    Integral floats such as 3.0 are accepted; booleans, fractional values,
    non-finite values and non-numbers give None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, Real) and math.isfinite(value) and float(value).is_integer():
        return int(value)
    return None


def is_positive_int(value) -> bool:
    return as_grid_index(value) is not None and value > 0
