"""
Share Recovery :: Exact Lagrange Interpolation
===============================================

Recovers f(0) from K points (x_i, y_i) of a polynomial with integer
coefficients, over the rationals rather than a finite field.

  f(0) = Σ_j  y_j · Π_{m≠j} (0 − x_m)  /  Π_{m≠j} (x_j − x_m)

Each term is built as a single exact fraction: y_j times the whole
numerator product, over the whole denominator product.  Partial
products are never divided and nothing is ever truncated.

Individual terms need not be integers (for f(x) = 3 + 2x through
(1, 5) and (3, 9) the terms are 15/2 and -9/2), but for consistent
shares of an integer polynomial their sum always is.  A fractional sum
means the shares are corrupted, mixed from different polynomials, or
fewer than the polynomial's degree needs, and is reported as
``InexactDivision``.
"""

from dataclasses import dataclass
from fractions import Fraction
from typing import Dict, List, Sequence, Tuple

from .errors import DuplicateAbscissa, InexactDivision


@dataclass(frozen=True)
class Point:
    """
    A single decoded share.

    - x = share identifier (abscissa)
    - y = decoded share value, possibly hundreds of digits long
    """
    x: int
    y: int


def check_distinct_abscissas(points: Sequence[Point]) -> None:
    """Raise DuplicateAbscissa for the first repeated x-coordinate."""
    seen: Dict[int, int] = {}
    for index, point in enumerate(points):
        if point.x in seen:
            raise DuplicateAbscissa(point.x, seen[point.x], index)
        seen[point.x] = index


def lagrange_fraction(points: Sequence[Point], j: int) -> Tuple[int, int]:
    """
    Numerator and denominator of the basis polynomial L_j evaluated at 0.

    numerator   = Π_{m≠j} (0 − x_m)
    denominator = Π_{m≠j} (x_j − x_m)
    """
    xj = points[j].x
    numerator = 1
    denominator = 1
    for m, other in enumerate(points):
        if m == j:
            continue
        numerator *= 0 - other.x
        denominator *= xj - other.x
    return numerator, denominator


def lagrange_terms(points: Sequence[Point]) -> List[Fraction]:
    """Exact per-point contributions y_j · L_j(0); their sum is f(0)."""
    if not points:
        raise ValueError("Need at least one point for interpolation")
    check_distinct_abscissas(points)

    terms = []
    for j, point in enumerate(points):
        numerator, denominator = lagrange_fraction(points, j)
        terms.append(Fraction(point.y * numerator, denominator))
    return terms


def interpolate(points: Sequence[Point]) -> int:
    """
    Value at x=0 of the unique polynomial of degree < len(points)
    passing through *points*.

    Raises DuplicateAbscissa if two points share an x, and
    InexactDivision if that value is not an integer.
    """
    total = sum(lagrange_terms(points), Fraction(0))
    if total.denominator != 1:
        raise InexactDivision(total.numerator, total.denominator)
    return total.numerator
