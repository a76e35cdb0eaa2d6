"""Best rational approximation of a real value under a denominator bound."""

import math
from dataclasses import dataclass

from .errors import NonFiniteValueError

# Float noise makes very deep expansions meaningless
MAX_TERMS = 64


@dataclass(frozen=True)
class Rational:
    """A fraction numerator/denominator with a positive denominator."""

    numerator: int
    denominator: int

    def __float__(self) -> float:
        return self.numerator / self.denominator

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"


def approximate(value: float, max_denominator: int) -> Rational:
    """Approximate a real value with a bounded-denominator fraction.

    Expands |value| as a continued fraction, stopping the first time a
    convergent's denominator would exceed ``max_denominator``. The closer of
    the last two convergents wins; ties go to the smaller denominator.

    Args:
        value: Real number to approximate
        max_denominator: Largest denominator allowed (>= 1)

    Returns:
        Rational whose numerator carries the sign of ``value``

    Raises:
        NonFiniteValueError: If value is NaN or infinite
        ValueError: If max_denominator < 1
    """
    if max_denominator < 1:
        raise ValueError(f"max_denominator must be >= 1, got {max_denominator}")

    if not math.isfinite(value):
        raise NonFiniteValueError(f"Cannot approximate non-finite value: {value}")

    if float(value).is_integer():
        return Rational(int(value), 1)

    sign = -1 if value < 0 else 1
    target = abs(value)

    x = target
    a = math.floor(x)
    # Convergents h/k, seeded with the (1/0, a0/1) pair
    h_prev, k_prev = 1, 0
    h, k = a, 1

    for _ in range(MAX_TERMS):
        remainder = x - a
        if remainder == 0:
            break
        x = 1.0 / remainder
        # Subnormal remainders overflow; the current convergent is final
        if not math.isfinite(x):
            break
        a = math.floor(x)
        h_next = a * h + h_prev
        k_next = a * k + k_prev
        if k_next > max_denominator:
            break
        h_prev, k_prev, h, k = h, k, h_next, k_next

    best_num, best_den = h, k
    if k_prev > 0:
        error_last = abs(target - h / k)
        error_prev = abs(target - h_prev / k_prev)
        if error_prev < error_last or (error_prev == error_last and k_prev < k):
            best_num, best_den = h_prev, k_prev

    return Rational(sign * best_num, best_den)
