"""Predicates that select which scalars get stored."""

from __future__ import annotations

from dataclasses import dataclass
from math import isqrt


def is_prime(value: int) -> bool:
    """True if ``value`` is prime, by trial division."""
    if value < 2:
        return False
    divisor = 2
    while divisor * divisor <= value:
        if value % divisor == 0:
            return False
        divisor += 1
    return True


def is_triangular(value: int) -> bool:
    """True if ``value`` equals n(n+1)/2 for some integer n >= 0."""
    if value < 0:
        return False
    n = (isqrt(8 * value + 1) - 1) // 2
    return n * (n + 1) // 2 == value


@dataclass(frozen=True)
class ScalarFilter:
    """Scalar selection criteria; all enabled criteria must hold."""

    prime_only: bool = False
    triangular_only: bool = False
    modulo: int = 0
    use_modulo: bool = False

    def __post_init__(self) -> None:
        if self.use_modulo and self.modulo == 0:
            raise ValueError("modulo must be non-zero")

    def matches(self, value: int) -> bool:
        if self.prime_only and not is_prime(value):
            return False
        if self.triangular_only and not is_triangular(value):
            return False
        if self.use_modulo and value % self.modulo != 0:
            return False
        return True