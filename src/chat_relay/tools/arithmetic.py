"""Pure number tools: addition and primality."""

from __future__ import annotations

import math

Number = int | float


def add(num1: Number, num2: Number) -> Number:
    return num1 + num2


def is_prime(number: Number) -> bool:
    """Trial division up to and including the integer square root.

    Values below 2 and non-integral floats are never prime.
    """
    if number < 2:
        return False
    if isinstance(number, float):
        if not number.is_integer():
            return False
        number = int(number)
    for divisor in range(2, math.isqrt(number) + 1):
        if number % divisor == 0:
            return False
    return True
