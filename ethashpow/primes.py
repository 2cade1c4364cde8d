"""Search for the largest prime not above a bound."""

from __future__ import annotations


def _is_odd_prime(number: int) -> bool:
    d = 3
    while d * d <= number:
        if number % d == 0:
            return False
        d += 2
    return True


def find_largest_prime(upper_bound: int) -> int:
    """Return the largest prime ``p <= upper_bound``, or 0 when ``upper_bound < 2``."""
    n = upper_bound
    if n < 2:
        return 0
    if n == 2:
        return 2
    if n % 2 == 0:
        n -= 1
    while not _is_odd_prime(n):
        n -= 2
    return n