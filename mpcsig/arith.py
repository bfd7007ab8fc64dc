"""Modular arithmetic helpers: range checks and CRT-accelerated exponentiation."""

from __future__ import annotations

from dataclasses import dataclass
from math import gcd


def is_valid_mod_n(n: int, *args: int | None) -> bool:
    """Return True if every value lies in [1, n-1] and is coprime to n."""
    for value in args:
        if value is None:
            return False
        if not 0 < value < n:
            return False
        if gcd(value, n) != 1:
            return False
    return True


def is_in_interval(value: int | None, bits: int) -> bool:
    """Return True if |value| fits in the given number of bits."""
    if value is None:
        return False
    return abs(value).bit_length() <= bits


@dataclass(frozen=True)
class Modulus:
    """A modulus n, optionally with its factorisation n = p*q for faster exponentiation."""

    n: int
    p: int | None = None
    q: int | None = None
    p_inv: int | None = None

    @classmethod
    def from_n(cls, n: int) -> Modulus:
        """Wrap a modulus whose factorisation is unknown."""
        return cls(n)

    @classmethod
    def from_factors(cls, p: int, q: int) -> Modulus:
        """Build n = p*q and cache p⁻¹ (mod q) for CRT exponentiation."""
        return cls(p * q, p, q, pow(p, -1, q))

    def __int__(self) -> int:
        return self.n

    def has_factorization(self) -> bool:
        return self.p is not None and self.q is not None and self.p_inv is not None

    def _exp_positive(self, x: int, e: int) -> int:
        if not self.has_factorization():
            return pow(x, e, self.n)
        assert self.p is not None and self.q is not None and self.p_inv is not None
        xp = pow(x, e, self.p)
        xq = pow(x, e, self.q)
        # r = xp + p * [p⁻¹ (mod q)] * (xq - xp) (mod n)
        return ((xq - xp) * self.p_inv * self.p + xp) % self.n

    def exp(self, x: int, e: int) -> int:
        """Return xᵉ (mod n); a negative e inverts the result.

        Raises ValueError if e is negative and the power is not invertible.
        """
        result = self._exp_positive(x, abs(e))
        if e < 0:
            return pow(result, -1, self.n)
        return result