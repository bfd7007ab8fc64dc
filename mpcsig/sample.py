"""Sampling of random integers, scalars and points from a source of randomness."""

from __future__ import annotations

import os
from math import gcd
from typing import Any

from mpcsig.curve import Secp256k1, Secp256k1Point, Secp256k1Scalar

MAX_ITERATIONS = 255


class SamplingError(RuntimeError):
    """Raised when sampling does not succeed within the iteration limit."""

    def __init__(self) -> None:
        super().__init__(f"sample: failed to generate after {MAX_ITERATIONS} iterations")


def _read_full(rng: Any, size: int) -> bytes | None:
    if rng is None:
        return os.urandom(size)
    if hasattr(rng, "read"):
        chunks = bytearray()
        while len(chunks) < size:
            try:
                chunk = rng.read(size - len(chunks))
            except OSError:
                return None
            if not chunk:
                return None
            chunks.extend(chunk)
        return bytes(chunks)
    return rng.randbytes(size)


def read_bytes(rng: Any, size: int) -> bytes:
    """Read exactly size bytes from rng, retrying failed reads.

    rng may be None (the operating system's source), a readable binary stream,
    or a random.Random-like object with randbytes.
    """
    for _ in range(MAX_ITERATIONS):
        data = _read_full(rng, size)
        if data is not None:
            return data
    raise SamplingError()


def mod_n(rng: Any, n: int) -> int:
    """Sample an element of ℤₙ by rejection."""
    size = (n.bit_length() + 7) // 8
    while True:
        value = int.from_bytes(read_bytes(rng, size), "big")
        if value < n:
            return value


def unit_mod_n(rng: Any, n: int) -> int:
    """Sample a unit of ℤₙ."""
    size = (n.bit_length() + 7) // 8
    for _ in range(MAX_ITERATIONS):
        value = int.from_bytes(read_bytes(rng, size), "big") % n
        if gcd(value, n) == 1:
            return value
    raise SamplingError()


def _jacobi(a: int, n: int) -> int:
    a %= n
    result = 1
    while a:
        while a % 2 == 0:
            a //= 2
            if n % 8 in (3, 5):
                result = -result
        a, n = n, a
        if a % 4 == 3 and n % 4 == 3:
            result = -result
        a %= n
    return result if n == 1 else 0


def qnr(rng: Any, n: int, bits: int) -> int:
    """Sample a quadratic non-residue modulo n (Jacobi symbol -1)."""
    size = bits // 8
    for _ in range(MAX_ITERATIONS):
        value = int.from_bytes(read_bytes(rng, size), "big") % n
        if _jacobi(value, n) == -1:
            return value
    raise SamplingError()


def pedersen(rng: Any, phi: int, n: int) -> tuple[int, int, int]:
    """Generate (s, t, λ) with t a random square mod n and s = tˡ (mod n)."""
    lam = mod_n(rng, phi)
    tau = unit_mod_n(rng, n)
    t = tau * tau % n
    s = pow(t, lam, n)
    return s, t, lam


def scalar(rng: Any, group: Secp256k1) -> Secp256k1Scalar:
    """Sample a scalar by reducing random bytes modulo the group order."""
    data = read_bytes(rng, group.safe_scalar_bytes)
    return group.new_scalar(int.from_bytes(data, "big"))


def scalar_unit(rng: Any, group: Secp256k1) -> Secp256k1Scalar:
    """Sample a non-zero scalar."""
    for _ in range(MAX_ITERATIONS):
        value = scalar(rng, group)
        if not value.is_zero():
            return value
    raise SamplingError()


def scalar_point_pair(rng: Any, group: Secp256k1) -> tuple[Secp256k1Scalar, Secp256k1Point]:
    """Sample x and return (x, x⋅G)."""
    value = scalar(rng, group)
    return value, value.act_on_base()


def interval(rng: Any, bits: int) -> int:
    """Sample an integer in the range ± 2^bits; the first byte's low bit gives the sign."""
    data = read_bytes(rng, bits // 8 + 1)
    value = int.from_bytes(data[1:], "big")
    return -value if data[0] & 1 else value


def interval_scalar(rng: Any, group: Secp256k1) -> int:
    """Sample an integer in the range ± 2^(scalar bits of the group)."""
    return interval(rng, group.scalar_bits)