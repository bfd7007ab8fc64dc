"""Generation of safe Blum primes for Paillier moduli."""

from __future__ import annotations

import secrets
from functools import lru_cache
from typing import Any

from mpcsig.pool import LockedReader, Pool
from mpcsig.sample import SamplingError, read_bytes

SIEVE_SIZE = 1 << 18
"""The number of candidates checked after the initial random guess."""

PRIME_BOUND = 1 << 20
"""The upper bound on the small primes used for sieving."""

BLUM_PRIMALITY_ITERATIONS = 20
"""Rounds of Miller-Rabin applied to (p - 1) / 2."""

_MR_BASES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41)
# Testing against all of _MR_BASES is exact below this bound.
_DETERMINISTIC_LIMIT = 3317044064679887385961981
_ZEROS = memoryview(bytes(SIEVE_SIZE))


def small_primes(below: int) -> list[int]:
    """Return all odd primes strictly below the given bound, in increasing order."""
    if below <= 3:
        return []
    sieve = bytearray([1]) * below
    sieve[0] = sieve[1] = 0
    p = 2
    while p * p < below:
        if sieve[p]:
            sieve[2 * p :: p] = _zeros(len(range(2 * p, below, p)))
        p += 1
    return [n for n in range(3, below) if sieve[n]]


def _zeros(count: int) -> bytes | memoryview:
    if count <= len(_ZEROS):
        return _ZEROS[:count]
    return bytes(count)


@lru_cache(maxsize=1)
def _sieving_primes() -> tuple[int, ...]:
    return tuple(small_primes(PRIME_BOUND))


def _strong_probable_prime(n: int, base: int) -> bool:
    d = n - 1
    shifts = 0
    while d % 2 == 0:
        d //= 2
        shifts += 1
    x = pow(base, d, n)
    if x in (1, n - 1):
        return True
    for _ in range(shifts - 1):
        x = x * x % n
        if x == n - 1:
            return True
    return False


def is_probable_prime(n: int, rounds: int = BLUM_PRIMALITY_ITERATIONS) -> bool:
    """Return True if n is prime with high probability.

    Values below about 3.3e24 are decided exactly. Larger values get a strong
    base-2 test followed by rounds Miller-Rabin tests with random bases.
    """
    if n < 2:
        return False
    for p in _MR_BASES:
        if n % p == 0:
            return n == p
    if n < _DETERMINISTIC_LIMIT:
        return all(_strong_probable_prime(n, base) for base in _MR_BASES)
    if not _strong_probable_prime(n, 2):
        return False
    for _ in range(rounds):
        base = 2 + secrets.randbelow(n - 3)
        if not _strong_probable_prime(n, base):
            return False
    return True


def try_blum_prime(rng: Any, bits: int) -> int | None:
    """Try to find a safe prime p ≡ 3 (mod 4) of exactly bits bits.

    A random start is drawn with its top two bits set, and the following
    SIEVE_SIZE numbers are sieved and tested. Returns None if no candidate
    works or the source of randomness fails.
    """
    if bits < 16 or bits % 8 != 0:
        raise ValueError(f"prime size must be a multiple of 8 and at least 16, got {bits}")
    try:
        data = bytearray(read_bytes(rng, (bits + 7) // 8))
    except SamplingError:
        return None
    # p ≡ 3 (mod 4) is needed for both p and (p - 1) / 2 to be prime.
    data[-1] |= 3
    # Two top bits set, so that a product of two such primes has 2*bits bits.
    data[0] |= 0xC0
    base = int.from_bytes(data, "big")

    # base ≡ 3 (mod 4), so only offsets that are multiples of 4 keep that.
    sieve = bytearray(SIEVE_SIZE)
    sieve[0::4] = b"\x01" * (SIEVE_SIZE // 4)
    for prime in _sieving_primes():
        # Remove x ≡ 0 (mod prime) and x ≡ 1 (mod prime): the latter makes
        # (x - 1) / 2 divisible by prime.
        remainder = base % prime
        first = 0 if remainder == 0 else prime - remainder
        sieve[first : SIEVE_SIZE - 1 : prime] = _zeros(len(range(first, SIEVE_SIZE - 1, prime)))
        sieve[first + 1 :: prime] = _zeros(len(range(first + 1, SIEVE_SIZE, prime)))

    delta = sieve.find(1)
    while delta != -1:
        p = base + delta
        if p.bit_length() > bits:
            return None
        # (p - 1) / 2 is the test more likely to fail, so it goes first.
        if is_probable_prime(p >> 1, BLUM_PRIMALITY_ITERATIONS) and is_probable_prime(p, 1):
            return p
        delta = sieve.find(1, delta + 1)
    return None


class _RandomStream:
    """Presents a random.Random-like object as a readable stream."""

    def __init__(self, rng: Any) -> None:
        self._rng = rng

    def read(self, size: int = -1) -> bytes:
        return self._rng.randbytes(size)


def _locked(rng: Any) -> Any:
    if rng is None:
        return None
    if hasattr(rng, "read"):
        return LockedReader(rng)
    return LockedReader(_RandomStream(rng))


def paillier_primes(rng: Any, pool: Pool | None, bits: int) -> tuple[int, int]:
    """Generate two safe Blum primes of the given size, in parallel when a pool is given."""
    source = _locked(rng)

    def attempt() -> int | None:
        return try_blum_prime(source, bits)

    if pool is None:
        found: list[int] = []
        while len(found) < 2:
            candidate = attempt()
            if candidate is not None:
                found.append(candidate)
    else:
        found = pool.search(2, attempt)
    return found[0], found[1]