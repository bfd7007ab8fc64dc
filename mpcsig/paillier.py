"""Paillier encryption: ciphertexts, public keys and secret keys."""

from __future__ import annotations

from dataclasses import dataclass, field

from mpcsig.arith import Modulus, is_valid_mod_n
from mpcsig.pedersen import Parameters
from mpcsig.pool import Pool
from mpcsig.primes import is_probable_prime, paillier_primes
from mpcsig.sample import pedersen as sample_pedersen
from mpcsig.sample import unit_mod_n

BITS_BLUM_PRIME = 1024
"""Default size in bits of each prime factor of a Paillier modulus."""

BITS_PAILLIER = 2 * BITS_BLUM_PRIME
"""Default size in bits of a Paillier modulus."""

ERR_PAILLIER_LENGTH = "wrong number bit length of Paillier modulus N"
ERR_PAILLIER_EVEN = "modulus N is even"
ERR_PAILLIER_NIL = "modulus N is nil"
ERR_PRIME_BAD_LENGTH = "prime factor is not the right length"
ERR_NOT_BLUM = "prime factor is not equivalent to 3 (mod 4)"
ERR_NOT_SAFE_PRIME = "supposed prime factor is not a safe prime"
ERR_PRIME_NIL = "prime is nil"
ERR_INVALID_CIPHERTEXT = "paillier: failed to decrypt invalid ciphertext"


class PaillierError(ValueError):
    """Raised for invalid Paillier moduli, primes or ciphertexts."""

    def __init__(self, reason: str, detail: str | None = None) -> None:
        super().__init__(f"{detail}: {reason}" if detail else reason)
        self.reason = reason


@dataclass
class Ciphertext:
    """An integer (1+N)ᵐρᴺ (mod N²), the encryption of m."""

    c: int

    DOMAIN = "Paillier Ciphertext"

    def add(self, pk: PublicKey, other: Ciphertext | None) -> Ciphertext:
        """Return the homomorphic sum, an encryption of m₁ + m₂."""
        if other is None:
            return self
        return Ciphertext(self.c * other.c % int(pk.n_squared))

    def mul(self, pk: PublicKey, k: int | None) -> Ciphertext:
        """Return the homomorphic scaling, an encryption of k⋅m."""
        if k is None:
            return self
        return Ciphertext(pk.n_squared.exp(self.c, k))

    def randomize(self, pk: PublicKey, nonce: int | None = None) -> int:
        """Multiply this ciphertext in place by nonceᴺ (mod N²) and return the nonce.

        A random unit mod N is used when nonce is None.
        """
        if nonce is None:
            nonce = unit_mod_n(None, int(pk.n))
        n_squared = int(pk.n_squared)
        self.c = self.c * pk.n_squared.exp(nonce, int(pk.n)) % n_squared
        return nonce

    def to_bytes(self, width: int | None = None) -> bytes:
        """Encode as big-endian bytes, padded to width when given."""
        if width is None:
            width = (self.c.bit_length() + 7) // 8
        return self.c.to_bytes(width, "big")

    @classmethod
    def from_bytes(cls, data: bytes) -> Ciphertext:
        """Decode a big-endian ciphertext."""
        return cls(int.from_bytes(data, "big"))


@dataclass(frozen=True, eq=False)
class PublicKey:
    """A Paillier public key, the modulus N, with N² cached."""

    n: Modulus | int
    n_squared: Modulus | None = None

    DOMAIN = "Paillier PublicKey"

    def __post_init__(self) -> None:
        n = self.n if isinstance(self.n, Modulus) else Modulus.from_n(self.n)
        object.__setattr__(self, "n", n)
        if self.n_squared is None:
            object.__setattr__(self, "n_squared", Modulus.from_n(int(n) * int(n)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return int(self.n) == int(other.n)

    def __hash__(self) -> int:
        return hash(int(self.n))

    def enc(self, m: int) -> tuple[Ciphertext, int]:
        """Encrypt m with a fresh random nonce; return the ciphertext and the nonce."""
        nonce = unit_mod_n(None, int(self.n))
        return self.enc_with_nonce(m, nonce), nonce

    def enc_with_nonce(self, m: int, nonce: int) -> Ciphertext:
        """Return (1+N)ᵐρᴺ (mod N²).

        Raises ValueError if m lies outside [-(N-1)/2, …, (N-1)/2].
        """
        n = int(self.n)
        if abs(m) > n >> 1:
            raise ValueError(
                "paillier: tried to encrypt message outside of range [-(N-1)/2, …, (N-1)/2]"
            )
        n_squared = self.n_squared
        assert n_squared is not None
        c = n_squared.exp(n + 1, m)
        c = c * n_squared.exp(nonce, n) % int(n_squared)
        return Ciphertext(c)

    def validate_ciphertexts(self, *args: Ciphertext | None) -> bool:
        """Return True if every ciphertext is in [1, N²-1] and coprime to N²."""
        n_squared = int(self.n_squared)
        for ct in args:
            if ct is None or not is_valid_mod_n(n_squared, ct.c):
                return False
        return True

    def to_bytes(self) -> bytes:
        """Encode N as minimal big-endian bytes."""
        n = int(self.n)
        return n.to_bytes((n.bit_length() + 7) // 8, "big")


@dataclass(frozen=True)
class SecretKey:
    """A Paillier secret key: the factors p and q of N, with ϕ(N) and ϕ⁻¹ mod N."""

    p: int
    q: int
    phi: int
    phi_inv: int
    public_key: PublicKey = field(repr=False)

    @classmethod
    def from_primes(cls, p: int, q: int) -> SecretKey:
        """Build a secret key from two primes; primality is assumed."""
        n = Modulus.from_factors(p, q)
        phi = (p - 1) * (q - 1)
        phi_inv = pow(phi, -1, int(n))
        n_squared = Modulus.from_factors(p * p, q * q)
        return cls(p, q, phi, phi_inv, PublicKey(n, n_squared))

    @property
    def n(self) -> Modulus:
        return self.public_key.n  # type: ignore[return-value]

    def dec(self, ct: Ciphertext) -> int:
        """Decrypt ct to its plaintext in the symmetric range around 0.

        Raises PaillierError if ct is not in [1, N²-1] or not coprime to N².
        """
        if not self.public_key.validate_ciphertexts(ct):
            raise PaillierError(ERR_INVALID_CIPHERTEXT)
        n = int(self.n)
        n_squared = self.public_key.n_squared
        assert n_squared is not None
        result = n_squared.exp(ct.c, self.phi)
        result = (result - 1) // n
        result = result * self.phi_inv % n
        if result > n >> 1:
            result -= n
        return result

    def dec_with_randomness(self, ct: Ciphertext) -> tuple[int, int]:
        """Return the plaintext and the nonce used to produce ct."""
        m = self.dec(ct)
        n_mod = self.n
        n = int(n_mod)
        x = n_mod.exp(n + 1, -m) * ct.c % n
        n_inverse = pow(n, -1, self.phi)
        return m, n_mod.exp(x, n_inverse)

    def generate_pedersen(self) -> tuple[Parameters, int]:
        """Create Pedersen parameters over N, returning them with the secret λ."""
        s, t, lam = sample_pedersen(None, self.phi, int(self.n))
        return Parameters(self.n, s, t), lam


def validate_n(n: int | Modulus | None, bits: int = BITS_PAILLIER) -> None:
    """Check that N has exactly the given bit length and is odd."""
    if n is None:
        raise PaillierError(ERR_PAILLIER_NIL)
    value = int(n)
    have = value.bit_length()
    if have != bits:
        raise PaillierError(ERR_PAILLIER_LENGTH, f"have: {have}, need {bits}")
    if value & 1 != 1:
        raise PaillierError(ERR_PAILLIER_EVEN)


def validate_prime(p: int | None, bits: int = BITS_BLUM_PRIME) -> None:
    """Check that p has the given bit length, p ≡ 3 (mod 4) and (p-1)/2 is prime."""
    if p is None:
        raise PaillierError(ERR_PRIME_NIL)
    have = p.bit_length()
    if have != bits:
        raise PaillierError(ERR_PRIME_BAD_LENGTH, f"invalid prime size: have: {have}, need {bits}")
    if p & 0b11 != 3:
        raise PaillierError(ERR_NOT_BLUM)
    if not is_probable_prime(p >> 1, 1):
        raise PaillierError(ERR_NOT_SAFE_PRIME)


def key_gen(pool: Pool | None = None, bits: int = BITS_BLUM_PRIME) -> tuple[PublicKey, SecretKey]:
    """Generate a key pair whose prime factors have the given number of bits."""
    p, q = paillier_primes(None, pool, bits)
    secret_key = SecretKey.from_primes(p, q)
    return secret_key.public_key, secret_key