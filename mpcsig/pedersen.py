"""Pedersen commitment parameters over an RSA modulus."""

from __future__ import annotations

from dataclasses import dataclass

from mpcsig.arith import Modulus, is_valid_mod_n

ERR_NIL_FIELDS = "contains nil field"
ERR_S_EQUAL_T = "S cannot be equal to T"
ERR_NOT_VALID_MOD_N = "S and T must be in [1,…,N-1] and coprime to N"


class PedersenError(ValueError):
    """Raised when Pedersen parameters are invalid."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"pedersen: {reason}")
        self.reason = reason


def validate_parameters(n: int | Modulus | None, s: int | None, t: int | None) -> None:
    """Check that s and t are distinct units modulo n, raising PedersenError otherwise."""
    if n is None or s is None or t is None:
        raise PedersenError(ERR_NIL_FIELDS)
    if not is_valid_mod_n(int(n), s, t):
        raise PedersenError(ERR_NOT_VALID_MOD_N)
    if s == t:
        raise PedersenError(ERR_S_EQUAL_T)


@dataclass(frozen=True)
class Parameters:
    """Pedersen parameters: N = p⋅q, s = r² (mod N) and t = sˡ (mod N)."""

    n: Modulus
    s: int
    t: int

    DOMAIN = "Pedersen Parameters"

    def commit(self, x: int, y: int) -> int:
        """Return sˣ tʸ (mod N)."""
        return self.n.exp(self.s, x) * self.n.exp(self.t, y) % self.n.n

    def verify(
        self,
        a: int | None,
        b: int | None,
        e: int | None,
        s_commit: int | None,
        t_commit: int | None,
    ) -> bool:
        """Return True if sᵃ tᵇ ≡ S Tᵉ (mod N), where S and T are the given commitments."""
        if a is None or b is None or e is None or s_commit is None or t_commit is None:
            return False
        modulus = self.n.n
        if not is_valid_mod_n(modulus, s_commit, t_commit):
            return False
        lhs = self.n.exp(self.s, a) * self.n.exp(self.t, b) % modulus
        rhs = self.n.exp(t_commit, e) * s_commit % modulus
        return lhs == rhs

    def to_bytes(self, width: int) -> bytes:
        """Encode N, s and t, each as width big-endian bytes."""
        return b"".join(v.to_bytes(width, "big") for v in (self.n.n, self.s, self.t))