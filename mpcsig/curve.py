"""The secp256k1 elliptic curve group: scalars, points and conversions."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

_P = 2**256 - 2**32 - 977
_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
_GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
_GY = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8
_B = 7

_Jacobian = tuple[int, int, int]
_JAC_IDENTITY: _Jacobian = (1, 1, 0)


def _jac_double(p: _Jacobian) -> _Jacobian:
    x, y, z = p
    if z == 0 or y == 0:
        return _JAC_IDENTITY
    yy = y * y % _P
    s = 4 * x * yy % _P
    m = 3 * x * x % _P
    x3 = (m * m - 2 * s) % _P
    y3 = (m * (s - x3) - 8 * yy * yy) % _P
    z3 = 2 * y * z % _P
    return x3, y3, z3


def _jac_add(p: _Jacobian, q: _Jacobian) -> _Jacobian:
    x1, y1, z1 = p
    x2, y2, z2 = q
    if z1 == 0:
        return q
    if z2 == 0:
        return p
    z1z1 = z1 * z1 % _P
    z2z2 = z2 * z2 % _P
    u1 = x1 * z2z2 % _P
    u2 = x2 * z1z1 % _P
    s1 = y1 * z2 * z2z2 % _P
    s2 = y2 * z1 * z1z1 % _P
    if u1 == u2:
        if s1 != s2:
            return _JAC_IDENTITY
        return _jac_double(p)
    h = (u2 - u1) % _P
    r = (s2 - s1) % _P
    hh = h * h % _P
    hhh = h * hh % _P
    v = u1 * hh % _P
    x3 = (r * r - hhh - 2 * v) % _P
    y3 = (r * (v - x3) - s1 * hhh) % _P
    z3 = h * z1 * z2 % _P
    return x3, y3, z3


def _to_jacobian(x: int, y: int) -> _Jacobian:
    if x == 0 and y == 0:
        return _JAC_IDENTITY
    return x, y, 1


def _to_affine(p: _Jacobian) -> tuple[int, int]:
    x, y, z = p
    if z == 0:
        return 0, 0
    z_inv = pow(z, -1, _P)
    z_inv2 = z_inv * z_inv % _P
    return x * z_inv2 % _P, y * z_inv2 * z_inv % _P


def _multiply(k: int, x: int, y: int) -> tuple[int, int]:
    k %= _N
    start = _to_jacobian(x, y)
    if k == 0 or start[2] == 0:
        return 0, 0
    acc = _JAC_IDENTITY
    for bit in bin(k)[2:]:
        acc = _jac_double(acc)
        if bit == "1":
            acc = _jac_add(acc, start)
    return _to_affine(acc)


@lru_cache(maxsize=1)
def _base_table() -> tuple[_Jacobian, ...]:
    table = []
    current: _Jacobian = (_GX, _GY, 1)
    for _ in range(256):
        table.append(current)
        current = _jac_double(current)
    return tuple(table)


def _multiply_base(k: int) -> tuple[int, int]:
    k %= _N
    acc = _JAC_IDENTITY
    for entry in _base_table():
        if k == 0:
            break
        if k & 1:
            acc = _jac_add(acc, entry)
        k >>= 1
    return _to_affine(acc)


def _decompress_y(x: int, odd: bool) -> int | None:
    rhs = (pow(x, 3, _P) + _B) % _P
    y = pow(rhs, (_P + 1) // 4, _P)
    if y * y % _P != rhs:
        return None
    if (y & 1) != int(odd):
        y = (-y) % _P
    return y


@dataclass(frozen=True)
class Secp256k1:
    """The secp256k1 group, the factory for its scalars and points."""

    name: str = "secp256k1"

    @property
    def scalar_bits(self) -> int:
        return 256

    @property
    def safe_scalar_bytes(self) -> int:
        return 32

    @property
    def order(self) -> int:
        return _N

    def new_point(self) -> Secp256k1Point:
        """Return the identity point."""
        return Secp256k1Point(0, 0)

    def new_base_point(self) -> Secp256k1Point:
        """Return the generator of the group."""
        return Secp256k1Point(_GX, _GY)

    def new_scalar(self, value: int = 0) -> Secp256k1Scalar:
        """Return a scalar holding value reduced modulo the group order."""
        return Secp256k1Scalar(value)

    def scalar_from_bytes(self, data: bytes) -> Secp256k1Scalar:
        """Decode a 32-byte big-endian scalar, rejecting values not below the order."""
        if len(data) != 32:
            raise ValueError(f"invalid length for secp256k1 scalar: {len(data)}")
        value = int.from_bytes(data, "big")
        if value >= _N:
            raise ValueError("invalid bytes for secp256k1 scalar")
        return Secp256k1Scalar(value)

    def point_from_bytes(self, data: bytes) -> Secp256k1Point:
        """Decode a 33-byte compressed point."""
        if len(data) != 33:
            raise ValueError(f"invalid length for secp256k1Point: {len(data)}")
        x = int.from_bytes(data[1:], "big")
        if x >= _P:
            raise ValueError("secp256k1Point: x coordinate out of range")
        y = _decompress_y(x, data[0] == 3)
        if y is None:
            raise ValueError("secp256k1Point: x coordinate not on curve")
        return Secp256k1Point(x, y)

    def lift_x(self, data: bytes) -> Secp256k1Point:
        """Return the point with the given 32-byte x coordinate and an even y."""
        if len(data) != 32:
            raise ValueError(f"invalid length for x coordinate: {len(data)}")
        x = int.from_bytes(data, "big")
        if x >= _P:
            raise ValueError("secp256k1Point: x coordinate out of range")
        y = _decompress_y(x, False)
        if y is None:
            raise ValueError("secp256k1Point: x coordinate not on curve")
        return Secp256k1Point(x, y)


@dataclass(frozen=True)
class Secp256k1Scalar:
    """An integer modulo the order of secp256k1."""

    value: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", self.value % _N)

    @property
    def curve(self) -> Secp256k1:
        return Secp256k1()

    def __int__(self) -> int:
        return self.value

    def __add__(self, other: object) -> Secp256k1Scalar:
        if not isinstance(other, Secp256k1Scalar):
            return NotImplemented
        return Secp256k1Scalar(self.value + other.value)

    def __sub__(self, other: object) -> Secp256k1Scalar:
        if not isinstance(other, Secp256k1Scalar):
            return NotImplemented
        return Secp256k1Scalar(self.value - other.value)

    def __mul__(self, other: object) -> Secp256k1Scalar:
        if not isinstance(other, Secp256k1Scalar):
            return NotImplemented
        return Secp256k1Scalar(self.value * other.value)

    def __neg__(self) -> Secp256k1Scalar:
        return Secp256k1Scalar(-self.value)

    def invert(self) -> Secp256k1Scalar:
        """Return the multiplicative inverse; zero maps to zero."""
        return Secp256k1Scalar(pow(self.value, _N - 2, _N))

    def is_zero(self) -> bool:
        return self.value == 0

    def is_over_half_order(self) -> bool:
        return self.value > _N // 2

    def act(self, point: Secp256k1Point) -> Secp256k1Point:
        """Multiply point by this scalar."""
        return Secp256k1Point(*_multiply(self.value, point.x, point.y))

    def act_on_base(self) -> Secp256k1Point:
        """Multiply the generator by this scalar."""
        return Secp256k1Point(*_multiply_base(self.value))

    def to_bytes(self) -> bytes:
        """Encode as 32 big-endian bytes."""
        return self.value.to_bytes(32, "big")


@dataclass(frozen=True)
class Secp256k1Point:
    """A point on secp256k1 in affine coordinates; (0, 0) is the identity."""

    x: int = 0
    y: int = 0

    @property
    def curve(self) -> Secp256k1:
        return Secp256k1()

    def __add__(self, other: object) -> Secp256k1Point:
        if not isinstance(other, Secp256k1Point):
            return NotImplemented
        total = _jac_add(_to_jacobian(self.x, self.y), _to_jacobian(other.x, other.y))
        return Secp256k1Point(*_to_affine(total))

    def __sub__(self, other: object) -> Secp256k1Point:
        if not isinstance(other, Secp256k1Point):
            return NotImplemented
        return self + (-other)

    def __neg__(self) -> Secp256k1Point:
        return Secp256k1Point(self.x, (-self.y) % _P)

    def is_identity(self) -> bool:
        return self.x == 0 and self.y == 0

    def x_scalar(self) -> Secp256k1Scalar:
        """Return the x coordinate reduced modulo the group order."""
        return Secp256k1Scalar(self.x)

    def x_bytes(self) -> bytes:
        """Return the x coordinate as 32 big-endian bytes."""
        return self.x.to_bytes(32, "big")

    def has_even_y(self) -> bool:
        return self.y % 2 == 0

    def to_bytes(self) -> bytes:
        """Encode in the 33-byte compressed form."""
        return bytes([2 + (self.y & 1)]) + self.x_bytes()


def make_int(scalar: Secp256k1Scalar) -> int:
    """Convert a scalar into a non-negative integer."""
    return int.from_bytes(scalar.to_bytes(), "big")


def from_hash(group: Secp256k1, digest: bytes) -> Secp256k1Scalar:
    """Convert a hash value to a scalar, truncating it to the bit length of the order."""
    order_bits = group.order.bit_length()
    order_bytes = (order_bits + 7) // 8
    digest = digest[:order_bytes]
    value = int.from_bytes(digest, "big")
    excess = len(digest) * 8 - order_bits
    if excess > 0:
        value >>= excess
    return group.new_scalar(value)