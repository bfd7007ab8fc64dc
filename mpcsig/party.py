"""Party identifiers, sorted identifier lists and maps from parties to points."""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Iterable, Mapping

import cbor2

from mpcsig.curve import Secp256k1, Secp256k1Point, Secp256k1Scalar


class PartyID(str):
    """A unique identifier for a participant, used as a polynomial interpolation point.

    It should encode to at most 32 bytes.
    """

    DOMAIN = "ID"

    def scalar(self, group: Secp256k1) -> Secp256k1Scalar:
        """Interpret the identifier's bytes as a big-endian number modulo the group order."""
        return group.new_scalar(int.from_bytes(self.encode(), "big"))

    def to_bytes(self) -> bytes:
        """Return the identifier's bytes; an empty identifier cannot be written."""
        if not self:
            raise ValueError("empty party ID")
        return self.encode()


class IDSlice(tuple):
    """A sorted tuple of party identifiers."""

    DOMAIN = "IDSlice"

    def __new__(cls, ids: Iterable[str] = ()) -> IDSlice:
        return super().__new__(cls, sorted(PartyID(i) for i in ids))

    def contains(self, *args: str) -> bool:
        """Return True if every given identifier is present."""
        for party_id in args:
            index = bisect_left(self, party_id)
            if index >= len(self) or self[index] != party_id:
                return False
        return True

    def is_valid(self) -> bool:
        """Return True if the identifiers are strictly increasing (no duplicates)."""
        return all(a < b for a, b in zip(self, self[1:]))

    def remove(self, party_id: str) -> IDSlice:
        """Return a copy without the given identifier."""
        return IDSlice(i for i in self if i != party_id)

    def to_bytes(self) -> bytes:
        """Encode as an 8-byte big-endian count followed by each identifier's bytes."""
        return len(self).to_bytes(8, "big") + b"".join(i.encode() for i in self)

    def __str__(self) -> str:
        return ", ".join(self)


@dataclass
class PointMap:
    """A map from party identifiers to curve points, with a CBOR encoding."""

    points: dict[PartyID, Secp256k1Point] = field(default_factory=dict)
    group: Secp256k1 | None = None

    def __post_init__(self) -> None:
        self.points = {PartyID(k): v for k, v in self.points.items()}
        if self.group is None:
            for point in self.points.values():
                self.group = point.curve
                break

    def to_bytes(self) -> bytes:
        """Encode as a CBOR map from identifier to compressed point bytes."""
        return cbor2.dumps({str(k): v.to_bytes() for k, v in self.points.items()}, canonical=True)

    @classmethod
    def from_bytes(cls, group: Secp256k1 | None, data: bytes) -> PointMap:
        """Decode a map produced by to_bytes, with points in the given group."""
        if group is None:
            raise ValueError("PointMap.from_bytes called without a group")
        raw = cbor2.loads(data)
        if not isinstance(raw, Mapping):
            raise ValueError("PointMap data is not a map")
        points: dict[PartyID, Secp256k1Point] = {}
        for key, value in raw.items():
            if not isinstance(key, str) or not isinstance(value, bytes):
                raise ValueError("PointMap entry has the wrong type")
            points[PartyID(key)] = group.point_from_bytes(value)
        return cls(points, group)