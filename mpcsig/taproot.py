"""Schnorr signatures over secp256k1 as specified by BIP-340."""

from __future__ import annotations

import hashlib
import itertools
import threading
from typing import Any

from mpcsig.curve import Secp256k1
from mpcsig.sample import read_bytes

SECRET_KEY_LENGTH = 32
"""The number of bytes in a secret key."""

SIGNATURE_LEN = 64
"""The number of bytes in a signature."""

_GROUP = Secp256k1()
_counter = itertools.count(1)
_counter_lock = threading.Lock()


def tagged_hash(tag: str, *args: bytes) -> bytes:
    """Return SHA-256(SHA-256(tag) ‖ SHA-256(tag) ‖ data…), the BIP-340 tagged hash."""
    tag_sum = hashlib.sha256(tag.encode()).digest()
    h = hashlib.sha256(tag_sum + tag_sum)
    for data in args:
        h.update(data)
    return h.digest()


def _parse_secret(data: bytes):
    try:
        d = _GROUP.scalar_from_bytes(bytes(data))
    except ValueError:
        raise ValueError("invalid secret key") from None
    if d.is_zero():
        raise ValueError("invalid secret key")
    return d


def _next_counter_bytes() -> bytes:
    with _counter_lock:
        value = next(_counter)
    return value.to_bytes(8, "big") + bytes(SECRET_KEY_LENGTH - 8)


class PublicKey(bytes):
    """A 32-byte x-only public key for BIP-340 signatures."""

    def verify(self, signature: bytes, message: bytes) -> bool:
        """Return True if signature is valid for message (a hash) under this key."""
        if len(signature) != SIGNATURE_LEN:
            return False
        try:
            p = _GROUP.lift_x(bytes(self))
            s = _GROUP.scalar_from_bytes(bytes(signature[32:]))
        except ValueError:
            return False
        e_hash = tagged_hash("BIP0340/challenge", bytes(signature[:32]), bytes(self), message)
        e = _GROUP.new_scalar(int.from_bytes(e_hash, "big"))
        check = s.act_on_base() - e.act(p)
        if check.is_identity() or not check.has_even_y():
            return False
        return check.x_bytes() == bytes(signature[:32])


class SecretKey(bytes):
    """A 32-byte secret key for BIP-340 signatures."""

    def public(self) -> PublicKey:
        """Return the x-only public key; raise ValueError if the key is invalid."""
        return PublicKey(_parse_secret(self).act_on_base().x_bytes())

    def sign(self, message: bytes, rng: Any = None) -> bytes:
        """Sign message, which should be a hash.

        rng supplies 32 bytes of auxiliary randomness; when it is None a global
        counter is used instead, making signatures deterministic but distinct.
        """
        d = _parse_secret(self)
        p = d.act_on_base()
        p_bytes = p.x_bytes()
        if not p.has_even_y():
            d = -d

        aux = _next_counter_bytes() if rng is None else read_bytes(rng, 32)
        aux_hash = tagged_hash("BIP0340/aux", aux)
        t = bytes(a ^ b for a, b in zip(d.to_bytes(), aux_hash))
        rand_hash = tagged_hash("BIP0340/nonce", t, p_bytes, message)
        k = _GROUP.new_scalar(int.from_bytes(rand_hash, "big"))
        if k.is_zero():
            raise ValueError("invalid nonce")

        r = k.act_on_base()
        if not r.has_even_y():
            k = -k
        r_bytes = r.x_bytes()

        e_hash = tagged_hash("BIP0340/challenge", r_bytes, p_bytes, message)
        e = _GROUP.new_scalar(int.from_bytes(e_hash, "big"))
        z = e * d + k
        return r_bytes + z.to_bytes()


def gen_key(rng: Any = None) -> tuple[SecretKey, PublicKey]:
    """Generate a key pair from rng, drawing again until the secret key is valid."""
    while True:
        secret_key = SecretKey(read_bytes(rng, SECRET_KEY_LENGTH))
        try:
            return secret_key, secret_key.public()
        except ValueError:
            continue