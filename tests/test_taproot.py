import hashlib
import io
import random

import pytest

from mpcsig.taproot import (
    SIGNATURE_LEN,
    PublicKey,
    SecretKey,
    gen_key,
    tagged_hash,
)


@pytest.mark.parametrize("i", range(10))
def test_signature_verification(i):
    message = hashlib.sha256(bytes([0xDE, 0xAD, 0xBE, 0xEF, i])).digest()
    rng = random.Random(i)
    sk, pk = gen_key(rng)

    sig1 = sk.sign(message, rng)
    assert len(sig1) == SIGNATURE_LEN
    assert pk.verify(sig1, message)

    sig2 = sk.sign(message, None)
    assert pk.verify(sig2, message)


def test_bip340_vector_zero():
    sk = SecretKey((3).to_bytes(32, "big"))
    expected_x = bytes.fromhex(
        "F9308A019258C31049344F85F89D5229B531C845836F99B08601F113BCE036F9"
    )
    assert sk.public() == expected_x
    sig = sk.sign(bytes(32), io.BytesIO(bytes(32)))
    assert sig == bytes.fromhex(
        "E907831F80848D1069A5371B402410364BDF1C5F8307B0084C55F1CE2DCA8215"
        "25F66A4A85EA8B71E482A74F382D2CE5EBEEE8FDB2172F477DF4900D310536C0"
    )
    assert PublicKey(expected_x).verify(sig, bytes(32))


def test_public_key_is_32_bytes():
    sk = SecretKey((1).to_bytes(32, "big"))
    assert sk.public() == bytes.fromhex(
        "79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798"
    )


def test_counter_signatures_differ():
    sk, pk = gen_key(random.Random(42))
    message = hashlib.sha256(b"message").digest()
    a = sk.sign(message)
    b = sk.sign(message)
    assert a[:32] != b[:32]
    assert pk.verify(a, message) and pk.verify(b, message)


def test_verify_rejects_tampering():
    sk, pk = gen_key(random.Random(5))
    message = hashlib.sha256(b"hello").digest()
    sig = sk.sign(message, random.Random(6))
    other = hashlib.sha256(b"world").digest()
    assert not pk.verify(sig, other)
    flipped = bytes([sig[0] ^ 1]) + sig[1:]
    assert not pk.verify(flipped, message)
    assert not pk.verify(sig[:-1], message)
    _, other_pk = gen_key(random.Random(7))
    assert not other_pk.verify(sig, message)


def test_verify_rejects_out_of_range_s():
    sk, pk = gen_key(random.Random(8))
    message = bytes(32)
    sig = sk.sign(message, random.Random(9))
    bad = sig[:32] + b"\xff" * 32
    assert not pk.verify(bad, message)


@pytest.mark.parametrize(
    "raw",
    [bytes(32), b"\xff" * 32, bytes(31)],
)
def test_invalid_secret_key(raw):
    with pytest.raises(ValueError, match="invalid secret key"):
        SecretKey(raw).public()
    with pytest.raises(ValueError, match="invalid secret key"):
        SecretKey(raw).sign(bytes(32))


def test_tagged_hash_definition():
    tag_sum = hashlib.sha256(b"BIP0340/aux").digest()
    expected = hashlib.sha256(tag_sum + tag_sum + b"ab" + b"cd").digest()
    assert tagged_hash("BIP0340/aux", b"ab", b"cd") == expected
    assert tagged_hash("BIP0340/aux", b"abcd") == expected