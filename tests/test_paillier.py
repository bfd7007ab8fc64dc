import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from mpcsig.arith import is_valid_mod_n
from mpcsig.paillier import (
    BITS_PAILLIER,
    Ciphertext,
    PaillierError,
    PublicKey,
    SecretKey,
    key_gen,
    validate_n,
    validate_prime,
)
from mpcsig.pool import Pool

P = int(
    "FD90167F42443623D284EA828FB13E374CBF73E16CC6755422B97640AB7FC77FDAF452B4F3A2E8472614EEE11CC8EAF4"
    "8783CE2B4876A3BB72E9ACF248E86DAA5CE4D5A88E77352BCBA30A998CD8B0AD2414D43222E3BA56D82523E2073730F8"
    "17695B34A4A26128D5E030A7307D3D04456DC512EBB8B53FDBD1DFC07662099B",
    16,
)
Q = int(
    "DB531C32024A262A0DF9603E48C79E863F9539A82B8619480289EC38C3664CC63E3AC2C04888827559FFDBCB735A8D2F"
    "1D24BAF910643CE819452D95CAFFB686E6110057985E93605DE89E33B99C34140EF362117F975A5056BFF14A51C9CD16"
    "A4961BE1F02C081C7AD8B2A5450858023A157AFA3C3441E8E00941F8D33ED6B7",
    16,
)

SECRET = SecretKey.from_primes(P, Q)
PUBLIC = SECRET.public_key
N = P * Q

U64 = st.integers(min_value=0, max_value=2**64 - 1)


def _signed(value, negative):
    return -value if negative else value


def test_fixture_primes_are_valid():
    validate_prime(P)
    validate_prime(Q)
    validate_n(PUBLIC.n)
    assert int(PUBLIC.n) == N


@pytest.mark.parametrize("value", [0, N, 2 * N, N * N])
def test_ciphertext_validate(value):
    with pytest.raises(PaillierError):
        SECRET.dec(Ciphertext(value))


@settings(max_examples=25, deadline=None)
@given(U64, st.booleans())
def test_enc_dec_round_trip(x, negative):
    m = _signed(x, negative)
    ciphertext, _ = PUBLIC.enc(m)
    assert SECRET.dec(ciphertext) == m


@settings(max_examples=20, deadline=None)
@given(U64, U64, st.booleans(), st.booleans())
def test_enc_dec_homomorphic(a, b, a_neg, b_neg):
    ma = _signed(a, a_neg)
    mb = _signed(b, b_neg)
    ca, _ = PUBLIC.enc(ma)
    cb, _ = PUBLIC.enc(mb)
    assert SECRET.dec(ca.add(PUBLIC, cb)) == ma + mb


@settings(max_examples=20, deadline=None)
@given(U64, U64, st.booleans(), st.booleans())
def test_enc_dec_scaling_homomorphic(s, x, s_neg, x_neg):
    m = _signed(x, x_neg)
    k = _signed(s, s_neg)
    c, _ = PUBLIC.enc(m)
    assert SECRET.dec(c.mul(PUBLIC, k)) == m * k


@settings(max_examples=20, deadline=None)
@given(U64, st.integers(min_value=1, max_value=2**64 - 1))
def test_dec_with_randomness(x, r):
    c = PUBLIC.enc_with_nonce(x, r)
    m, nonce = SECRET.dec_with_randomness(c)
    assert m == x
    assert nonce == r


def test_enc_returns_nonce_that_reproduces_ciphertext():
    ciphertext, nonce = PUBLIC.enc(12345)
    assert PUBLIC.enc_with_nonce(12345, nonce) == ciphertext


def test_enc_out_of_range_raises():
    with pytest.raises(ValueError):
        PUBLIC.enc_with_nonce(N // 2 + 1, 3)
    assert SECRET.dec(PUBLIC.enc_with_nonce(-(N // 2), 3)) == -(N // 2)


def test_add_and_mul_with_none_return_same():
    c, _ = PUBLIC.enc(7)
    assert c.add(PUBLIC, None) is c
    assert c.mul(PUBLIC, None) is c


def test_randomize_keeps_plaintext_and_returns_nonce():
    c, _ = PUBLIC.enc(-99)
    before = c.c
    nonce = c.randomize(PUBLIC, 5)
    assert nonce == 5
    assert c.c != before
    assert SECRET.dec(c) == -99
    random_nonce = c.randomize(PUBLIC)
    assert is_valid_mod_n(N, random_nonce)
    assert SECRET.dec(c) == -99


def test_ciphertext_bytes_round_trip():
    c, _ = PUBLIC.enc(42)
    data = c.to_bytes(512)
    assert len(data) == 512
    assert Ciphertext.from_bytes(data) == c
    assert Ciphertext.from_bytes(c.to_bytes()) == c


def test_validate_ciphertexts():
    c1, _ = PUBLIC.enc(1)
    c2, _ = PUBLIC.enc(2)
    assert PUBLIC.validate_ciphertexts(c1, c2)
    assert not PUBLIC.validate_ciphertexts(c1, None)
    assert not PUBLIC.validate_ciphertexts(Ciphertext(P))


def test_public_key_equality_and_bytes():
    plain = PublicKey(N)
    assert plain == PUBLIC
    assert plain != PublicKey(N + 2)
    assert int.from_bytes(plain.to_bytes(), "big") == N
    c = plain.enc_with_nonce(77, 11)
    assert SECRET.dec(c) == 77


def test_validate_n_errors():
    with pytest.raises(PaillierError) as excinfo:
        validate_n(None)
    assert excinfo.value.reason == "modulus N is nil"
    with pytest.raises(PaillierError) as excinfo:
        validate_n(N >> 1)
    assert excinfo.value.reason == "wrong number bit length of Paillier modulus N"
    with pytest.raises(PaillierError) as excinfo:
        validate_n(N + 1, BITS_PAILLIER)
    assert excinfo.value.reason == "modulus N is even"


def test_validate_prime_errors():
    with pytest.raises(PaillierError) as excinfo:
        validate_prime(None)
    assert excinfo.value.reason == "prime is nil"
    with pytest.raises(PaillierError) as excinfo:
        validate_prime(P >> 1)
    assert excinfo.value.reason == "prime factor is not the right length"
    with pytest.raises(PaillierError) as excinfo:
        validate_prime(P - 2)
    assert excinfo.value.reason == "prime factor is not equivalent to 3 (mod 4)"
    with pytest.raises(PaillierError) as excinfo:
        validate_prime(P + 4)
    assert excinfo.value.reason == "prime factor is not a safe prime"


def test_secret_key_values():
    assert SECRET.phi == (P - 1) * (Q - 1)
    assert SECRET.phi * SECRET.phi_inv % N == 1


def test_generate_pedersen():
    params, lam = SECRET.generate_pedersen()
    assert int(params.n) == N
    assert params.s == pow(params.t, lam, N)
    assert is_valid_mod_n(N, params.t)
    assert params.verify(3, 0, 0, params.commit(3, 0), params.t)


def test_key_gen_small():
    pk, sk = key_gen(None, 64)
    validate_prime(sk.p, 64)
    validate_prime(sk.q, 64)
    validate_n(pk.n, 128)
    c, _ = pk.enc(-31337)
    assert sk.dec(c) == -31337


def test_key_gen_with_pool():
    with Pool(2) as pool:
        pk, sk = key_gen(pool, 64)
    assert int(pk.n) == sk.p * sk.q
    c, _ = pk.enc(555)
    assert sk.dec(c) == 555