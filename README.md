# mpcsig

Cryptographic building blocks for multi-party threshold signing, written in pure Python.

## Modules

- `mpcsig.curve`: the secp256k1 group. `Secp256k1` creates scalars and points and decodes
  them (`scalar_from_bytes`, `point_from_bytes`, `lift_x`); `Secp256k1Scalar` and
  `Secp256k1Point` support `+`, `-`, unary `-` and (for scalars) `*`, with `act`,
  `act_on_base`, `invert`, `x_bytes`, `has_even_y` and compressed `to_bytes`.
  `make_int` and `from_hash` convert scalars and hash digests.
- `mpcsig.arith`: `Modulus`, which uses the CRT to speed up `exp` when built with
  `Modulus.from_factors`, plus the checks `is_valid_mod_n` and `is_in_interval`.
- `mpcsig.sample`: samplers for `Z_n` (`mod_n`), units (`unit_mod_n`), quadratic
  non-residues (`qnr`), Pedersen parameters (`pedersen`), scalars (`scalar`,
  `scalar_unit`, `scalar_point_pair`) and signed intervals (`interval`,
  `interval_scalar`). Randomness may be `None` (the operating system's source), a
  readable binary stream, or a `random.Random`-like object. `SamplingError` is raised
  when sampling gives up.
- `mpcsig.primes`: `small_primes`, `is_probable_prime`, and a sieve-based search for safe
  Blum primes (`try_blum_prime`, `paillier_primes`).
- `mpcsig.pool`: a thread `Pool` with `search` and `parallelize`, usable as a context
  manager, and `LockedReader`, which serialises reads from a shared stream.
- `mpcsig.party`: `PartyID`, the sorted `IDSlice` and `PointMap` with a CBOR encoding.
- `mpcsig.pedersen`: Pedersen commitment `Parameters` (`commit`, `verify`, `to_bytes`)
  and `validate_parameters`, which raises `PedersenError`.
- `mpcsig.paillier`: Paillier `PublicKey`, `SecretKey` and `Ciphertext`, with homomorphic
  addition and scaling, `key_gen`, `validate_n` and `validate_prime` (raising
  `PaillierError`).
- `mpcsig.taproot`: BIP-340 Schnorr keys (`gen_key`, `SecretKey.public`,
  `SecretKey.sign`, `PublicKey.verify`) and `tagged_hash`.
- `mpcsig.errors`: `ProtocolError`, which records the parties to blame.

## Installation

```
pip install mpcsig
```

## Examples

BIP-340 signatures:

```python
import hashlib
import secrets
from mpcsig.taproot import gen_key

secret_key, public_key = gen_key(secrets.SystemRandom())
digest = hashlib.sha256(b"hello").digest()
signature = secret_key.sign(digest, None)
assert public_key.verify(signature, digest)
```

Paillier encryption with homomorphic addition:

```python
from mpcsig.paillier import key_gen
from mpcsig.pool import Pool

with Pool() as pool:
    pk, sk = key_gen(pool, 512)

a, _ = pk.enc(20)
b, _ = pk.enc(-5)
assert sk.dec(a.add(pk, b)) == 15
```

Party identifiers and point maps:

```python
from mpcsig.curve import Secp256k1
from mpcsig.party import IDSlice, PointMap

ids = IDSlice(["carol", "alice", "bob"])
assert str(ids) == "alice, bob, carol"
assert ids.contains("bob")

group = Secp256k1()
points = PointMap({"alice": group.new_base_point()})
assert PointMap.from_bytes(group, points.to_bytes()).points == points.points
```

## What the package does not do

- It does not run signing or key-generation protocols: there is no round handling,
  message routing or session management. `ProtocolError` is only the error type that
  such a runner would raise.
- It has no polynomial secret sharing or Lagrange interpolation.
- It is pure Python and makes no claim of constant-time arithmetic.

## Running the tests

```
pip install -e ".[test]"
pytest
```