[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mpcsig"
version = "0.1.0"
description = "Building blocks for threshold signatures: secp256k1 arithmetic, Paillier encryption, Pedersen commitments and BIP-340 signatures"
requires-python = ">=3.10"
keywords = ["secp256k1", "paillier", "pedersen", "threshold", "mpc", "schnorr", "bip340", "taproot"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]
dependencies = [
    "cbor2",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["mpcsig"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
