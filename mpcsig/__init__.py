"""Threshold-signature building blocks: secp256k1, Paillier, Pedersen and BIP-340 signatures."""

__version__ = "0.1.0"