"""Sigma-protocol NIZKs over BF-IBE ciphertexts."""

from .burn import BurnProof, BurnProver, BurnStatement, BurnVerifier, BurnWitness
from .transfer import (
    TransferProof,
    TransferProver,
    TransferStatement,
    TransferVerifier,
    TransferWitness,
)

__all__ = [
    "BurnProof",
    "BurnProver",
    "BurnStatement",
    "BurnVerifier",
    "BurnWitness",
    "TransferProof",
    "TransferProver",
    "TransferStatement",
    "TransferVerifier",
    "TransferWitness",
]
