"""Boneh-Franklin IBE with burn and transfer zero-knowledge proofs."""

from .bf_ibe import BFIbe, CipherText, CorrelatedEncryption, MasterKeyPair, PkIdCache
from .errors import (
    AibeError,
    DecodeError,
    GtInverseError,
    IbeError,
    OutOfBoundError,
    VerificationError,
    ZkError,
)
from .groups import PairingGroup, default_group
from .rng import HashDrbgRandomSource, RandomSource, SystemRandomSource
from .utils import (
    PedersenCommitment,
    baby_step_giant_step,
    hash_to_g2,
    hash_to_scalar,
    pedersen_commitment,
    scalar_to_int,
    to_scalar,
)

__all__ = [
    "BFIbe",
    "CipherText",
    "CorrelatedEncryption",
    "MasterKeyPair",
    "PkIdCache",
    "AibeError",
    "DecodeError",
    "GtInverseError",
    "IbeError",
    "OutOfBoundError",
    "VerificationError",
    "ZkError",
    "PairingGroup",
    "default_group",
    "HashDrbgRandomSource",
    "RandomSource",
    "SystemRandomSource",
    "PedersenCommitment",
    "baby_step_giant_step",
    "hash_to_g2",
    "hash_to_scalar",
    "pedersen_commitment",
    "scalar_to_int",
    "to_scalar",
]
