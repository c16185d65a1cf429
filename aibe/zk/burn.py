"""
Burn proof: knowledge of (b, s, h_id, sk_id) such that

    y = g1 * s,   sk_id = h_id * s,   c2_id / e(c1_id, sk_id) = e(g1, g2)^b

i.e. the prover holds the master secret behind ``y`` and the statement
ciphertext decrypts to ``b`` under that identity, without revealing b or any
key. Sigma protocol made non-interactive with Fiat-Shamir over the three
commitments (d_y, r, d_id).
"""

import logging
from dataclasses import dataclass

from petlib.bn import Bn

from ..codec import Reader, Writer
from ..errors import DecodeError, VerificationError
from ..groups import resolve
from ..utils import hash_to_scalar

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BurnStatement:
    y: object       # G1, master public key
    c1_id: object   # G1
    c2_id: object   # GT

    def to_bytes(self, group=None) -> bytes:
        return Writer(group).g1(self.y).g1(self.c1_id).gt(self.c2_id).getvalue()

    @classmethod
    def from_bytes(cls, buf: bytes, group=None) -> "BurnStatement":
        reader = Reader(buf, group)
        statement = cls(y=reader.g1(), c1_id=reader.g1(), c2_id=reader.gt())
        reader.finish()
        return statement

    @classmethod
    def from_ciphertext(cls, mpk, ct) -> "BurnStatement":
        return cls(y=mpk, c1_id=ct.c1, c2_id=ct.c2)


@dataclass(frozen=True)
class BurnWitness:
    b: Bn
    s: Bn
    h_id: object    # G2
    sk_id: object   # G2


@dataclass(frozen=True)
class BurnProof:
    x: Bn
    zb: Bn
    zs: Bn
    z_id: object    # G2
    z_sk: object    # G2

    def to_bytes(self, group=None) -> bytes:
        return (Writer(group)
                .scalar(self.x).scalar(self.zb).scalar(self.zs)
                .g2(self.z_id).g2(self.z_sk)
                .getvalue())

    @classmethod
    def from_bytes(cls, buf: bytes, group=None) -> "BurnProof":
        reader = Reader(buf, group)
        proof = cls(
            x=reader.scalar(),
            zb=reader.scalar(),
            zs=reader.scalar(),
            z_id=reader.g2(),
            z_sk=reader.g2(),
        )
        reader.finish()
        return proof


def _challenge(d_y, r, d_id, group) -> Bn:
    script = Writer(group).g1(d_y).gt(r).gt(d_id).getvalue()
    return hash_to_scalar(script, group)


class BurnProver(object):
    """Holds the caller's RandomSource; one fresh set of blindings per proof."""

    def __init__(self, rng, group=None):
        self.rng = rng
        self.group = resolve(group)

    def generate_proof(self, statement: BurnStatement, witness: BurnWitness) -> BurnProof:
        G = self.group
        p = G.order

        mb = self.rng.random_scalar(p)
        ms = self.rng.random_scalar(p)
        m_id = G.random_g2(self.rng)
        m_sk = G.random_g2(self.rng)

        d_y = G.g1 * ms
        r = G.pair(statement.y, m_id) * G.pair(G.neg_g1, m_sk)
        d_id = G.gt_base(mb) * G.pair(statement.c1_id, m_sk)

        x = _challenge(d_y, r, d_id, G)

        return BurnProof(
            x=x,
            zb=(x * witness.b + mb) % p,
            zs=(x * witness.s + ms) % p,
            z_id=witness.h_id * x + m_id,
            z_sk=witness.sk_id * x + m_sk,
        )


class BurnVerifier(object):

    @staticmethod
    def verify_proof(statement: BurnStatement, proof: BurnProof, group=None):
        """Return None on success, raise VerificationError otherwise."""
        G = resolve(group)
        minus_x = G.neg(proof.x)

        d_y = G.g1 * proof.zs + statement.y * minus_x
        r = G.pair(statement.y, proof.z_id) * G.pair(G.neg_g1, proof.z_sk)
        d_id = (G.gt_base(proof.zb)
                * G.pair(statement.c1_id, proof.z_sk)
                * G.gt_pow(statement.c2_id, minus_x))

        x = _challenge(d_y, r, d_id, G)
        if x != proof.x:
            logger.debug("burn proof rejected: challenge mismatch")
            raise VerificationError("burn proof challenge mismatch")

    @classmethod
    def verify_encoded(cls, statement_bytes: bytes, proof_bytes: bytes, group=None):
        """
        Decode both blobs and verify; malformed blobs count as a failed proof.
        Returns the decoded statement.
        """
        try:
            statement = BurnStatement.from_bytes(statement_bytes, group)
            proof = BurnProof.from_bytes(proof_bytes, group)
        except DecodeError as exc:
            raise VerificationError(f"malformed burn statement or proof: {exc}") from exc
        cls.verify_proof(statement, proof, group)
        return statement
