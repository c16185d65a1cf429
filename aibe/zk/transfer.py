"""
Transfer proof: a confidential transfer from identity ``id`` (key y) to
``id_bar`` (key y_bar) is well formed.

Public statement:
    h1                      Pedersen base
    y, y_bar                sender / receiver master public keys
    (c1, c2), (c1, c2_bar)  correlated encryptions of the amount b*
    (c1_tilde, c2_tilde)    sender balance minus the transfer, encrypting b'
    c_b_star, c_b_prime     Pedersen commitments to b* and b'

Witness: r, s, r*, r', b*, b', h_id, h_id_bar, sk_id. Ten relations are folded
into one Fiat-Shamir challenge; transcript order is d_y, d_1, d_b_star,
d_b_prime, r, r_bar, r_sk, d_2, d_2_bar, d_2_tilde. Range proofs on the two
commitments are left to an external Bulletproofs implementation.
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
class TransferStatement:
    h1: object          # G1
    y: object           # G1
    y_bar: object       # G1
    c1: object          # G1
    c2: object          # GT
    c2_bar: object      # GT
    c1_tilde: object    # G1
    c2_tilde: object    # GT
    c_b_star: object    # G1
    c_b_prime: object   # G1

    def to_bytes(self, group=None) -> bytes:
        return (Writer(group)
                .g1(self.h1).g1(self.y).g1(self.y_bar)
                .g1(self.c1).gt(self.c2).gt(self.c2_bar)
                .g1(self.c1_tilde).gt(self.c2_tilde)
                .g1(self.c_b_star).g1(self.c_b_prime)
                .getvalue())

    @classmethod
    def from_bytes(cls, buf: bytes, group=None) -> "TransferStatement":
        reader = Reader(buf, group)
        statement = cls(
            h1=reader.g1(),
            y=reader.g1(),
            y_bar=reader.g1(),
            c1=reader.g1(),
            c2=reader.gt(),
            c2_bar=reader.gt(),
            c1_tilde=reader.g1(),
            c2_tilde=reader.gt(),
            c_b_star=reader.g1(),
            c_b_prime=reader.g1(),
        )
        reader.finish()
        return statement

    @classmethod
    def build(cls, ibe, h1, mpks, balance, correlated, c_b_star, c_b_prime) -> "TransferStatement":
        """
        Assemble the statement from the sender's balance ciphertext, the
        correlated encryption of the amount and the two commitments.
        """
        ct, ct_bar = correlated.ciphertexts
        remaining = ibe.sub_ciphers(balance, ct)
        return cls(
            h1=h1,
            y=mpks[0],
            y_bar=mpks[1],
            c1=ct.c1,
            c2=ct.c2,
            c2_bar=ct_bar.c2,
            c1_tilde=remaining.c1,
            c2_tilde=remaining.c2,
            c_b_star=c_b_star,
            c_b_prime=c_b_prime,
        )


@dataclass(frozen=True)
class TransferWitness:
    r: Bn
    s: Bn
    r_star: Bn
    r_prime: Bn
    b_star: Bn
    b_prime: Bn
    h_id: object        # G2
    h_id_bar: object    # G2
    sk_id: object       # G2


_PROOF_SCALARS = ("x", "zr", "zs", "zr_star", "zr_prime", "zb_star", "zb_prime")
_PROOF_POINTS = ("z_id", "z_id_prime", "z_id_bar", "z_id_bar_prime", "z_sk")


@dataclass(frozen=True)
class TransferProof:
    x: Bn
    zr: Bn
    zs: Bn
    zr_star: Bn
    zr_prime: Bn
    zb_star: Bn
    zb_prime: Bn
    z_id: object            # G2
    z_id_prime: object      # G2
    z_id_bar: object        # G2
    z_id_bar_prime: object  # G2
    z_sk: object            # G2

    def to_bytes(self, group=None) -> bytes:
        writer = Writer(group)
        for name in _PROOF_SCALARS:
            writer.scalar(getattr(self, name))
        for name in _PROOF_POINTS:
            writer.g2(getattr(self, name))
        return writer.getvalue()

    @classmethod
    def from_bytes(cls, buf: bytes, group=None) -> "TransferProof":
        reader = Reader(buf, group)
        fields = {name: reader.scalar() for name in _PROOF_SCALARS}
        fields.update({name: reader.g2() for name in _PROOF_POINTS})
        reader.finish()
        return cls(**fields)


def _challenge(commitments, group) -> Bn:
    d_y, d_1, d_b_star, d_b_prime, r, r_bar, r_sk, d_2, d_2_bar, d_2_tilde = commitments
    script = (Writer(group)
              .g1(d_y).g1(d_1).g1(d_b_star).g1(d_b_prime)
              .gt(r).gt(r_bar).gt(r_sk)
              .gt(d_2).gt(d_2_bar).gt(d_2_tilde)
              .getvalue())
    return hash_to_scalar(script, group)


class TransferProver(object):

    def __init__(self, rng, group=None):
        self.rng = rng
        self.group = resolve(group)

    def generate_proof(self, statement: TransferStatement, witness: TransferWitness) -> TransferProof:
        G = self.group
        p = G.order

        def rs(): return self.rng.random_scalar(p)
        mr = rs()
        ms = rs()
        mr_star = rs()
        mr_prime = rs()
        mb_star = rs()
        mb_prime = rs()

        m_id = G.random_g2(self.rng)
        m_id_prime = G.random_g2(self.rng)
        m_id_bar = G.random_g2(self.rng)
        m_id_bar_prime = G.random_g2(self.rng)
        m_sk = G.random_g2(self.rng)

        d_y = G.g1 * ms
        d_1 = G.g1 * mr
        d_b_star = G.g1 * mb_star + statement.h1 * mr_star
        d_b_prime = G.g1 * mb_prime + statement.h1 * mr_prime

        r = G.pair(statement.c1, m_id) * G.pair(G.neg_g1, m_id_prime)
        r_bar = G.pair(statement.c1, m_id_bar) * G.pair(G.neg_g1, m_id_bar_prime)
        r_sk = G.pair(statement.y, m_id) * G.pair(G.neg_g1, m_sk)

        # d_2 and d_2_bar share mb_star: both ciphertexts carry the same amount
        d_2 = G.gt_base(mb_star) * G.pair(statement.y, m_id_prime)
        d_2_bar = G.gt_base(mb_star) * G.pair(statement.y_bar, m_id_bar_prime)
        d_2_tilde = G.gt_base(mb_prime) * G.pair(statement.c1_tilde, m_sk)

        x = _challenge((d_y, d_1, d_b_star, d_b_prime, r, r_bar, r_sk, d_2, d_2_bar, d_2_tilde), G)

        # Derived from the raw witness on every call, never stored
        h_id_prime = witness.h_id * witness.r
        h_id_bar_prime = witness.h_id_bar * witness.r

        return TransferProof(
            x=x,
            zr=(x * witness.r + mr) % p,
            zs=(x * witness.s + ms) % p,
            zr_star=(x * witness.r_star + mr_star) % p,
            zr_prime=(x * witness.r_prime + mr_prime) % p,
            zb_star=(x * witness.b_star + mb_star) % p,
            zb_prime=(x * witness.b_prime + mb_prime) % p,
            z_id=witness.h_id * x + m_id,
            z_id_prime=h_id_prime * x + m_id_prime,
            z_id_bar=witness.h_id_bar * x + m_id_bar,
            z_id_bar_prime=h_id_bar_prime * x + m_id_bar_prime,
            z_sk=witness.sk_id * x + m_sk,
        )


class TransferVerifier(object):

    @staticmethod
    def verify_proof(statement: TransferStatement, proof: TransferProof, group=None):
        """Return None on success, raise VerificationError otherwise."""
        G = resolve(group)
        minus_x = G.neg(proof.x)

        d_y = G.g1 * proof.zs + statement.y * minus_x
        d_1 = G.g1 * proof.zr + statement.c1 * minus_x
        d_b_star = G.g1 * proof.zb_star + statement.h1 * proof.zr_star + statement.c_b_star * minus_x
        d_b_prime = G.g1 * proof.zb_prime + statement.h1 * proof.zr_prime + statement.c_b_prime * minus_x

        r = G.pair(statement.c1, proof.z_id) * G.pair(G.neg_g1, proof.z_id_prime)
        r_bar = G.pair(statement.c1, proof.z_id_bar) * G.pair(G.neg_g1, proof.z_id_bar_prime)
        r_sk = G.pair(statement.y, proof.z_id) * G.pair(G.neg_g1, proof.z_sk)

        d_2 = (G.gt_base(proof.zb_star)
               * G.pair(statement.y, proof.z_id_prime)
               * G.gt_pow(statement.c2, minus_x))
        d_2_bar = (G.gt_base(proof.zb_star)
                   * G.pair(statement.y_bar, proof.z_id_bar_prime)
                   * G.gt_pow(statement.c2_bar, minus_x))
        d_2_tilde = (G.gt_base(proof.zb_prime)
                     * G.pair(statement.c1_tilde, proof.z_sk)
                     * G.gt_pow(statement.c2_tilde, minus_x))

        x = _challenge((d_y, d_1, d_b_star, d_b_prime, r, r_bar, r_sk, d_2, d_2_bar, d_2_tilde), G)
        if x != proof.x:
            logger.debug("transfer proof rejected: challenge mismatch")
            raise VerificationError("transfer proof challenge mismatch")

    @classmethod
    def verify_encoded(cls, statement_bytes: bytes, proof_bytes: bytes, group=None):
        """
        Decode both blobs and verify; malformed blobs count as a failed proof.
        Returns the decoded statement.
        """
        try:
            statement = TransferStatement.from_bytes(statement_bytes, group)
            proof = TransferProof.from_bytes(proof_bytes, group)
        except DecodeError as exc:
            raise VerificationError(f"malformed transfer statement or proof: {exc}") from exc
        cls.verify_proof(statement, proof, group)
        return statement
