import dataclasses
import unittest

from aibe.bf_ibe import BFIbe, CipherText
from aibe.errors import VerificationError
from aibe.groups import default_group
from aibe.rng import SystemRandomSource
from aibe.utils import pedersen_commitment, scalar_to_int, to_scalar
from aibe.zk.transfer import (
    TransferProof,
    TransferProver,
    TransferStatement,
    TransferVerifier,
    TransferWitness,
)

from .helpers import field_spans, flip_bit

STATEMENT_LAYOUT = ["g1", "g1", "g1", "g1", "gt", "gt", "g1", "gt", "g1", "g1"]
PROOF_LAYOUT = ["scalar"] * 7 + ["g2"] * 5


def make_transfer(G, rng, balance=60, amount=40, ids=("zico1", "zico2"), balance_ct=None, keys=None):
    """Statement/witness for sending ``amount`` out of ``balance``; returns the keys too."""
    ibe = BFIbe(G)
    if keys is None:
        keys = (ibe.generate_key(rng), ibe.generate_key(rng))
    (msk1, mpk1), (msk2, mpk2) = keys
    sk1 = ibe.extract(ids[0], msk1)

    b_star = to_scalar(amount, G)
    b_prime = to_scalar(balance - amount, G)
    if balance_ct is None:
        balance_ct = ibe.encrypt(balance, ids[0], mpk1, rng)
    correlated = ibe.encrypt_correlated(b_star, ids, (mpk1, mpk2), rng)

    h1 = G.random_g1(rng)
    r_star, c_b_star = pedersen_commitment(b_star, h1, rng, G)
    r_prime, c_b_prime = pedersen_commitment(b_prime, h1, rng, G)

    statement = TransferStatement.build(ibe, h1, (mpk1, mpk2), balance_ct, correlated, c_b_star, c_b_prime)
    h_id, h_id_bar = correlated.hashed_ids
    witness = TransferWitness(
        r=correlated.r,
        s=msk1,
        r_star=r_star,
        r_prime=r_prime,
        b_star=b_star,
        b_prime=b_prime,
        h_id=h_id,
        h_id_bar=h_id_bar,
        sk_id=sk1,
    )
    return statement, witness, keys


class TestTransferProof(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.G = default_group()
        cls.rng = SystemRandomSource()
        cls.ibe = BFIbe(cls.G)
        cls.statement, cls.witness, cls.keys = make_transfer(cls.G, cls.rng)
        cls.proof = TransferProver(cls.rng, cls.G).generate_proof(cls.statement, cls.witness)

    def test_completeness(self):
        self.assertIsNone(TransferVerifier.verify_proof(self.statement, self.proof, self.G))

    def test_encoded_completeness(self):
        decoded = TransferVerifier.verify_encoded(self.statement.to_bytes(self.G), self.proof.to_bytes(self.G), self.G)
        self.assertEqual(decoded, self.statement)

    def test_statement_ciphertexts_decrypt(self):
        (msk1, _), (msk2, _) = self.keys
        sk1 = self.ibe.extract("zico1", msk1)
        sk2 = self.ibe.extract("zico2", msk2)
        s = self.statement
        self.assertEqual(scalar_to_int(self.ibe.decrypt(CipherText(s.c1, s.c2), "zico1", sk1, 100)), 40)
        self.assertEqual(scalar_to_int(self.ibe.decrypt(CipherText(s.c1, s.c2_bar), "zico2", sk2, 100)), 40)
        self.assertEqual(scalar_to_int(self.ibe.decrypt(CipherText(s.c1_tilde, s.c2_tilde), "zico1", sk1, 100)), 20)

    def test_corrupted_zb_star_rejected(self):
        bad = dataclasses.replace(self.proof, zb_star=(self.proof.zb_star + 1) % self.G.order)
        with self.assertRaises(VerificationError):
            TransferVerifier.verify_proof(self.statement, bad, self.G)

    def test_mismatched_amount_rejected(self):
        # Witness claims 41 while the ciphertexts carry 40
        bad = dataclasses.replace(self.witness, b_star=to_scalar(41, self.G))
        proof = TransferProver(self.rng, self.G).generate_proof(self.statement, bad)
        with self.assertRaises(VerificationError):
            TransferVerifier.verify_proof(self.statement, proof, self.G)

    def test_mismatched_remaining_balance_rejected(self):
        bad = dataclasses.replace(self.witness, b_prime=to_scalar(30, self.G))
        proof = TransferProver(self.rng, self.G).generate_proof(self.statement, bad)
        with self.assertRaises(VerificationError):
            TransferVerifier.verify_proof(self.statement, proof, self.G)

    def test_swapped_receiver_ciphertext_rejected(self):
        bad = dataclasses.replace(self.statement, c2_bar=self.statement.c2)
        with self.assertRaises(VerificationError):
            TransferVerifier.verify_proof(bad, self.proof, self.G)

    def test_statement_bit_flips_rejected(self):
        blob = self.statement.to_bytes(self.G)
        proof_blob = self.proof.to_bytes(self.G)
        spans = field_spans(STATEMENT_LAYOUT, self.G)
        self.assertEqual(len(spans), 10)
        for offset, width in spans:
            with self.subTest(offset=offset):
                with self.assertRaises(VerificationError):
                    TransferVerifier.verify_encoded(flip_bit(blob, offset, width), proof_blob, self.G)

    def test_proof_bit_flips_rejected(self):
        statement_blob = self.statement.to_bytes(self.G)
        blob = self.proof.to_bytes(self.G)
        spans = field_spans(PROOF_LAYOUT, self.G)
        self.assertEqual(len(spans), 12)
        for offset, width in spans:
            with self.subTest(offset=offset):
                with self.assertRaises(VerificationError):
                    TransferVerifier.verify_encoded(statement_blob, flip_bit(blob, offset, width), self.G)

    def test_blob_round_trip(self):
        self.assertEqual(TransferProof.from_bytes(self.proof.to_bytes(self.G), self.G), self.proof)
        self.assertEqual(TransferStatement.from_bytes(self.statement.to_bytes(self.G), self.G), self.statement)

    def test_truncated_proof_rejected(self):
        blob = self.proof.to_bytes(self.G)
        with self.assertRaises(VerificationError):
            TransferVerifier.verify_encoded(self.statement.to_bytes(self.G), blob[:-1], self.G)


if __name__ == "__main__":
    unittest.main()
