import unittest

from petlib.bn import Bn

from aibe.bf_ibe import BFIbe, CipherText, PkIdCache
from aibe.codec import encode_g1
from aibe.errors import OutOfBoundError
from aibe.groups import default_group
from aibe.rng import SystemRandomSource
from aibe.utils import hash_to_g2, scalar_to_int


class TestBFIbe(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.G = default_group()
        cls.ibe = BFIbe(cls.G)
        cls.rng = SystemRandomSource()
        cls.msk, cls.mpk = cls.ibe.generate_key(cls.rng)
        cls.sk = cls.ibe.extract("zico", cls.msk)

    def test_zico_scenario(self):
        ct = self.ibe.encrypt(35, "zico", self.mpk, self.rng)
        self.assertEqual(scalar_to_int(self.ibe.decrypt(ct, "zico", self.sk, 100)), 35)

    def test_key_relations(self):
        self.assertEqual(self.mpk, self.G.g1 * self.msk)
        self.assertEqual(self.ibe.msk_to_mpk(self.msk), self.mpk)
        self.assertEqual(self.sk, hash_to_g2("zico", self.G) * self.msk)

    def test_round_trip(self):
        for plain in (0, 1, 17, 99):
            ct = self.ibe.encrypt(plain, "zico", self.mpk, self.rng)
            self.assertEqual(scalar_to_int(self.ibe.decrypt(ct, "zico", self.sk, 100)), plain)

    def test_explicit_randomness(self):
        r = self.rng.random_scalar(self.G.order)
        ct, h_id = self.ibe.encrypt_internal(Bn(8), "zico", self.mpk, r)
        self.assertEqual(ct.c1, self.G.g1 * r)
        self.assertEqual(h_id, hash_to_g2("zico", self.G))
        self.assertEqual(ct, self.ibe.encrypt_with_randomness(Bn(8), "zico", self.mpk, r))

    def test_homomorphic_addition(self):
        a = self.ibe.encrypt(30, "zico", self.mpk, self.rng)
        b = self.ibe.encrypt(45, "zico", self.mpk, self.rng)
        total = self.ibe.add_ciphers(a, b)
        self.assertEqual(scalar_to_int(self.ibe.decrypt(total, "zico", self.sk, 100)), 75)

    def test_homomorphic_subtraction(self):
        a = self.ibe.encrypt(60, "zico", self.mpk, self.rng)
        b = self.ibe.encrypt(40, "zico", self.mpk, self.rng)
        diff = self.ibe.sub_ciphers(a, b)
        self.assertEqual(scalar_to_int(self.ibe.decrypt(diff, "zico", self.sk, 100)), 20)

    def test_public_amount_delta(self):
        ct = self.ibe.encrypt(10, "zico", self.mpk, self.rng)
        ct = self.ibe.add_ciphers(ct, self.ibe.encrypt_public(25))
        self.assertEqual(scalar_to_int(self.ibe.decrypt(ct, "zico", self.sk, 100)), 35)
        ct = self.ibe.add_ciphers(ct, self.ibe.encrypt_public(-5))
        self.assertEqual(scalar_to_int(self.ibe.decrypt(ct, "zico", self.sk, 100)), 30)

    def test_zero_cipher_decrypts_to_zero(self):
        ct = self.ibe.zero_cipher(self.ibe.pk_id(self.mpk, "zico"))
        self.assertEqual(scalar_to_int(self.ibe.decrypt(ct, "zico", self.sk, 100)), 0)

    def test_correlated_encryption(self):
        msk2, mpk2 = self.ibe.generate_key(self.rng)
        sk2 = self.ibe.extract("zico2", msk2)
        (ct1, ct2), (h1, h2), r = self.ibe.encrypt_correlated(40, ("zico", "zico2"), (self.mpk, mpk2), self.rng)

        self.assertEqual(encode_g1(ct1.c1, self.G), encode_g1(ct2.c1, self.G))
        self.assertEqual(ct1.c1, self.G.g1 * r)
        self.assertEqual(h1, hash_to_g2("zico", self.G))
        self.assertEqual(h2, hash_to_g2("zico2", self.G))
        self.assertEqual(scalar_to_int(self.ibe.decrypt(ct1, "zico", self.sk, 100)), 40)
        self.assertEqual(scalar_to_int(self.ibe.decrypt(ct2, "zico2", sk2, 100)), 40)

    def test_out_of_bound_plaintext(self):
        ct = self.ibe.encrypt(150, "zico", self.mpk, self.rng)
        with self.assertRaises(OutOfBoundError):
            self.ibe.decrypt(ct, "zico", self.sk, 100)

    def test_wrong_identity_key_fails(self):
        ct = self.ibe.encrypt(12, "zico", self.mpk, self.rng)
        other = self.ibe.extract("mallory", self.msk)
        with self.assertRaises(OutOfBoundError):
            self.ibe.decrypt(ct, "zico", other, 100)

    def test_mixed_identities_break_decryption(self):
        a = self.ibe.encrypt(3, "zico", self.mpk, self.rng)
        b = self.ibe.encrypt(4, "mallory", self.mpk, self.rng)
        with self.assertRaises(OutOfBoundError):
            self.ibe.decrypt(self.ibe.add_ciphers(a, b), "zico", self.sk, 100)


class TestPkIdCache(unittest.TestCase):
    def test_cached_value_matches_pairing(self):
        G = default_group()
        ibe = BFIbe(G)
        rng = SystemRandomSource()
        msk, mpk = ibe.generate_key(rng)
        cache = PkIdCache(ibe)

        pk = cache.get(mpk, "alice")
        self.assertEqual(pk, G.pair(mpk, hash_to_g2("alice", G)))
        self.assertEqual(cache.get(mpk, "alice"), pk)
        self.assertEqual(len(cache), 1)

        ct = ibe.encrypt(9, "alice", mpk, rng, pk=pk)
        sk = ibe.extract("alice", msk)
        self.assertEqual(scalar_to_int(ibe.decrypt(ct, "alice", sk, 100)), 9)

    def test_distinct_identities_cached_separately(self):
        ibe = BFIbe()
        _, mpk = ibe.generate_key(SystemRandomSource())
        cache = PkIdCache(ibe)
        self.assertNotEqual(cache.get(mpk, "alice"), cache.get(mpk, "bob"))
        self.assertEqual(len(cache), 2)


class TestCipherTextBlob(unittest.TestCase):
    def test_blob_survives_transport(self):
        ibe = BFIbe()
        rng = SystemRandomSource()
        msk, mpk = ibe.generate_key(rng)
        ct = ibe.encrypt(55, "zico", mpk, rng)
        restored = CipherText.from_bytes(ct.to_bytes())
        sk = ibe.extract("zico", msk)
        self.assertEqual(scalar_to_int(ibe.decrypt(restored, "zico", sk, 100)), 55)


if __name__ == "__main__":
    unittest.main()
