"""
Boneh-Franklin identity-based encryption with the message in the exponent.

Dan Boneh and Matthew K. Franklin. Identity-based encryption from the Weil
pairing. SIAM J. Comput., 32(3):586-615, 2003.

Putting the message in the exponent of e(g1, g2) makes ciphertexts for the
same identity additively homomorphic, at the price of a bounded discrete log
on decryption.

    >>> ibe = BFIbe()
    >>> rng = SystemRandomSource()
    >>> msk, mpk = ibe.generate_key(rng)
    >>> sk = ibe.extract("alice", msk)
    >>> ct = ibe.encrypt(35, "alice", mpk, rng)
    >>> int(ibe.decrypt(ct, "alice", sk, 100))
    35
"""

import logging
from collections import namedtuple

from petlib.bn import Bn

from .codec import Reader, Writer, encode_g1
from .errors import GtInverseError
from .groups import resolve
from .utils import baby_step_giant_step, hash_to_g2, identity_bytes, to_scalar

logger = logging.getLogger(__name__)


class CipherText(namedtuple("CipherText", ["c1", "c2"])):
    """(c1 in G1, c2 in GT)."""

    __slots__ = ()

    def to_bytes(self, group=None) -> bytes:
        return Writer(group).g1(self.c1).gt(self.c2).getvalue()

    @classmethod
    def from_bytes(cls, buf: bytes, group=None) -> "CipherText":
        reader = Reader(buf, group)
        ct = cls(reader.g1(), reader.gt())
        reader.finish()
        return ct


MasterKeyPair = namedtuple("MasterKeyPair", ["msk", "mpk"])

# ciphertexts: (ct1, ct2), hashed_ids: (h_id1, h_id2), r: the shared randomness
CorrelatedEncryption = namedtuple("CorrelatedEncryption", ["ciphertexts", "hashed_ids", "r"])


class BFIbe(object):

    def __init__(self, group=None):
        self.group = resolve(group)

    # ---------------------------
    # Keys
    # ---------------------------

    def generate_key(self, rng) -> MasterKeyPair:
        """Fresh master key pair; ``rng`` must be a cryptographic RandomSource."""
        msk = rng.random_scalar(self.group.order)
        return MasterKeyPair(msk, self.msk_to_mpk(msk))

    def msk_to_mpk(self, msk: Bn):
        return self.group.g1 * msk

    def extract(self, identity, msk: Bn):
        """sk_id = H(id) * msk."""
        return hash_to_g2(identity, self.group) * msk

    def pk_id(self, mpk, identity):
        """e(mpk, H(id)); constant per (mpk, id), see ``PkIdCache``."""
        return self.group.pair(mpk, hash_to_g2(identity, self.group))

    # ---------------------------
    # Encryption
    # ---------------------------

    def encrypt_internal(self, msg, identity, mpk, r: Bn, pk=None):
        """Encrypt with explicit randomness; also returns H(id) for provers."""
        h_id = hash_to_g2(identity, self.group)
        if pk is None:
            pk = self.group.pair(mpk, h_id)
        c1 = self.group.g1 * r
        c2 = self.group.gt_base(to_scalar(msg, self.group)) * self.group.gt_pow(pk, r)
        return CipherText(c1, c2), h_id

    def encrypt_with_randomness(self, msg, identity, mpk, r: Bn, pk=None) -> CipherText:
        ct, _ = self.encrypt_internal(msg, identity, mpk, r, pk=pk)
        return ct

    def encrypt(self, msg, identity, mpk, rng, pk=None) -> CipherText:
        r = rng.random_scalar(self.group.order)
        return self.encrypt_with_randomness(msg, identity, mpk, r, pk=pk)

    def encrypt_correlated(self, msg, ids, mpks, rng) -> CorrelatedEncryption:
        """
        Encrypt ``msg`` to two identities with one shared r, so both
        ciphertexts carry the same c1. H(id1), H(id2) and r are returned
        because the transfer proof needs them as witness.
        """
        r = rng.random_scalar(self.group.order)
        c1 = self.group.g1 * r
        c2_part1 = self.group.gt_base(to_scalar(msg, self.group))

        h_id1 = hash_to_g2(ids[0], self.group)
        ct1 = CipherText(c1, c2_part1 * self.group.pair(mpks[0], h_id1 * r))

        h_id2 = hash_to_g2(ids[1], self.group)
        ct2 = CipherText(c1, c2_part1 * self.group.pair(mpks[1], h_id2 * r))

        return CorrelatedEncryption((ct1, ct2), (h_id1, h_id2), r)

    def encrypt_public(self, amount) -> CipherText:
        """Zero-randomness encryption of a public amount (negative wraps mod order)."""
        return CipherText(self.group.inf1, self.group.gt_base(to_scalar(amount, self.group)))

    def zero_cipher(self, pk) -> CipherText:
        """Encryption of 0 with r = 1, built from pk_id alone."""
        return CipherText(self.group.g1, pk)

    # ---------------------------
    # Homomorphism
    # ---------------------------

    def add_ciphers(self, ct_a: CipherText, ct_b: CipherText) -> CipherText:
        """
        Sum of plaintexts. Only meaningful when both ciphertexts target the
        same identity: e(c1, sk_id) then cancels both randomness terms at once.
        """
        return CipherText(ct_a.c1 + ct_b.c1, ct_a.c2 * ct_b.c2)

    def sub_ciphers(self, ct_a: CipherText, ct_b: CipherText) -> CipherText:
        minus_one = self.group.order - 1
        return CipherText(ct_a.c1 + ct_b.c1 * minus_one, ct_a.c2 * self.group.gt_inv(ct_b.c2))

    # ---------------------------
    # Decryption
    # ---------------------------

    def decrypt(self, ct: CipherText, identity, sk_id, bound: int) -> Bn:
        """
        Recover msg in [0, bound) from c2 / e(c1, sk_id). ``identity`` only
        labels log lines; the key already binds it.
        """
        paired = self.group.pair(ct.c1, sk_id)
        inverse = self.group.gt_inv(paired)
        if paired * inverse != self.group.unity:
            raise GtInverseError("pairing value is not invertible in GT")
        masked = ct.c2 * inverse

        logger.debug("decrypting for %r with bound=%d", identity, bound)
        return baby_step_giant_step(masked, self.group.gt, bound, self.group)


class PkIdCache(object):
    """Memo of e(mpk, H(id)) keyed by (encoded mpk, identity bytes)."""

    def __init__(self, ibe: BFIbe):
        self.ibe = ibe
        self._values = {}

    def get(self, mpk, identity):
        key = (encode_g1(mpk, self.ibe.group), identity_bytes(identity))
        value = self._values.get(key)
        if value is None:
            value = self.ibe.pk_id(mpk, identity)
            self._values[key] = value
        return value

    def __len__(self):
        return len(self._values)
