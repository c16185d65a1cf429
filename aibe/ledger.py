"""
Reference consumer of the core: per-identity encrypted balances.

Balances are stored as opaque base64 ciphertexts behind a ``BalanceStore``,
next to the master public key each identity registered with. The ledger only
ever adds, subtracts and verifies. It never decrypts and never sees a secret
key.
"""

import logging

from .bf_ibe import BFIbe, CipherText
from .codec import decode_g1, encode_g1, from_base64, to_base64
from .errors import (
    AccountExistsError,
    AccountNotRegisteredError,
    DecodeError,
    KeyMismatchError,
    SelfTransferError,
    VerificationError,
)
from .zk.burn import BurnVerifier
from .zk.transfer import TransferStatement, TransferVerifier

logger = logging.getLogger(__name__)


# ============================
# Storage
# ============================

class BalanceStore(object):
    """Key-value service: identity -> base64 ciphertext, identity -> base64 mpk."""

    def get(self, identity):
        raise NotImplementedError

    def put(self, identity, blob: str):
        raise NotImplementedError

    def get_key(self, identity):
        raise NotImplementedError

    def put_key(self, identity, blob: str):
        raise NotImplementedError

    def __contains__(self, identity):
        return self.get(identity) is not None


class InMemoryBalanceStore(BalanceStore):

    def __init__(self):
        self._balances = {}
        self._keys = {}

    def get(self, identity):
        return self._balances.get(identity)

    def put(self, identity, blob: str):
        self._balances[identity] = blob

    def get_key(self, identity):
        return self._keys.get(identity)

    def put_key(self, identity, blob: str):
        self._keys[identity] = blob

    def __len__(self):
        return len(self._balances)


# ============================
# Ledger
# ============================

class ConfidentialLedger(object):

    def __init__(self, store: BalanceStore, group=None):
        self.store = store
        self.ibe = BFIbe(group)
        self.group = self.ibe.group

    # ---------------------------
    # Blob helpers
    # ---------------------------

    def _load(self, identity) -> CipherText:
        blob = self.store.get(identity)
        if blob is None:
            raise AccountNotRegisteredError(f"no account for identity {identity!r}")
        return CipherText.from_bytes(from_base64(blob), self.group)

    def _save(self, identity, ct: CipherText):
        self.store.put(identity, to_base64(ct.to_bytes(self.group)))

    def _check_key(self, identity, mpk):
        blob = self.store.get_key(identity)
        if blob is None:
            raise AccountNotRegisteredError(f"no account for identity {identity!r}")
        if from_base64(blob) != encode_g1(mpk, self.group):
            raise KeyMismatchError(f"statement key is not the one {identity!r} registered")

    def balance_of(self, identity) -> CipherText:
        return self._load(identity)

    def mpk_of(self, identity):
        blob = self.store.get_key(identity)
        if blob is None:
            raise AccountNotRegisteredError(f"no account for identity {identity!r}")
        return decode_g1(from_base64(blob), self.group)

    # ---------------------------
    # Operations
    # ---------------------------

    def register(self, identity, mpk):
        """Open an account holding an encryption of zero under (mpk, identity)."""
        if identity in self.store:
            raise AccountExistsError(f"identity {identity!r} already registered")
        self.store.put_key(identity, to_base64(encode_g1(mpk, self.group)))
        self._save(identity, self.ibe.zero_cipher(self.ibe.pk_id(mpk, identity)))
        logger.info("registered %r", identity)

    def deposit(self, identity, amount: int):
        if amount < 0:
            raise ValueError("amount must be non-negative")
        balance = self._load(identity)
        self._save(identity, self.ibe.add_ciphers(balance, self.ibe.encrypt_public(amount)))
        logger.info("deposit %d to %r", amount, identity)

    def withdraw(self, identity, amount: int):
        if amount < 0:
            raise ValueError("amount must be non-negative")
        balance = self._load(identity)
        self._save(identity, self.ibe.add_ciphers(balance, self.ibe.encrypt_public(-amount)))
        logger.info("withdraw %d from %r", amount, identity)

    def verify_burn(self, statement_blob, proof_blob):
        BurnVerifier.verify_encoded(_blob(statement_blob), _blob(proof_blob), self.group)
        logger.info("burn proof verified")

    def verify_transfer(self, statement_blob, proof_blob) -> TransferStatement:
        statement = TransferVerifier.verify_encoded(_blob(statement_blob), _blob(proof_blob), self.group)
        logger.info("transfer proof verified")
        return statement

    def transfer(self, sender, receiver, statement_blob, proof_blob):
        """
        Verify the transfer proof, check it names the registered keys and was
        made against the sender's current balance, then debit (c1, c2) and
        credit (c1, c2_bar).
        """
        if sender == receiver:
            raise SelfTransferError(f"{sender!r} cannot transfer to itself")

        statement = self.verify_transfer(statement_blob, proof_blob)
        self._check_key(sender, statement.y)
        self._check_key(receiver, statement.y_bar)

        sender_balance = self._load(sender)
        receiver_balance = self._load(receiver)

        sent = CipherText(statement.c1, statement.c2)
        received = CipherText(statement.c1, statement.c2_bar)

        remaining = self.ibe.sub_ciphers(sender_balance, sent)
        expected = CipherText(statement.c1_tilde, statement.c2_tilde)
        if remaining.to_bytes(self.group) != expected.to_bytes(self.group):
            raise VerificationError("transfer statement does not match the sender's balance")

        self._save(sender, remaining)
        self._save(receiver, self.ibe.add_ciphers(receiver_balance, received))
        logger.info("transfer %r -> %r applied", sender, receiver)


def _blob(value) -> bytes:
    """Accept raw bytes or base64 text."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    try:
        return from_base64(value)
    except DecodeError as exc:
        raise VerificationError("blob is not valid base64") from exc
