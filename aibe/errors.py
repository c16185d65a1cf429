"""Exception hierarchy shared by the IBE engine, the proofs and the ledger."""


class AibeError(Exception):
    """Base class for every error raised by this package."""


# ============================
# IBE
# ============================

class IbeError(AibeError):
    pass


class GtInverseError(IbeError):
    """The pairing value could not be inverted during decryption."""


class OutOfBoundError(IbeError):
    """Bounded discrete log found no exponent in [0, bound)."""


# ============================
# Zero-knowledge proofs
# ============================

class ZkError(AibeError):
    pass


class VerificationError(ZkError):
    """Recomputed Fiat-Shamir challenge differs from the proof's challenge."""


# ============================
# Encoding
# ============================

class DecodeError(AibeError):
    """A byte blob is not a canonical encoding of the expected value."""


# ============================
# Ledger
# ============================

class LedgerError(AibeError):
    pass


class AccountNotRegisteredError(LedgerError):
    pass


class AccountExistsError(LedgerError):
    pass


class SelfTransferError(LedgerError):
    """Sender and receiver of a transfer are the same account."""


class KeyMismatchError(LedgerError):
    """A statement names a master public key other than the registered one."""
