import hashlib
import logging
import math
from collections import namedtuple

from petlib.bn import Bn

from .constants import IDENTITY_ENCODING
from .errors import OutOfBoundError
from .groups import resolve

logger = logging.getLogger(__name__)

PedersenCommitment = namedtuple("PedersenCommitment", ["r", "commitment"])


# ============================
# Scalars
# ============================

def to_scalar(value, group=None) -> Bn:
    """
    Accept Bn | int (any size or sign) | bytes and return a Bn in [0, order).
    Large ints go through bytes to dodge the petlib Bn(int) range limit.
    """
    group = resolve(group)
    if isinstance(value, Bn):
        return value % group.order
    if isinstance(value, bool):
        raise TypeError("bool is not a scalar")
    if isinstance(value, int):
        magnitude = abs(value)
        bl = max(1, (magnitude.bit_length() + 7) // 8)
        bn = Bn.from_binary(magnitude.to_bytes(bl, "big"))
        return group.neg(bn) if value < 0 else bn % group.order
    if isinstance(value, (bytes, bytearray)):
        return Bn.from_binary(bytes(value)) % group.order
    raise TypeError(f"Unsupported type for scalar: {type(value)}")


def scalar_to_int(x: Bn) -> int:
    return int.from_bytes(x.binary(), "big")


def identity_bytes(identity) -> bytes:
    if isinstance(identity, str):
        return identity.encode(IDENTITY_ENCODING)
    return bytes(identity)


# ============================
# Hashing
# ============================

def hash_to_scalar(data: bytes, group=None) -> Bn:
    """SHA-256 of ``data`` read big-endian, reduced mod the group order."""
    group = resolve(group)
    digest = hashlib.sha256(data).digest()
    return Bn.from_binary(digest) % group.order


def hash_to_g2(data, group=None):
    """
    Identity-to-point map g2 * H(data). Not a real hash-to-curve: the
    discrete log of the output is public, which the scheme tolerates only
    because every party derives it the same way.
    """
    group = resolve(group)
    return group.g2 * hash_to_scalar(identity_bytes(data), group)


# ============================
# Bounded discrete log
# ============================

def _ceil_sqrt(n: int) -> int:
    root = math.isqrt(n)
    return root if root * root == n else root + 1


def baby_step_giant_step(h, g, bound: int, group=None) -> Bn:
    """
    Solve h = g^x for x in [0, bound) in O(sqrt(bound)) GT operations.
    Table keys are canonical GT encodings, so equal elements always collide.
    """
    if bound < 0:
        raise ValueError("bound must be non-negative")
    group = resolve(group)

    m = _ceil_sqrt(bound) + 1

    # Baby steps: g^i -> i
    table = {}
    x = group.unity
    for i in range(m + 1):
        table.setdefault(x.export(), i)
        x = x * g

    # Giant steps: h * g^(-j*m)
    z = group.gt_pow(g, group.neg(to_scalar(m, group)))
    y = h
    for j in range(m + 1):
        i = table.get(y.export())
        if i is not None:
            value = j * m + i
            if value >= bound:
                break
            return to_scalar(value, group)
        y = y * z

    logger.debug("discrete log not found below bound=%d (m=%d)", bound, m)
    raise OutOfBoundError(f"no discrete log in [0, {bound})")


# ============================
# Commitments
# ============================

def pedersen_commitment(m, h1, rng, group=None) -> PedersenCommitment:
    """Commit to ``m`` under base ``h1``: (r, g1*m + h1*r) with fresh r."""
    group = resolve(group)
    r = rng.random_scalar(group.order)
    return PedersenCommitment(r, group.g1 * to_scalar(m, group) + h1 * r)
