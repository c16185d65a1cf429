"""Pairing group triple (G1, G2, GT) backed by bplib.

Every other module works against a ``PairingGroup`` rather than a concrete
curve, so the curve is chosen by whoever builds the ``BpGroup``.
"""

import threading

from bplib import bp
from bplib.bp import BpGroup
from petlib.bn import Bn


class PairingGroup(object):
    """Generators, order and the handful of operations bplib leaves implicit."""

    def __init__(self, bp_group=None):
        self.bp = bp_group if bp_group is not None else BpGroup()
        self.order = self.bp.order()

        self.g1 = self.bp.gen1()
        self.g2 = self.bp.gen2()
        self.gt = self.bp.pair(self.g1, self.g2)

        # Identity elements
        self.inf1 = self.g1 * 0
        self.inf2 = self.g2 * 0
        self.unity = self.gt ** 0

        # e(-g1, Q) = e(g1, Q)^-1 without a GT inversion
        self.neg_g1 = self.g1 * (self.order - 1)

        # Fixed encoding widths, measured on the generators
        self.g1_bytes = len(self.g1.export())
        self.g2_bytes = len(self.g2.export())
        self.gt_bytes = len(self.gt.export())

    def pair(self, a, b):
        return self.bp.pair(a, b)

    # ---------------------------
    # Scalars
    # ---------------------------

    def reduce(self, x: Bn) -> Bn:
        return x % self.order

    def neg(self, x: Bn) -> Bn:
        return (self.order - (x % self.order)) % self.order

    # ---------------------------
    # GT (multiplicative)
    # ---------------------------

    def gt_pow(self, elem, k: Bn):
        return elem ** (k % self.order)

    def gt_inv(self, elem):
        # GT has prime order, so a^(order - 1) = a^-1
        return elem ** (self.order - 1)

    def gt_base(self, k: Bn):
        return self.gt ** (k % self.order)

    # ---------------------------
    # Random elements
    # ---------------------------

    def random_g1(self, rng):
        return self.g1 * rng.random_scalar(self.order)

    def random_g2(self, rng):
        return self.g2 * rng.random_scalar(self.order)

    # ---------------------------
    # Decoding from bplib octets
    # ---------------------------

    def g1_from_bytes(self, buf: bytes):
        return bp.G1Elem.from_bytes(buf, self.bp)

    def g2_from_bytes(self, buf: bytes):
        return bp.G2Elem.from_bytes(buf, self.bp)

    def gt_from_bytes(self, buf: bytes):
        return bp.GTElem.from_bytes(buf, self.bp)


_default = None
_default_lock = threading.Lock()


def default_group() -> PairingGroup:
    """Process-wide group over ``BpGroup()``; built on first use, read-only after."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = PairingGroup()
    return _default


def resolve(group=None) -> PairingGroup:
    return group if group is not None else default_group()
