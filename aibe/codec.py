"""Canonical fixed-width encodings.

Scalars are SCALAR_BYTES little-endian. Group elements use bplib's octet
export (compressed for G1) at the width of the group's generators; the G1/G2
identity is written as zeros of that width. Decoding re-exports every element
and rejects anything that does not round-trip byte for byte, so an encoding is
a function of the algebraic value and nothing else.
"""

import base64
import binascii

from petlib.bn import Bn

from .constants import SCALAR_BYTES
from .errors import DecodeError
from .groups import resolve
from .utils import scalar_to_int


# ============================
# Single values
# ============================

def encode_scalar(x: Bn, group=None) -> bytes:
    group = resolve(group)
    return scalar_to_int(x % group.order).to_bytes(SCALAR_BYTES, "little")


def decode_scalar(buf: bytes, group=None) -> Bn:
    group = resolve(group)
    if len(buf) != SCALAR_BYTES:
        raise DecodeError(f"scalar must be {SCALAR_BYTES} bytes, got {len(buf)}")
    value = Bn.from_binary(bytes(reversed(buf)))
    if value >= group.order:
        raise DecodeError("scalar is not reduced mod the group order")
    return value


def _encode_point(point, identity, width: int) -> bytes:
    if point == identity:
        return bytes(width)
    buf = point.export()
    if len(buf) != width:
        raise ValueError(f"group element exported to {len(buf)} bytes, expected {width}")
    return buf


def _decode_point(buf: bytes, identity, width: int, from_bytes, label: str):
    if len(buf) != width:
        raise DecodeError(f"{label} element must be {width} bytes, got {len(buf)}")
    if identity is not None and buf == bytes(width):
        return identity
    try:
        point = from_bytes(bytes(buf))
    except Exception as exc:
        raise DecodeError(f"invalid {label} encoding") from exc
    if point.export() != buf:
        raise DecodeError(f"non-canonical {label} encoding")
    return point


def encode_g1(point, group=None) -> bytes:
    group = resolve(group)
    return _encode_point(point, group.inf1, group.g1_bytes)


def decode_g1(buf: bytes, group=None):
    group = resolve(group)
    return _decode_point(buf, group.inf1, group.g1_bytes, group.g1_from_bytes, "G1")


def encode_g2(point, group=None) -> bytes:
    group = resolve(group)
    return _encode_point(point, group.inf2, group.g2_bytes)


def decode_g2(buf: bytes, group=None):
    group = resolve(group)
    return _decode_point(buf, group.inf2, group.g2_bytes, group.g2_from_bytes, "G2")


def encode_gt(elem, group=None) -> bytes:
    group = resolve(group)
    buf = elem.export()
    if len(buf) != group.gt_bytes:
        raise ValueError(f"GT element exported to {len(buf)} bytes, expected {group.gt_bytes}")
    return buf


def decode_gt(buf: bytes, group=None):
    group = resolve(group)
    return _decode_point(buf, None, group.gt_bytes, group.gt_from_bytes, "GT")


# ============================
# Ordered concatenations
# ============================

class Writer(object):
    """Accumulates typed fields in order; ``getvalue`` returns the blob."""

    def __init__(self, group=None):
        self.group = resolve(group)
        self._parts = []

    def scalar(self, x):
        self._parts.append(encode_scalar(x, self.group))
        return self

    def g1(self, point):
        self._parts.append(encode_g1(point, self.group))
        return self

    def g2(self, point):
        self._parts.append(encode_g2(point, self.group))
        return self

    def gt(self, elem):
        self._parts.append(encode_gt(elem, self.group))
        return self

    def getvalue(self) -> bytes:
        return b"".join(self._parts)


class Reader(object):
    """Reads typed fields in order; ``finish`` rejects trailing bytes."""

    def __init__(self, buf: bytes, group=None):
        self.group = resolve(group)
        self._buf = bytes(buf)
        self._pos = 0

    def _take(self, n: int) -> bytes:
        end = self._pos + n
        if end > len(self._buf):
            raise DecodeError("Short read: blob ends inside a field")
        chunk = self._buf[self._pos:end]
        self._pos = end
        return chunk

    def scalar(self) -> Bn:
        return decode_scalar(self._take(SCALAR_BYTES), self.group)

    def g1(self):
        return decode_g1(self._take(self.group.g1_bytes), self.group)

    def g2(self):
        return decode_g2(self._take(self.group.g2_bytes), self.group)

    def gt(self):
        return decode_gt(self._take(self.group.gt_bytes), self.group)

    def finish(self):
        if self._pos != len(self._buf):
            raise DecodeError(f"{len(self._buf) - self._pos} trailing bytes")


# ============================
# Text transport
# ============================

def to_base64(buf: bytes) -> str:
    return base64.b64encode(buf).decode("ascii")


def from_base64(text) -> bytes:
    if isinstance(text, str):
        text = text.encode("ascii")
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError("invalid base64 blob") from exc
