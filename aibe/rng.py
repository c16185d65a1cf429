"""Randomness capabilities handed to key generation and provers.

Nothing in the package samples randomness on its own: callers pass a
``RandomSource`` and own it for the duration of the call.
"""

import hashlib
import secrets
import struct

from petlib.bn import Bn


class RandomSource(object):
    """Fill bytes / sample uniform scalars from a cryptographic source."""

    def random_bytes(self, n: int) -> bytes:
        raise NotImplementedError

    def random_scalar(self, order: Bn) -> Bn:
        # 128 extra bits keep the modular bias negligible
        nbytes = (order.num_bits() + 7) // 8 + 16
        return Bn.from_binary(self.random_bytes(nbytes)) % order


class SystemRandomSource(RandomSource):
    """OpenSSL's CSPRNG for scalars, the OS pool for raw bytes."""

    def random_bytes(self, n: int) -> bytes:
        return secrets.token_bytes(n)

    def random_scalar(self, order: Bn) -> Bn:
        return Bn.random(order)


class HashDrbgRandomSource(RandomSource):
    """SHA-256 counter-mode generator seeded with at least 32 secret bytes.

    Two instances built from the same seed produce the same stream, which is
    what reproducible test vectors need. Never share one instance between two
    proofs: repeated blindings leak the witness.
    """

    MIN_SEED_BYTES = 32

    def __init__(self, seed: bytes):
        if not isinstance(seed, (bytes, bytearray)):
            raise TypeError("seed must be bytes")
        if len(seed) < self.MIN_SEED_BYTES:
            raise ValueError(f"seed must be at least {self.MIN_SEED_BYTES} bytes")
        self._seed = bytes(seed)
        self._counter = 0
        self._buffer = b""

    def _block(self) -> bytes:
        block = hashlib.sha256(self._seed + struct.pack(">Q", self._counter)).digest()
        self._counter += 1
        return block

    def random_bytes(self, n: int) -> bytes:
        while len(self._buffer) < n:
            self._buffer += self._block()
        out, self._buffer = self._buffer[:n], self._buffer[n:]
        return out
