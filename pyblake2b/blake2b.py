"""
BLAKE2b — Pure Python Reference Implementation (RFC 7693, unkeyed)

This is the pure Python implementation with zero external dependencies.
For maximum performance, use the libsodium binding (blake2b_c.py).

Layout:
  Parameters:   check_digest_size, 1..64 byte digests
  State:        Blake2bState (h, t, f, buf, buflen, digest_size)
  Compression:  blake2b_compress, 12 rounds of 8 G calls
  Streaming:    blake2b_init / blake2b_update / blake2b_final, Blake2b
  One-shot:     blake2b, blake2b_hex
  Verification: verify, Blake2b.verify (constant-time comparison)

Digest sizes below 32 bytes are accepted but give less than 128-bit security.
"""

import struct

from .compare import constant_time_equal
from .errors import ParameterOutOfRangeError, StateFinalizedError
from .selftest import ensure_self_test

MASK64 = 0xFFFFFFFFFFFFFFFF

BLOCK_BYTES = 128
MIN_DIGEST_SIZE = 1
MAX_DIGEST_SIZE = 64
DIGEST_SIZE = 64
ROUNDS = 12

# h[8] + t[2] + f[2] words, plus one block of buffered input
STATE_BYTES = (8 + 2 + 2) * 8 + BLOCK_BYTES

# Fractional parts of the square roots of the first eight primes
IV = (
    0x6A09E667F3BCC908, 0xBB67AE8584CAA73B,
    0x3C6EF372FE94F82B, 0xA54FF53A5F1D36F1,
    0x510E527FADE682D1, 0x9B05688C2B3E6C1F,
    0x1F83D9ABFB41BD6B, 0x5BE0CD19137E2179,
)

SIGMA = (
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15),
    (14, 10, 4, 8, 9, 15, 13, 6, 1, 12, 0, 2, 11, 7, 5, 3),
    (11, 8, 12, 0, 5, 2, 15, 13, 10, 14, 3, 6, 7, 1, 9, 4),
    (7, 9, 3, 1, 13, 12, 11, 14, 2, 6, 5, 10, 4, 0, 15, 8),
    (9, 0, 5, 7, 2, 4, 10, 15, 14, 1, 11, 12, 6, 8, 3, 13),
    (2, 12, 6, 10, 0, 11, 8, 3, 4, 13, 7, 5, 15, 14, 1, 9),
    (12, 5, 1, 15, 14, 13, 4, 10, 0, 7, 6, 3, 9, 2, 8, 11),
    (13, 11, 7, 14, 12, 1, 3, 9, 5, 0, 15, 4, 8, 6, 2, 10),
    (6, 15, 14, 9, 11, 3, 0, 8, 12, 2, 13, 7, 1, 4, 10, 5),
    (10, 2, 8, 4, 7, 6, 1, 5, 15, 11, 9, 14, 3, 12, 13, 0),
)

# Columns first, then diagonals
G_INDEX_MAP = (
    (0, 4, 8, 12),
    (1, 5, 9, 13),
    (2, 6, 10, 14),
    (3, 7, 11, 15),
    (0, 5, 10, 15),
    (1, 6, 11, 12),
    (2, 7, 8, 13),
    (3, 4, 9, 14),
)

# Parameter block word 0: fanout = 1, depth = 1, key length = 0
_PARAM_WORD0 = 0x01010000

_16Q_UNPACK = struct.Struct('<16Q').unpack_from
_8Q_PACK = struct.Struct('<8Q').pack


def check_digest_size(digest_size, name='digest_size'):
    """Raise unless digest_size is an int in MIN_DIGEST_SIZE..MAX_DIGEST_SIZE."""
    if isinstance(digest_size, bool) or not isinstance(digest_size, int):
        raise TypeError(f"{name} must be an int, not {type(digest_size).__name__}")
    if not MIN_DIGEST_SIZE <= digest_size <= MAX_DIGEST_SIZE:
        raise ParameterOutOfRangeError(name, digest_size, MIN_DIGEST_SIZE, MAX_DIGEST_SIZE)
    return digest_size


class Blake2bState:
    """BLAKE2b state structure. Create one with blake2b_init()."""

    __slots__ = ('h', 't', 'f', 'buf', 'buflen', 'digest_size')

    # uint64_t h[8];
    # uint64_t t[2];
    # uint64_t f[2];
    # uint8_t  buf[BLOCK_BYTES];
    # size_t   buflen;
    # size_t   digest_size;

    def __init__(self, digest_size):
        check_digest_size(digest_size)
        self.h = [IV[0] ^ _PARAM_WORD0 ^ digest_size] + list(IV[1:])
        self.t = [0, 0]
        self.f = [0, 0]
        self.buf = bytearray(BLOCK_BYTES)
        self.buflen = 0
        self.digest_size = digest_size

    @property
    def finalized(self):
        return self.f[0] != 0

    def copy(self):
        clone = Blake2bState.__new__(Blake2bState)
        clone.h = list(self.h)
        clone.t = list(self.t)
        clone.f = list(self.f)
        clone.buf = bytearray(self.buf)
        clone.buflen = self.buflen
        clone.digest_size = self.digest_size
        return clone

    def wipe(self):
        self.h[:] = [0] * 8
        self.buf[:] = bytes(BLOCK_BYTES)
        self.buflen = 0


def _rotr64(x, r):
    return ((x >> r) | (x << (64 - r))) & MASK64


def _g(v, a, b, c, d, x, y):
    va = (v[a] + v[b] + x) & MASK64
    vd = _rotr64(v[d] ^ va, 32)
    vc = (v[c] + vd) & MASK64
    vb = _rotr64(v[b] ^ vc, 24)
    va = (va + vb + y) & MASK64
    vd = _rotr64(vd ^ va, 16)
    vc = (vc + vd) & MASK64
    vb = _rotr64(vb ^ vc, 63)
    v[a] = va
    v[b] = vb
    v[c] = vc
    v[d] = vd


def blake2b_compress(state, block):
    """Mix one 128-byte block into the chaining values of state."""
    m = _16Q_UNPACK(block)
    v = state.h + list(IV)

    v[12] ^= state.t[0]
    v[13] ^= state.t[1]
    v[14] ^= state.f[0]
    v[15] ^= state.f[1]

    for r in range(ROUNDS):
        s = SIGMA[r % 10]
        for i in range(8):
            a, b, c, d = G_INDEX_MAP[i]
            _g(v, a, b, c, d, m[s[2 * i]], m[s[2 * i + 1]])

    h = state.h
    for i in range(8):
        h[i] ^= v[i] ^ v[i + 8]


def _increment_counter(state, inc):
    t0 = state.t[0] + inc
    state.t[0] = t0 & MASK64
    state.t[1] = (state.t[1] + (t0 >> 64)) & MASK64


def _as_bytes_view(data):
    if isinstance(data, str):
        raise TypeError("Strings must be encoded before hashing")
    return memoryview(data).cast('B')


def _new_state(digest_size):
    return Blake2bState(digest_size)


def _absorb(state, data):
    view = _as_bytes_view(data)
    inlen = len(view)
    if inlen == 0:
        return state

    p = 0
    left = state.buflen
    fill = BLOCK_BYTES - left

    # The buffered block is compressed only once more input follows it,
    # the last block always waits for _finalize.
    if inlen > fill:
        state.buf[left:] = view[:fill]
        state.buflen = 0
        _increment_counter(state, BLOCK_BYTES)
        blake2b_compress(state, state.buf)
        p = fill

        while inlen - p > BLOCK_BYTES:
            _increment_counter(state, BLOCK_BYTES)
            blake2b_compress(state, view[p:p + BLOCK_BYTES])
            p += BLOCK_BYTES

    rest = inlen - p
    state.buf[state.buflen:state.buflen + rest] = view[p:]
    state.buflen += rest
    return state


def _finalize(state):
    _increment_counter(state, state.buflen)
    state.f[0] = MASK64
    state.buf[state.buflen:] = bytes(BLOCK_BYTES - state.buflen)
    blake2b_compress(state, state.buf)
    return _8Q_PACK(*state.h)[:state.digest_size]


def blake2b_init(digest_size: int = DIGEST_SIZE) -> Blake2bState:
    """Create a fresh hash state producing digest_size bytes of output."""
    check_digest_size(digest_size)
    ensure_self_test()
    return _new_state(digest_size)


def blake2b_update(state: Blake2bState, data) -> None:
    """Append data to the message hashed by state."""
    if state.finalized:
        raise StateFinalizedError("update() called on a finalized BLAKE2b state")
    _absorb(state, data)


def blake2b_final(state: Blake2bState) -> bytes:
    """
    Finish the hash and return state.digest_size bytes.

    The state is consumed: its chaining values and buffer are wiped and any
    further update() or final() raises StateFinalizedError. Take a copy()
    first to keep hashing.
    """
    if state.finalized:
        raise StateFinalizedError("final() called on a finalized BLAKE2b state")
    digest = _finalize(state)
    state.wipe()
    return digest


def blake2b(data: bytes = b'', digest_size: int = DIGEST_SIZE) -> bytes:
    """Compute BLAKE2b of the given input. Returns digest_size bytes."""
    state = blake2b_init(digest_size)
    _absorb(state, data)
    return _finalize(state)


def blake2b_hex(data: bytes = b'', digest_size: int = DIGEST_SIZE) -> str:
    """Return hex string representation of BLAKE2b."""
    return blake2b(data, digest_size).hex()


def verify(data: bytes, tag: bytes) -> bool:
    """
    Check that tag is the BLAKE2b digest of data at len(tag) bytes.

    A tag shorter than 1 or longer than 64 bytes never verifies. The digest is
    still computed and compared in that case, so a malformed tag costs the
    same as a wrong one.
    """
    ensure_self_test()
    tag = _as_bytes_view(tag)
    valid = MIN_DIGEST_SIZE <= len(tag) <= MAX_DIGEST_SIZE
    state = _new_state(len(tag) if valid else MAX_DIGEST_SIZE)
    expected = _finalize(_absorb(state, data))
    candidate = tag if valid else expected
    return constant_time_equal(expected, candidate) & valid


class Blake2b:
    """
    Incremental BLAKE2b hasher with a hashlib-like interface.

    digest(), hexdigest() and verify() finish a private copy of the state, so
    the hasher can keep receiving data afterwards.
    """

    name = 'blake2b'
    block_size = BLOCK_BYTES

    __slots__ = ('_state',)

    def __init__(self, data: bytes = b'', digest_size: int = DIGEST_SIZE):
        self._state = blake2b_init(digest_size)
        self.update(data)

    @property
    def digest_size(self) -> int:
        return self._state.digest_size

    def update(self, data: bytes) -> 'Blake2b':
        blake2b_update(self._state, data)
        return self

    def copy(self) -> 'Blake2b':
        h = Blake2b.__new__(Blake2b)
        h._state = self._state.copy()
        return h

    def digest(self) -> bytes:
        return blake2b_final(self._state.copy())

    def hexdigest(self) -> str:
        return self.digest().hex()

    def verify(self, tag: bytes) -> bool:
        """Constant-time check of tag against the digest of the data so far."""
        tag = _as_bytes_view(tag)
        expected = self.digest()
        valid = len(tag) == len(expected)
        candidate = tag if valid else expected
        return constant_time_equal(expected, candidate) & valid


if __name__ == '__main__':
    import sys
    data = sys.argv[1].encode('utf-8') if len(sys.argv) > 1 else b''
    size = int(sys.argv[2]) if len(sys.argv) > 2 else DIGEST_SIZE
    print(blake2b_hex(data, size))
