"""
pyblake2b — BLAKE2b (RFC 7693) in Python

Two implementations available:
- blake2b.py     — Pure Python (zero dependencies)
- blake2b_c.py   — libsodium binding (requires libsodium)

Usage:
    # Pure Python, one-shot
    from pyblake2b import blake2b, blake2b_hex, verify

    digest = blake2b(b"Hello")              # 64 bytes
    short = blake2b(b"Hello", 32)           # 32 bytes
    hex_str = blake2b_hex(b"Hello")         # hex string
    ok = verify(b"Hello", short)            # constant-time check

    # Streaming
    from pyblake2b import Blake2b

    h = Blake2b(digest_size=32)
    h.update(b"Hel").update(b"lo")
    assert h.digest() == short

    # libsodium (faster)
    from pyblake2b.blake2b_c import blake2b, blake2b_hex
"""

from .blake2b import (
    BLOCK_BYTES,
    DIGEST_SIZE,
    MAX_DIGEST_SIZE,
    MIN_DIGEST_SIZE,
    Blake2b,
    blake2b,
    blake2b_final,
    blake2b_hex,
    blake2b_init,
    blake2b_update,
    check_digest_size,
    verify,
)
from .compare import constant_time_equal
from .errors import (
    Blake2bError,
    InitializationError,
    ParameterOutOfRangeError,
    StateFinalizedError,
)
from .selftest import ensure_self_test

__all__ = [
    'Blake2b',
    'blake2b', 'blake2b_hex', 'verify',
    'blake2b_init', 'blake2b_update', 'blake2b_final',
    'check_digest_size', 'constant_time_equal', 'ensure_self_test',
    'Blake2bError', 'InitializationError', 'ParameterOutOfRangeError', 'StateFinalizedError',
    'BLOCK_BYTES', 'DIGEST_SIZE', 'MIN_DIGEST_SIZE', 'MAX_DIGEST_SIZE',
]
__version__ = '1.0.0'
