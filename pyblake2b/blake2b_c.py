"""
BLAKE2b — libsodium Binding

This module provides Python bindings to libsodium's crypto_generichash_blake2b
for maximum performance. Falls back to pure Python if libsodium is unavailable.

Usage:
    from pyblake2b.blake2b_c import blake2b, blake2b_hex

    digest = blake2b(b"Hello, World!")      # 64 bytes
    digest = blake2b(b"Hello", 32)          # 32 bytes
    hex_str = blake2b_hex(b"Hello")         # hex string

Requirements:
    libsodium shared library (libsodium23 on Debian/Ubuntu, libsodium on brew)
"""

import ctypes
import ctypes.util
import logging
from pathlib import Path

from .blake2b import DIGEST_SIZE, check_digest_size
from .errors import InitializationError
from .selftest import ensure_self_test

logger = logging.getLogger(__name__)

# libsodium's crypto_generichash_blake2b_BYTES, _BYTES_MIN and _BYTES_MAX
SODIUM_DEFAULT_BYTES = 32
SODIUM_BYTES_MIN = 16
SODIUM_BYTES_MAX = 64

SEARCH_PATHS = [
    Path('/usr/local/lib/libsodium.so'),
    Path('/usr/lib/x86_64-linux-gnu/libsodium.so.23'),
    Path('/usr/lib/aarch64-linux-gnu/libsodium.so.23'),
    Path('/usr/lib/libsodium.so'),
    Path('/opt/homebrew/lib/libsodium.dylib'),
    Path('/usr/local/lib/libsodium.dylib'),
]

_lib = None
_use_pure_python = False


def _candidates():
    found = ctypes.util.find_library('sodium')
    if found:
        yield found
    for lib_path in SEARCH_PATHS:
        if lib_path.exists():
            yield str(lib_path)


def _bind(lib):
    lib.sodium_init.argtypes = []
    lib.sodium_init.restype = ctypes.c_int
    for name in ('crypto_generichash_blake2b_bytes',
                 'crypto_generichash_blake2b_bytes_min',
                 'crypto_generichash_blake2b_bytes_max'):
        fn = getattr(lib, name)
        fn.argtypes = []
        fn.restype = ctypes.c_size_t
    lib.crypto_generichash_blake2b.argtypes = [
        ctypes.c_char_p, ctypes.c_size_t,
        ctypes.c_char_p, ctypes.c_ulonglong,
        ctypes.c_char_p, ctypes.c_size_t,
    ]
    lib.crypto_generichash_blake2b.restype = ctypes.c_int


def _check_sizes(lib):
    """The library must report the sizes its headers were built with."""
    expected = {
        'crypto_generichash_blake2b_bytes': SODIUM_DEFAULT_BYTES,
        'crypto_generichash_blake2b_bytes_min': SODIUM_BYTES_MIN,
        'crypto_generichash_blake2b_bytes_max': SODIUM_BYTES_MAX,
    }
    for name, value in expected.items():
        got = getattr(lib, name)()
        if got != value:
            raise InitializationError(f"libsodium {name}() returned {got}, expected {value}")


def _load_library():
    """Load libsodium, or record that the pure Python engine must be used."""
    global _lib, _use_pure_python

    if _lib is not None or _use_pure_python:
        return _lib

    for lib_path in _candidates():
        try:
            lib = ctypes.CDLL(lib_path)
            _bind(lib)
        except (OSError, AttributeError):
            continue
        if lib.sodium_init() < 0:
            continue
        _check_sizes(lib)
        _lib = lib
        logger.debug("Using libsodium from %s", lib_path)
        return _lib

    logger.debug("libsodium not found, falling back to pure Python BLAKE2b")
    _use_pure_python = True
    return None


def blake2b(data: bytes = b'', digest_size: int = DIGEST_SIZE) -> bytes:
    """
    Compute BLAKE2b of the given input data.

    Uses libsodium for maximum performance. Falls back to pure Python if
    libsodium is unavailable, and for digests shorter than SODIUM_BYTES_MIN,
    which libsodium refuses to produce.

    Args:
        data: Input bytes to hash
        digest_size: Output length in bytes (1..64)

    Returns:
        digest_size bytes
    """
    check_digest_size(digest_size)
    ensure_self_test()
    lib = _load_library()

    if _use_pure_python or digest_size < SODIUM_BYTES_MIN:
        from .blake2b import blake2b as py_blake2b
        return py_blake2b(data, digest_size)

    if isinstance(data, str):
        raise TypeError("Strings must be encoded before hashing")
    data = bytes(memoryview(data))
    output = ctypes.create_string_buffer(digest_size)
    if len(data) == 0:
        rc = lib.crypto_generichash_blake2b(output, digest_size, None, 0, None, 0)
    else:
        rc = lib.crypto_generichash_blake2b(output, digest_size, data, len(data), None, 0)
    if rc != 0:
        raise RuntimeError(f"crypto_generichash_blake2b failed with code {rc}")
    return output.raw


def blake2b_hex(data: bytes = b'', digest_size: int = DIGEST_SIZE) -> str:
    """
    Compute BLAKE2b and return as hexadecimal string.

    Args:
        data: Input bytes to hash
        digest_size: Output length in bytes (1..64)

    Returns:
        2 * digest_size hexadecimal characters
    """
    return blake2b(data, digest_size).hex()


def is_using_c_library() -> bool:
    """Check if libsodium is being used."""
    _load_library()
    return not _use_pure_python


if __name__ == '__main__':
    import sys

    print(f"Using libsodium: {is_using_c_library()}")

    if len(sys.argv) > 1:
        data = sys.argv[1].encode('utf-8')
    else:
        data = b''

    print(f"Input: {repr(data)}")
    print(f"Hash:  {blake2b_hex(data)}")
