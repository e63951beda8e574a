"""
One-time startup self-test for the BLAKE2b engine.

The compiled-in tables (IV, sigma schedule) and size constants are checked
against the values of RFC 7693 before the first hash is computed. A mismatch
means the build is broken: InitializationError is raised and hashing cannot
proceed.

The flag moves from NOT_RUN to DONE in a single assignment, and only after
the test passed. Threads racing on first use may each run the test; it is
pure, so that is harmless, and a failing test can never leave DONE behind.
"""

import enum
import logging
import math

from .errors import InitializationError

logger = logging.getLogger(__name__)


class SelfTestState(enum.IntEnum):
    NOT_RUN = 0
    DONE = 1


_state = SelfTestState.NOT_RUN

_PRIMES = (2, 3, 5, 7, 11, 13, 17, 19)

# RFC 7693, section 2.7
_RFC_SIGMA = (
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

# RFC 7693, appendix A: BLAKE2b-512("abc")
_ABC_DIGEST = bytes.fromhex(
    'ba80a53f981c4d0d6a2797b69f12f6e94c212f14685ac4b74b12bb6fdbffa2d1'
    '7d87c5392aab792dc252d5de4533cc9518d38aa8dbf1925ab92386edd4009923'
)


def _sqrt_frac64(n):
    # floor(sqrt(n) * 2**64), keeping only the fractional bits
    return math.isqrt(n << 128) & 0xFFFFFFFFFFFFFFFF


def _checks():
    from .blake2b import (
        BLOCK_BYTES, IV, MAX_DIGEST_SIZE, MIN_DIGEST_SIZE, ROUNDS, SIGMA,
        STATE_BYTES, _absorb, _finalize, _new_state,
    )

    state = _new_state(MAX_DIGEST_SIZE)
    layout = (len(state.h) + len(state.t) + len(state.f)) * 8 + len(state.buf)

    yield "MIN_DIGEST_SIZE == 1", MIN_DIGEST_SIZE == 1
    yield "MAX_DIGEST_SIZE == 64", MAX_DIGEST_SIZE == 64
    yield "BLOCK_BYTES == 128", BLOCK_BYTES == 128
    yield "ROUNDS == 12", ROUNDS == 12
    yield "STATE_BYTES == 224", STATE_BYTES == 224
    yield "state layout matches STATE_BYTES", layout == STATE_BYTES

    yield "IV has 8 words", len(IV) == 8
    for i, p in enumerate(_PRIMES):
        yield f"IV[{i}] == frac(sqrt({p}))", i < len(IV) and IV[i] == _sqrt_frac64(p)

    yield "SIGMA matches RFC 7693", tuple(map(tuple, SIGMA)) == _RFC_SIGMA
    for r, row in enumerate(SIGMA):
        yield f"SIGMA[{r}] is a permutation of 0..15", sorted(row) == list(range(16))

    digest = _finalize(_absorb(_new_state(MAX_DIGEST_SIZE), b'abc'))
    yield "BLAKE2b-512('abc') known answer", digest == _ABC_DIGEST


def run_self_test():
    """Run every check; raise InitializationError naming the first mismatch."""
    for name, ok in _checks():
        if not ok:
            raise InitializationError(f"BLAKE2b self-test failed: {name}")


def ensure_self_test():
    """Run the self-test unless it already passed in this process."""
    global _state
    if _state is SelfTestState.DONE:
        return
    run_self_test()
    _state = SelfTestState.DONE
    logger.debug("BLAKE2b self-test passed")


def reset_self_test():
    """Put the flag back to NOT_RUN so the next hash re-runs the test."""
    global _state
    _state = SelfTestState.NOT_RUN
