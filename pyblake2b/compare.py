"""
Constant-time byte comparison for tag verification.
"""


def constant_time_equal(a: bytes, b: bytes) -> bool:
    """
    Return True if a and b hold the same bytes.

    Every byte pair is visited and the XOR differences are OR-ed together, so
    the running time does not depend on where the first mismatch sits. Only
    the lengths, which are public, affect how much work is done.
    """
    diff = len(a) ^ len(b)
    for x, y in zip(a, b):
        diff |= x ^ y
    return diff == 0
