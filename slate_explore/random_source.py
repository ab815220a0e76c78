
SEED_MASK = (1 << 64) - 1

_MULTIPLIER = 0xEECE66D5DEECE66D
_INCREMENT = 2147483647
_MANTISSA_MASK = 0x7FFFFF
_MANTISSA_SCALE = float(1 << 23)


class RandomSource:
    """
    Seeded 64-bit linear congruential generator.

    The algorithm is fixed so that a seed logged by one service reproduces the
    same draws when the decision is replayed elsewhere. Every draw advances the
    state once:

        v = (0xEECE66D5DEECE66D * v + 2147483647) mod 2^64

    Unit draws take the 23 bits above bit 25 as a float mantissa, so they are
    exactly representable in single precision and lie in [0, 1).

    One instance per decision; instances are not thread-safe.
    """

    def __init__(self, seed: int):
        self._state = seed & SEED_MASK

    def _advance(self) -> int:
        self._state = (_MULTIPLIER * self._state + _INCREMENT) & SEED_MASK
        return self._state

    def uniform_unit_interval(self) -> float:
        return ((self._advance() >> 25) & _MANTISSA_MASK) / _MANTISSA_SCALE

    def uniform_int(self, low: int, high: int) -> int:
        """Returns an integer in [low, high], both ends inclusive."""
        if low > high:
            raise ValueError(f"low ({low}) must not exceed high ({high})")
        return low + (self._advance() >> 25) % (high - low + 1)
