# solver/rng.py
import random
from typing import List, MutableSequence, TypeVar

T = TypeVar("T")

_MASK64 = (1 << 64) - 1
_MASK32 = (1 << 32) - 1
_INCREMENT = 0x6D2B79F5

INT_MAX = 0x7FFFFFFF


def _to_int32(x: int) -> int:
    x &= _MASK32
    return x - (1 << 32) if x & 0x80000000 else x


class RandomSource:
    """Seeded integer stream; one instance per generation, never shared globally.

    The state is a 64-bit counter advanced by a fixed odd increment on each
    draw and pushed through an xor-shift/multiply finaliser, so equal seeds
    always give equal streams regardless of platform.
    """

    def __init__(self, seed: int):
        self._t = int(seed) & _MASK64

    @property
    def state(self) -> int:
        return self._t

    def next_int(self, bound: int = 0) -> int:
        self._t = (self._t + _INCREMENT) & _MASK64
        r = self._t
        r = ((r ^ (r >> 15)) * (1 | r)) & _MASK64
        r ^= (r + (((r ^ (r >> 7)) * (61 | r)) & _MASK64)) & _MASK64
        x = _to_int32(r ^ (r >> 14))
        if bound <= 0:
            return x
        return (x & _MASK32) % bound

    def shuffle(self, items: MutableSequence[T]) -> MutableSequence[T]:
        random.Random(self.next_int(INT_MAX)).shuffle(items)
        return items

    def shuffled(self, items) -> List[T]:
        out = list(items)
        self.shuffle(out)
        return out


__all__ = ["RandomSource", "INT_MAX"]
