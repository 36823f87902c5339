"""
Deterministic Demo Values

Repeatable pseudo-random numbers derived from a string seed (URL or domain),
so the same target always yields the same demonstration metrics without any
persisted state.

Algorithm (portable, integer-only):
1. Hash ``"{salt}|{seed}"`` with 64-bit FNV-1a to get the base state
2. For each draw, XOR the base with the FNV-1a hash of the call-site key
   and the range ``min + max``
3. Run one splitmix64 step and reduce the output into ``[min, max]``

Not cryptographically meaningful.
"""

from typing import Tuple

MASK_64 = 0xFFFFFFFFFFFFFFFF

FNV_OFFSET_BASIS = 0xCBF29CE484222325
FNV_PRIME = 0x100000001B3

GOLDEN_GAMMA = 0x9E3779B97F4A7C15


def fnv1a_64(text: str) -> int:
    """64-bit FNV-1a hash of the UTF-8 bytes of ``text``."""
    value = FNV_OFFSET_BASIS
    for byte in text.encode("utf-8"):
        value ^= byte
        value = (value * FNV_PRIME) & MASK_64
    return value


def splitmix64(state: int) -> int:
    """One splitmix64 step."""
    z = (state + GOLDEN_GAMMA) & MASK_64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & MASK_64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & MASK_64
    return z ^ (z >> 31)


def _ordered(minimum: int, maximum: int) -> Tuple[int, int]:
    if minimum > maximum:
        return maximum, minimum
    return minimum, maximum


class DemoValueGenerator:
    """
    Seeded generator for demonstration metrics.

    Usage:
        gen = DemoValueGenerator("example.com", salt="geo")
        score = gen.int_between(40, 85, "ai_visibility")
        visible = gen.chance(60, "chatgpt")
        lcp = gen.uniform(1.5, 3.5, "lcp", precision=1)

    Every draw is a pure function of (salt, seed, key, min, max): calling
    the same site twice returns the same value.
    """

    def __init__(self, seed: str, salt: str = ""):
        self.seed = seed or ""
        self.salt = salt or ""
        self._base = fnv1a_64(f"{self.salt}|{self.seed}")

    def _draw(self, key: str, lo: int, hi: int) -> int:
        state = self._base ^ fnv1a_64(key)
        state ^= ((lo + hi) * GOLDEN_GAMMA) & MASK_64
        return splitmix64(state & MASK_64)

    def int_between(self, minimum: int, maximum: int, key: str = "") -> int:
        """Integer in ``[minimum, maximum]`` inclusive."""
        lo, hi = _ordered(int(minimum), int(maximum))
        span = hi - lo + 1
        return lo + self._draw(key, lo, hi) % span

    def uniform(
        self,
        minimum: float,
        maximum: float,
        key: str = "",
        precision: int = 2,
    ) -> float:
        """Fixed-precision decimal in ``[minimum, maximum]``."""
        scale = 10 ** precision
        value = self.int_between(round(minimum * scale), round(maximum * scale), key)
        return round(value / scale, precision)

    def chance(self, threshold: int, key: str = "") -> bool:
        """``int_between(0, 100) > threshold``"""
        return self.int_between(0, 100, key) > threshold


def seeded_random(seed: str, minimum: int, maximum: int, key: str = "") -> int:
    """Deterministic integer in ``[minimum, maximum]`` for ``seed``."""
    return DemoValueGenerator(seed).int_between(minimum, maximum, key)
