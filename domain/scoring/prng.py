"""Seeded pseudo-random sequence for reproducible project scores.

Implements mulberry32 on an explicit 32-bit state. Every scoring call builds
its own generator from the project seed, so no generator state is shared
between calls.
"""
from __future__ import annotations

from typing import Iterator, Tuple

MASK_32 = 0xFFFFFFFF
MULBERRY_INCREMENT = 0x6D2B79F5
TWO_POW_32 = 4294967296

SEED_MULTIPLIER = 31415927
SEED_MODULUS = 2147483647


def create_seed(project_id: int) -> int:
    """Derive the generator seed from a project id."""

    return abs(int(project_id) * SEED_MULTIPLIER) % SEED_MODULUS


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK_32


def mulberry32_next(state: int) -> Tuple[float, int]:
    """Advance ``state`` once and return ``(value, next_state)`` with value in [0, 1)."""

    next_state = (state + MULBERRY_INCREMENT) & MASK_32
    t = next_state
    t = _imul(t ^ (t >> 15), t | 1)
    t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK_32
    t = (t ^ (t >> 14)) & MASK_32
    return t / TWO_POW_32, next_state


class Mulberry32:
    """Iterator over a mulberry32 sequence."""

    def __init__(self, seed: int) -> None:
        self.state = seed & MASK_32

    def next_float(self) -> float:
        value, self.state = mulberry32_next(self.state)
        return value

    def __iter__(self) -> Iterator[float]:
        return self

    def __next__(self) -> float:
        return self.next_float()

    @classmethod
    def for_project(cls, project_id: int) -> "Mulberry32":
        return cls(create_seed(project_id))


__all__ = ["Mulberry32", "create_seed", "mulberry32_next"]
