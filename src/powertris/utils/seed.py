# src/powertris/utils/seed.py
from __future__ import annotations

"""
Deterministic seed derivation.

Used to give every game of a scripted session its own reproducible piece
stream from one base seed. Side-effect free; no RNG state is stored here.
"""


def splitmix64(x: int) -> int:
    """
    Stateless 64-bit SplitMix hash (input treated as unsigned 64-bit).
    """
    z = (int(x) + 0x9E3779B97F4A7C15) & 0xFFFFFFFFFFFFFFFF
    z = (z ^ (z >> 30)) * 0xBF58476D1CE4E5B9 & 0xFFFFFFFFFFFFFFFF
    z = (z ^ (z >> 27)) * 0x94D049BB133111EB & 0xFFFFFFFFFFFFFFFF
    z = z ^ (z >> 31)
    return int(z & 0xFFFFFFFFFFFFFFFF)


def seed32_from(*, base_seed: int, stream_id: int) -> int:
    """
    Derive a deterministic seed in [0, 2^31 - 1] from a base seed and a
    stream id (e.g. the game number within a session).
    """
    mixed = splitmix64((int(base_seed) << 32) ^ int(stream_id))
    return int(mixed & 0x7FFFFFFF)


__all__ = ["splitmix64", "seed32_from"]
