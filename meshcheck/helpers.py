"""Small numeric and string helpers used by mesh checks."""

from __future__ import annotations


def is_within_percentage(count: int, total: int, rate: float, tolerance: float) -> bool:
    """Return whether ``count`` lies within ``rate ± tolerance`` of ``total``."""
    minimum = int((rate - tolerance) * total)
    maximum = int((rate + tolerance) * total)
    return minimum <= count <= maximum


def generate_strings(prefix: str, count: int) -> list[str]:
    """Return ``count`` strings made of ``prefix`` followed by 0, 1, 2, ..."""
    if count < 0:
        raise ValueError(f"count must not be negative: {count}")
    return [f"{prefix}{i}" for i in range(count)]