"""Shared utility modules."""

from .chromosomes import (
    MAX_AUTOSOME,
    MIN_AUTOSOME,
    normalize_chromosome,
    parse_chromosome_range,
)

__all__ = [
    "MAX_AUTOSOME",
    "MIN_AUTOSOME",
    "normalize_chromosome",
    "parse_chromosome_range",
]
