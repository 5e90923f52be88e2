"""Chromosome-stratified subsampling of classified variants."""

import logging
import random
from collections.abc import Sequence

from .models import GENOTYPED, IMPUTED, ClassifiedVariant

logger = logging.getLogger(__name__)


def sampling_rate(subset_size: int, sample_size: int) -> float:
    """Fraction of a subset to draw, capped at 1."""
    if subset_size == 0:
        return 1.0
    return min(1.0, sample_size / subset_size)


def stratified_sample(
    variants: Sequence[ClassifiedVariant],
    sample_size: int,
    seed: int | None = None,
    rng: random.Random | None = None,
) -> list[ClassifiedVariant]:
    """Draw a chromosome-proportional sample of genotyped and imputed variants.

    Genotyped and imputed variants are sampled independently. Within each,
    every chromosome is sampled without replacement at the same rate,
    ``min(1, sample_size / N)`` where N is the size of that subset, so each
    chromosome group contributes ``round(n * rate)`` variants.

    Args:
        variants: Classified variants
        sample_size: Target number of variants per subset
        seed: Seed for a fresh random generator (ignored when rng is given)
        rng: Random generator to draw from

    Returns:
        Sampled variants sorted by chromosome and position

    Raises:
        ValueError: If sample_size is negative
    """
    if sample_size < 0:
        raise ValueError(f"sample_size must not be negative, got {sample_size}")
    if rng is None:
        rng = random.Random(seed)

    sampled: list[ClassifiedVariant] = []
    for status in (GENOTYPED, IMPUTED):
        groups: dict[int, list[ClassifiedVariant]] = {}
        for variant in variants:
            if variant.genotyped == status and variant.chromosome is not None:
                groups.setdefault(variant.chromosome, []).append(variant)

        subset_size = sum(len(group) for group in groups.values())
        rate = sampling_rate(subset_size, sample_size)

        drawn = 0
        for chromosome in sorted(groups):
            group = groups[chromosome]
            if rate >= 1.0:
                sampled.extend(group)
                drawn += len(group)
                continue
            n_draw = round(len(group) * rate)
            sampled.extend(rng.sample(group, n_draw))
            drawn += n_draw

        logger.debug(
            "Sampled %d of %d %s variants (rate %.4f)", drawn, subset_size, status.lower(), rate
        )

    sampled.sort(key=lambda v: (v.chromosome, v.position))
    return sampled
