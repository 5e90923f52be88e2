"""Per-variant inclusion rules for common and rare variants."""

import logging
from collections.abc import Iterable

from .models import ClassifiedVariant, InclusionConfig, InclusionFlags

logger = logging.getLogger(__name__)

RARE_POLICY_NOTE = (
    "No rare-variant Rsq threshold set: variants with MAF below {maf_cutoff} "
    "are only included when genotyped"
)


def evaluate_inclusion(
    variant: ClassifiedVariant, config: InclusionConfig
) -> InclusionFlags | None:
    """Evaluate the inclusion rules for one variant.

    Args:
        variant: Classified variant
        config: Inclusion thresholds

    Returns:
        InclusionFlags, or None if the variant lacks rsq, maf or chromosome
    """
    if not variant.is_tested:
        return None

    pass_typed = variant.is_genotyped
    pass_common = variant.rsq >= config.rsq_common and variant.maf >= config.maf_cutoff

    if config.rsq_rare is not None:
        pass_rare = variant.rsq >= config.rsq_rare and variant.maf < config.maf_cutoff
        included = pass_rare or pass_common or pass_typed
    else:
        pass_rare = None
        pass_maf = variant.maf >= config.maf_cutoff
        included = (pass_common and pass_maf) or pass_typed

    return InclusionFlags(
        pass_common=pass_common,
        pass_rare=pass_rare,
        pass_typed=pass_typed,
        included=included,
    )


def apply_inclusion(
    variants: Iterable[ClassifiedVariant], config: InclusionConfig
) -> list[InclusionFlags | None]:
    """Evaluate inclusion for every variant, parallel to the input order."""
    return [evaluate_inclusion(variant, config) for variant in variants]


def warn_rare_policy(config: InclusionConfig) -> str | None:
    """Log the rare-variant policy when no rare threshold is configured.

    Returns:
        The note that was logged, or None when a rare threshold is set
    """
    if config.has_rare_threshold:
        return None
    note = RARE_POLICY_NOTE.format(maf_cutoff=config.maf_cutoff)
    logger.warning(note)
    return note
