"""Per-chromosome and per-MAF-bin aggregation of inclusion results."""

import logging
from collections.abc import Sequence

from .errors import EmptyDatasetError
from .inclusion import evaluate_inclusion
from .models import (
    GENOTYPED,
    IMPUTED,
    ChromosomeSummary,
    ClassifiedVariant,
    InclusionConfig,
    MafBin,
    MafBinSummary,
)

logger = logging.getLogger(__name__)

MEAN_LABEL = "Mean"
TOTAL_LABEL = "Total"

COUNT_COLUMNS = ("n_tested", "pass_common", "pass_rare", "pass_typed", "included")


def summarize_chromosomes(
    variants: Sequence[ClassifiedVariant], config: InclusionConfig
) -> list[ChromosomeSummary]:
    """Count tested and passing variants per chromosome.

    Args:
        variants: Classified variants from all processed files
        config: Inclusion thresholds

    Returns:
        One row per chromosome (ascending), followed by Mean and Total rows

    Raises:
        EmptyDatasetError: If no variant has rsq, maf and chromosome
    """
    rare_configured = config.has_rare_threshold
    counts: dict[int, dict[str, int]] = {}

    for variant in variants:
        if variant.chromosome is None:
            continue
        row = counts.setdefault(variant.chromosome, dict.fromkeys(COUNT_COLUMNS, 0))

        flags = evaluate_inclusion(variant, config)
        if flags is None:
            continue

        row["n_tested"] += 1
        row["pass_common"] += flags.pass_common
        row["pass_rare"] += bool(flags.pass_rare)
        row["pass_typed"] += flags.pass_typed
        row["included"] += flags.included

    if sum(row["n_tested"] for row in counts.values()) == 0:
        raise EmptyDatasetError(
            f"No tested variants: none of {len(variants)} records has rsq, maf "
            f"and chromosome all present"
        )

    rows = [
        ChromosomeSummary(
            label=str(chromosome),
            n_tested=row["n_tested"],
            pass_common=row["pass_common"],
            pass_rare=row["pass_rare"] if rare_configured else None,
            pass_typed=row["pass_typed"],
            included=row["included"],
        )
        for chromosome, row in sorted(counts.items())
    ]

    logger.info(
        "Summarized %d chromosomes: %d tested, %d included",
        len(rows),
        sum(r.n_tested for r in rows),
        sum(r.included for r in rows),
    )
    return append_mean_and_total(rows)


def append_mean_and_total(rows: list[ChromosomeSummary]) -> list[ChromosomeSummary]:
    """Append the column-wise Mean row and Total row to chromosome rows.

    Both are computed from the chromosome rows themselves, never from raw
    records.
    """
    if not rows:
        raise EmptyDatasetError("No chromosome rows to summarize")

    n_rows = len(rows)

    def column_total(column: str) -> int | float | None:
        values = [getattr(r, column) for r in rows]
        if any(v is None for v in values):
            return None
        return sum(values)

    totals = {column: column_total(column) for column in COUNT_COLUMNS}
    means = {
        column: (total / n_rows if total is not None else None) for column, total in totals.items()
    }

    return [
        *rows,
        ChromosomeSummary(label=MEAN_LABEL, **means),
        ChromosomeSummary(label=TOTAL_LABEL, **totals),
    ]


def count_zero_quality(variants: Sequence[ClassifiedVariant]) -> int:
    """Count variants with Rsq exactly 0 (no haplotype information)."""
    return sum(1 for v in variants if v.rsq is not None and v.rsq == 0)


def summarize_maf_bins(
    variants: Sequence[ClassifiedVariant], config: InclusionConfig
) -> list[MafBinSummary]:
    """Break down quality by MAF bin and genotyping status.

    Zero-quality variants are counted separately in ``n_zero_rsq`` and still
    contribute to ``mean_rsq``.

    Returns:
        Rows ordered by MAF bin, Genotyped before Imputed; combinations with
        no variants are omitted
    """
    summaries: dict[tuple[MafBin, str], MafBinSummary] = {}
    rsq_sums: dict[tuple[MafBin, str], float] = {}
    rsq_counts: dict[tuple[MafBin, str], int] = {}

    for variant in variants:
        if variant.maf_bin is None:
            continue
        key = (variant.maf_bin, variant.genotyped)
        summary = summaries.get(key)
        if summary is None:
            summary = MafBinSummary(maf_bin=variant.maf_bin, genotyped=variant.genotyped)
            summaries[key] = summary
            rsq_sums[key] = 0.0
            rsq_counts[key] = 0

        summary.n_variants += 1
        if variant.rsq is not None:
            rsq_sums[key] += variant.rsq
            rsq_counts[key] += 1
            if variant.rsq == 0:
                summary.n_zero_rsq += 1

        flags = evaluate_inclusion(variant, config)
        if flags is not None:
            summary.n_tested += 1
            summary.n_included += flags.included

    ordered = []
    for maf_bin in MafBin:
        for status in (GENOTYPED, IMPUTED):
            key = (maf_bin, status)
            if key not in summaries:
                continue
            summary = summaries[key]
            if rsq_counts[key]:
                summary.mean_rsq = rsq_sums[key] / rsq_counts[key]
            ordered.append(summary)
    return ordered
