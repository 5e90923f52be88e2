"""Export summaries and sampled variants as tab-separated tables.

Tables:
- Chromosome summary: chromosome, n_tested, pass_common, [pass_rare], pass_typed, included
- MAF-bin breakdown: maf_bin, genotyped, n_variants, n_tested, n_zero_rsq, n_included, mean_rsq
- Variants: id, chromosome, position, maf, rsq, empirical_rsq, genotyped, maf_bin
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from ..models import ChromosomeSummary, ClassifiedVariant, MafBinSummary

logger = logging.getLogger(__name__)

MISSING = "NA"

VARIANT_COLUMNS = (
    "id",
    "chromosome",
    "position",
    "maf",
    "rsq",
    "empirical_rsq",
    "genotyped",
    "maf_bin",
)


def format_value(value: int | float | str | None, thousands: bool = False) -> str:
    """Render a table cell.

    With ``thousands`` set, integers get thousands separators and
    non-integral floats are shown with two decimals (e.g. ``1,234.50``).
    """
    if value is None:
        return MISSING
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if not thousands or isinstance(value, str):
        return str(value)
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,.2f}"
    return f"{int(value):,}"


def _write_rows(output_path: Path, header: Sequence[str], rows: list[list[str]]) -> int:
    with open(output_path, "w", encoding="utf-8", newline="\n") as f:
        f.write("\t".join(header) + "\n")
        for row in rows:
            f.write("\t".join(row) + "\n")
    logger.info("Wrote %d rows to %s", len(rows), output_path)
    return len(rows)


def write_summary_tsv(
    summary: Sequence[ChromosomeSummary], output_path: Path, thousands: bool = False
) -> int:
    """Write the per-chromosome summary table, Mean and Total rows included.

    The pass_rare column is written only when a rare threshold was configured.

    Returns:
        Number of rows written (excluding header)
    """
    if not summary:
        return _write_rows(output_path, ["chromosome"], [])

    header = list(summary[0].to_dict())
    rows = [
        [format_value(value, thousands) for value in row.to_dict().values()] for row in summary
    ]
    return _write_rows(output_path, header, rows)


def write_maf_bins_tsv(maf_bins: Sequence[MafBinSummary], output_path: Path) -> int:
    header = [
        "maf_bin",
        "genotyped",
        "n_variants",
        "n_tested",
        "n_zero_rsq",
        "n_included",
        "mean_rsq",
    ]
    rows = [[format_value(row.to_dict()[column]) for column in header] for row in maf_bins]
    return _write_rows(output_path, header, rows)


def write_variants_tsv(variants: Sequence[ClassifiedVariant], output_path: Path) -> int:
    """Write classified variants, one per line, for plotting layers."""
    rows = []
    for v in variants:
        rows.append(
            [
                v.id,
                format_value(v.chromosome),
                str(v.position),
                format_value(v.maf),
                format_value(v.rsq),
                format_value(v.empirical_rsq),
                v.genotyped,
                v.maf_bin.label if v.maf_bin is not None else MISSING,
            ]
        )
    return _write_rows(output_path, VARIANT_COLUMNS, rows)
