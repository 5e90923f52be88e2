"""Export module for summary and sample tables."""

from .tables import (
    format_value,
    write_maf_bins_tsv,
    write_summary_tsv,
    write_variants_tsv,
)

__all__ = [
    "format_value",
    "write_maf_bins_tsv",
    "write_summary_tsv",
    "write_variants_tsv",
]
