"""Variant classification: genotyping status, autosome number and MAF bin."""

from bisect import bisect_right
from collections.abc import Iterable
from pathlib import Path

from .errors import InvalidChromosome, UnrecognizedGenotypeFlag
from .models import GENOTYPED, IMPUTED, ClassifiedVariant, MafBin, VariantRecord
from .utils.chromosomes import normalize_chromosome

MAF_BREAKPOINTS = (0.0005, 0.001, 0.005, 0.01, 0.02, 0.05)

MAF_BINS = tuple(MafBin)


def assign_maf_bin(maf: float | None) -> MafBin | None:
    """Place a MAF value in one of the seven bins.

    A value equal to a breakpoint falls in the bin starting at it, so 0.0005
    is "0.05% to 0.1%".
    """
    if maf is None:
        return None
    return MAF_BINS[bisect_right(MAF_BREAKPOINTS, maf)]


def genotype_label(flag: bool | str, variant_id: str, source: Path | str | None = None) -> str:
    """Map the normalized genotyped indicator to "Genotyped" or "Imputed"."""
    if flag is True:
        return GENOTYPED
    if flag is False:
        return IMPUTED

    where = f"{source}: " if source else ""
    raise UnrecognizedGenotypeFlag(
        f"{where}variant {variant_id}: field 'genotyped' has unrecognized value '{flag}'"
    )


def classify_record(record: VariantRecord, source: Path | str | None = None) -> ClassifiedVariant:
    """Classify a single normalized record.

    Raises:
        UnrecognizedGenotypeFlag: If the genotyped indicator is not a boolean
        InvalidChromosome: If the chromosome is not an autosome 1-22
    """
    chromosome = None
    if record.chromosome is not None:
        try:
            chromosome = normalize_chromosome(record.chromosome)
        except InvalidChromosome as e:
            where = f"{source}: " if source else ""
            raise InvalidChromosome(
                f"{where}variant {record.id}: field 'chromosome': {e}"
            ) from None

    return ClassifiedVariant(
        id=record.id,
        chromosome=chromosome,
        position=record.position,
        maf=record.maf,
        rsq=record.rsq,
        empirical_rsq=record.empirical_rsq,
        genotyped=genotype_label(record.genotyped, record.id, source),
        maf_bin=assign_maf_bin(record.maf),
    )


def classify_records(
    records: Iterable[VariantRecord], source: Path | str | None = None
) -> list[ClassifiedVariant]:
    """Classify records, keeping their order and count.

    Args:
        records: Normalized records
        source: File the records came from, used in error messages

    Returns:
        One ClassifiedVariant per input record
    """
    return [classify_record(record, source) for record in records]
