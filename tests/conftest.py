"""Pytest configuration and fixtures for imputation-qc tests."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from fixtures.info_generator import (  # noqa: E402
    InfoFileGenerator,
    SyntheticInfoVariant,
    make_info_directory,
)


def make_classified(
    chromosome: int | None = 1,
    position: int = 100,
    maf: float | None = 0.1,
    rsq: float | None = 0.9,
    genotyped: bool = False,
    empirical_rsq: float | None = None,
):
    """Build a ClassifiedVariant through the classifier."""
    from imputation_qc.classifier import classify_record
    from imputation_qc.models import VariantRecord

    label = None if chromosome is None else str(chromosome)
    record = VariantRecord(
        id=f"{label}:{position}:A:G",
        chromosome=label,
        position=position,
        maf=maf,
        rsq=rsq,
        empirical_rsq=empirical_rsq,
        genotyped=genotyped,
    )
    return classify_record(record)


@pytest.fixture
def annotated_info_file(tmp_path: Path) -> Path:
    """A small gzipped annotated (Minimac4) info file for chromosome 7."""
    variants = [
        SyntheticInfoVariant("7", 12345, "A", "G", maf=0.1, rsq=0.85, genotyped=True),
        SyntheticInfoVariant("7", 12400, "C", "T", maf=0.004, rsq=0.62),
        SyntheticInfoVariant("7", 12500, "G", "A", maf=0.3, rsq=0.0),
    ]
    path = tmp_path / "chr7.info.gz"
    return InfoFileGenerator.write(path, InfoFileGenerator.generate_annotated(variants))


@pytest.fixture
def flat_info_file(tmp_path: Path) -> Path:
    """A small gzipped flat (Minimac3) info file for chromosome 3."""
    variants = [
        SyntheticInfoVariant("3", 555, "C", "T", maf=0.02, rsq=0.91, genotyped=False),
        SyntheticInfoVariant("3", 600, "A", "C", maf=0.2, rsq=1.0, empirical_rsq=0.97,
                             genotyped=True),
    ]
    path = tmp_path / "chr3.info.gz"
    return InfoFileGenerator.write(
        path, InfoFileGenerator.generate_flat(variants, genotyped_encoding="numeric")
    )


@pytest.fixture
def info_directory(tmp_path: Path) -> Path:
    """Annotated info files for chromosomes 1, 2 and 5."""
    directory = tmp_path / "info"
    make_info_directory(directory, [1, 2, 5], n_variants=300)
    return directory
