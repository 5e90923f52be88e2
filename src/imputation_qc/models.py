"""Data models for imputation info records and summaries."""

from dataclasses import dataclass
from enum import Enum

GENOTYPED = "Genotyped"
IMPUTED = "Imputed"


class InfoFormat(Enum):
    """On-disk layout of a per-chromosome info file."""

    ANNOTATED = "annotated"
    FLAT = "flat"


class MafBin(Enum):
    """Minor allele frequency bins, in ascending order."""

    BELOW_0_05 = "0% to 0.05%"
    FROM_0_05_TO_0_1 = "0.05% to 0.1%"
    FROM_0_1_TO_0_5 = "0.1% to 0.5%"
    FROM_0_5_TO_1 = "0.5% to 1%"
    FROM_1_TO_2 = "1% to 2%"
    FROM_2_TO_5 = "2% to 5%"
    ABOVE_5 = "> 5%"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class VariantRecord:
    """A single normalized row from an info file."""

    id: str
    chromosome: str | None
    position: int
    maf: float | None
    rsq: float | None
    empirical_rsq: float | None = None

    # True/False once recognised; unrecognised raw encodings are kept as-is
    genotyped: bool | str = False


@dataclass(frozen=True, slots=True)
class ClassifiedVariant:
    """A variant with its genotyping status, autosome number and MAF bin."""

    id: str
    chromosome: int | None
    position: int
    maf: float | None
    rsq: float | None
    empirical_rsq: float | None
    genotyped: str
    maf_bin: MafBin | None

    @property
    def is_genotyped(self) -> bool:
        return self.genotyped == GENOTYPED

    @property
    def is_tested(self) -> bool:
        """Whether the variant carries everything inclusion rules need."""
        return self.rsq is not None and self.maf is not None and self.chromosome is not None


@dataclass(frozen=True)
class InclusionConfig:
    """Thresholds deciding whether a variant is used downstream.

    ``rsq_rare`` left unset means rare variants are judged by MAF alone, so
    they are only included when genotyped.
    """

    maf_cutoff: float = 0.01
    rsq_common: float = 0.8
    rsq_rare: float | None = None

    @property
    def has_rare_threshold(self) -> bool:
        return self.rsq_rare is not None


@dataclass(frozen=True, slots=True)
class InclusionFlags:
    """Inclusion booleans for one tested variant."""

    pass_common: bool
    pass_rare: bool | None
    pass_typed: bool
    included: bool


@dataclass
class ChromosomeSummary:
    """One row of the per-chromosome summary table."""

    label: str
    n_tested: int | float
    pass_common: int | float
    pass_rare: int | float | None
    pass_typed: int | float
    included: int | float

    def to_dict(self) -> dict:
        row = {
            "chromosome": self.label,
            "n_tested": self.n_tested,
            "pass_common": self.pass_common,
        }
        if self.pass_rare is not None:
            row["pass_rare"] = self.pass_rare
        row["pass_typed"] = self.pass_typed
        row["included"] = self.included
        return row


@dataclass
class MafBinSummary:
    """Quality breakdown for one MAF bin and genotyping status."""

    maf_bin: MafBin
    genotyped: str
    n_variants: int = 0
    n_tested: int = 0
    n_zero_rsq: int = 0
    n_included: int = 0
    mean_rsq: float | None = None

    def to_dict(self) -> dict:
        return {
            "maf_bin": self.maf_bin.label,
            "genotyped": self.genotyped,
            "n_variants": self.n_variants,
            "n_tested": self.n_tested,
            "n_zero_rsq": self.n_zero_rsq,
            "n_included": self.n_included,
            "mean_rsq": round(self.mean_rsq, 4) if self.mean_rsq is not None else None,
        }
