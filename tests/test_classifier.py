"""Tests for variant classification."""

import math

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st


class TestAssignMafBin:
    """Tests for MAF bin assignment."""

    @pytest.mark.parametrize(
        ("maf", "label"),
        [
            (0.0, "0% to 0.05%"),
            (0.0004, "0% to 0.05%"),
            (0.0005, "0.05% to 0.1%"),
            (0.0009, "0.05% to 0.1%"),
            (0.001, "0.1% to 0.5%"),
            (0.004, "0.1% to 0.5%"),
            (0.007, "0.5% to 1%"),
            (0.015, "1% to 2%"),
            (0.03, "2% to 5%"),
            (0.05, "> 5%"),
            (0.5, "> 5%"),
        ],
    )
    def test_bins(self, maf, label):
        from imputation_qc.classifier import assign_maf_bin

        assert assign_maf_bin(maf).label == label

    def test_missing_maf_has_no_bin(self):
        from imputation_qc.classifier import assign_maf_bin

        assert assign_maf_bin(None) is None

    def test_bins_are_ordered(self):
        from imputation_qc.models import MafBin

        assert len(list(MafBin)) == 7
        assert list(MafBin)[0] == MafBin.BELOW_0_05
        assert list(MafBin)[-1] == MafBin.ABOVE_5

    @given(maf=st.floats(min_value=0.0, max_value=0.5, allow_nan=False))
    @settings(max_examples=200)
    def test_every_maf_maps_to_exactly_one_bin(self, maf):
        from imputation_qc.classifier import MAF_BREAKPOINTS, assign_maf_bin
        from imputation_qc.models import MafBin

        maf_bin = assign_maf_bin(maf)
        index = list(MafBin).index(maf_bin)

        lower = MAF_BREAKPOINTS[index - 1] if index > 0 else -math.inf
        upper = MAF_BREAKPOINTS[index] if index < len(MAF_BREAKPOINTS) else math.inf
        assert lower <= maf < upper


class TestClassifyRecords:
    """Tests for genotype labels and chromosome reduction."""

    def make_record(self, **overrides):
        from imputation_qc.models import VariantRecord

        fields = {
            "id": "chr7:12345:A:G",
            "chromosome": "chr7",
            "position": 12345,
            "maf": 0.1,
            "rsq": 0.85,
            "genotyped": True,
        }
        fields.update(overrides)
        return VariantRecord(**fields)

    def test_genotyped_record(self):
        from imputation_qc.classifier import classify_records
        from imputation_qc.models import MafBin

        (variant,) = classify_records([self.make_record()])

        assert variant.genotyped == "Genotyped"
        assert variant.chromosome == 7
        assert variant.maf_bin == MafBin.ABOVE_5
        assert variant.is_genotyped

    def test_imputed_record(self):
        from imputation_qc.classifier import classify_records

        (variant,) = classify_records([self.make_record(genotyped=False)])
        assert variant.genotyped == "Imputed"

    def test_same_cardinality_and_order(self):
        from imputation_qc.classifier import classify_records

        records = [self.make_record(position=p, id=f"7:{p}:A:G") for p in (30, 10, 20)]
        variants = classify_records(records)

        assert [v.position for v in variants] == [30, 10, 20]

    def test_unrecognized_genotype_flag(self):
        from imputation_qc.classifier import classify_records
        from imputation_qc.errors import SchemaViolationError, UnrecognizedGenotypeFlag

        with pytest.raises(UnrecognizedGenotypeFlag, match="chr7.info.gz.*genotyped.*maybe"):
            classify_records([self.make_record(genotyped="maybe")], source="chr7.info.gz")

        assert issubclass(UnrecognizedGenotypeFlag, SchemaViolationError)

    def test_invalid_chromosome(self):
        from imputation_qc.classifier import classify_records
        from imputation_qc.errors import InvalidChromosome

        with pytest.raises(InvalidChromosome, match="chrX:1:A:G.*chromosome"):
            classify_records([self.make_record(chromosome="chrX", id="chrX:1:A:G")])

    def test_missing_chromosome_is_kept_absent(self):
        from imputation_qc.classifier import classify_records

        (variant,) = classify_records([self.make_record(chromosome=None)])

        assert variant.chromosome is None
        assert not variant.is_tested
