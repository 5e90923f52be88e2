"""Tests for chromosome range expansion and label normalization."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st


class TestParseChromosomeRange:
    """Tests for comma-separated range expressions."""

    def test_range_and_single(self):
        from imputation_qc.utils.chromosomes import parse_chromosome_range

        assert parse_chromosome_range("3:5,7") == [3, 4, 5, 7]

    def test_full_autosome_range(self):
        from imputation_qc.utils.chromosomes import parse_chromosome_range

        assert parse_chromosome_range("1:22") == list(range(1, 23))

    def test_single_chromosome(self):
        from imputation_qc.utils.chromosomes import parse_chromosome_range

        assert parse_chromosome_range("22") == [22]

    def test_overlapping_and_unordered_tokens(self):
        from imputation_qc.utils.chromosomes import parse_chromosome_range

        assert parse_chromosome_range("10, 2:4,3,1") == [1, 2, 3, 4, 10]

    def test_reversed_range_is_rejected(self):
        from imputation_qc.errors import InvalidRangeError
        from imputation_qc.utils.chromosomes import parse_chromosome_range

        with pytest.raises(InvalidRangeError, match="5:3"):
            parse_chromosome_range("5:3")

    @pytest.mark.parametrize("expression", ["0:2", "23", "1:23", "0"])
    def test_out_of_bounds_is_rejected(self, expression):
        from imputation_qc.errors import InvalidRangeError
        from imputation_qc.utils.chromosomes import parse_chromosome_range

        with pytest.raises(InvalidRangeError):
            parse_chromosome_range(expression)

    @pytest.mark.parametrize("expression", ["", "X", "1-5", "1:2:3", "1,,2", "chr1"])
    def test_malformed_is_rejected(self, expression):
        from imputation_qc.errors import InvalidRangeError
        from imputation_qc.utils.chromosomes import parse_chromosome_range

        with pytest.raises(InvalidRangeError):
            parse_chromosome_range(expression)

    def test_invalid_range_error_is_value_error(self):
        from imputation_qc.utils.chromosomes import parse_chromosome_range

        with pytest.raises(ValueError):
            parse_chromosome_range("abc")

    @given(
        tokens=st.lists(
            st.tuples(st.integers(1, 22), st.integers(0, 21)), min_size=1, max_size=6
        )
    )
    @settings(max_examples=100)
    def test_expansion_is_ascending_unique_and_bounded(self, tokens):
        from imputation_qc.utils.chromosomes import parse_chromosome_range

        parts = []
        expected = set()
        for start, width in tokens:
            end = min(22, start + width)
            parts.append(f"{start}:{end}" if end != start else str(start))
            expected.update(range(start, end + 1))

        result = parse_chromosome_range(",".join(parts))

        assert result == sorted(set(result))
        assert all(1 <= c <= 22 for c in result)
        assert set(result) == expected


class TestNormalizeChromosome:
    """Tests for reducing labels to autosome numbers."""

    def test_strips_chr_prefix(self):
        from imputation_qc.utils.chromosomes import normalize_chromosome

        assert normalize_chromosome("chr7") == 7
        assert normalize_chromosome("CHR22") == 22

    def test_bare_and_integer_labels(self):
        from imputation_qc.utils.chromosomes import normalize_chromosome

        assert normalize_chromosome("1") == 1
        assert normalize_chromosome(12) == 12

    @pytest.mark.parametrize("label", ["chrX", "X", "0", "23", "chr23", "MT"])
    def test_non_autosomes_are_rejected(self, label):
        from imputation_qc.errors import InvalidChromosome
        from imputation_qc.utils.chromosomes import normalize_chromosome

        with pytest.raises(InvalidChromosome):
            normalize_chromosome(label)
