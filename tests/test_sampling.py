"""Tests for chromosome-stratified sampling."""

from collections import Counter

import pytest
from conftest import make_classified
from hypothesis import given, settings
from hypothesis import strategies as st


def make_subset(sizes: dict[int, int], genotyped: bool = False, start: int = 0):
    variants = []
    for chromosome, size in sizes.items():
        for i in range(size):
            variants.append(
                make_classified(chromosome=chromosome, position=start + i, genotyped=genotyped)
            )
    return variants


class TestSamplingRate:
    def test_rate_is_capped_at_one(self):
        from imputation_qc.sampling import sampling_rate

        assert sampling_rate(50, 100) == 1.0
        assert sampling_rate(1000, 100) == pytest.approx(0.1)
        assert sampling_rate(0, 100) == 1.0


class TestStratifiedSample:
    """Tests for stratified_sample."""

    def test_proportional_per_chromosome(self):
        from imputation_qc.sampling import stratified_sample

        variants = make_subset({1: 500, 2: 300, 3: 200})

        sample = stratified_sample(variants, 100, seed=1)
        per_chromosome = Counter(v.chromosome for v in sample)

        assert per_chromosome == {1: 50, 2: 30, 3: 20}
        assert len(sample) == 100

    def test_subsets_sampled_independently(self):
        from imputation_qc.sampling import stratified_sample

        imputed = make_subset({1: 1000})
        typed = make_subset({1: 40}, genotyped=True, start=5000)

        sample = stratified_sample(imputed + typed, 100, seed=3)
        by_status = Counter(v.genotyped for v in sample)

        assert by_status == {"Imputed": 100, "Genotyped": 40}

    def test_sample_size_at_least_subset_returns_everything(self):
        from imputation_qc.sampling import stratified_sample

        variants = make_subset({4: 30, 9: 20})

        sample = stratified_sample(variants, 50, seed=0)

        assert sorted(v.id for v in sample) == sorted(v.id for v in variants)

    def test_sorted_by_chromosome_and_position(self):
        from imputation_qc.sampling import stratified_sample

        variants = make_subset({3: 100}) + make_subset({1: 100}, genotyped=True)

        sample = stratified_sample(variants, 20, seed=5)
        keys = [(v.chromosome, v.position) for v in sample]

        assert keys == sorted(keys)

    def test_reproducible_with_seed(self):
        from imputation_qc.sampling import stratified_sample

        variants = make_subset({1: 400, 2: 600})

        first = stratified_sample(variants, 50, seed=42)
        second = stratified_sample(variants, 50, seed=42)

        assert first == second

    def test_zero_sample_size(self):
        from imputation_qc.sampling import stratified_sample

        assert stratified_sample(make_subset({1: 10}), 0, seed=0) == []

    def test_negative_sample_size(self):
        from imputation_qc.sampling import stratified_sample

        with pytest.raises(ValueError):
            stratified_sample(make_subset({1: 10}), -1)

    def test_variants_without_chromosome_are_not_sampled(self):
        from imputation_qc.sampling import stratified_sample

        variants = make_subset({1: 5}) + [make_classified(chromosome=None)]

        sample = stratified_sample(variants, 100, seed=0)

        assert len(sample) == 5
        assert all(v.chromosome == 1 for v in sample)

    @given(
        sizes=st.dictionaries(
            st.integers(min_value=1, max_value=22),
            st.integers(min_value=0, max_value=200),
            min_size=1,
            max_size=6,
        ),
        sample_size=st.integers(min_value=0, max_value=500),
        seed=st.integers(min_value=0, max_value=2**16),
    )
    @settings(max_examples=50, deadline=None)
    def test_size_within_rounding_of_target(self, sizes, sample_size, seed):
        from imputation_qc.sampling import stratified_sample

        variants = make_subset(sizes)
        subset_size = len(variants)

        sample = stratified_sample(variants, sample_size, seed=seed)

        assert len({v.id for v in sample}) == len(sample)
        assert len(sample) <= subset_size
        if sample_size >= subset_size:
            assert len(sample) == subset_size
        else:
            # At most half a variant of rounding per chromosome group
            assert abs(len(sample) - sample_size) <= len(sizes) / 2 + 1e-9
