"""
Tests for litcorpus.comparison.
"""

import pytest

from litcorpus import ComparisonError, CrossCorpusComparator, StopwordRemover
from litcorpus.comparison import FrequencyComparison


@pytest.fixture
def comparator():
    return CrossCorpusComparator(StopwordRemover(stopwords={"the", "and"}))


@pytest.fixture
def groups():
    return {
        "austen": "the ball and the letter the ball sister".split(),
        "bronte": "the moor the letter ball moor".split(),
        "wells": "the machine letter ball martian".split(),
    }


class TestProportions:
    """Test per-group proportions."""

    def test_proportions_sum_to_one(self, comparator, groups):
        for group, props in comparator.proportions(groups).items():
            assert sum(props.values()) == pytest.approx(1.0)

    def test_stopwords_and_non_letters_removed(self, comparator):
        props = comparator.proportions({"g": ["The", "Ball", "1811", "ball's", "and"]})
        assert props == {"g": {"ball": 0.5, "ball's": 0.5}}

    def test_empty_group(self, comparator):
        assert comparator.proportions({"g": ["the", "and"]}) == {"g": {}}


class TestCompare:
    """Test alignment and display filtering."""

    def test_only_terms_in_all_groups_kept(self, comparator, groups):
        rows = comparator.compare(groups)
        assert {row.term for row in rows} == {"ball", "letter"}

    def test_proportions_in_unit_interval(self, comparator, groups):
        for row in comparator.compare(groups):
            assert set(row.proportions) == {"austen", "bronte", "wells"}
            assert all(0 < p <= 1 for p in row.proportions.values())

    def test_rows_sorted_by_largest_proportion(self, comparator, groups):
        rows = comparator.compare(groups)
        # ball: austen 2/4; letter: 1/4 everywhere
        assert [row.term for row in rows] == ["ball", "letter"]
        assert rows[0].proportions["austen"] == pytest.approx(0.5)

    def test_threshold_is_strict(self, comparator):
        groups = {"a": ["x", "y", "y", "y"], "b": ["x", "y", "z", "z"]}
        rows = comparator.compare(groups, threshold=0.25)
        # x is exactly 0.25 in both groups
        assert [row.term for row in rows] == ["y"]

    def test_negative_threshold_rejected(self, comparator):
        with pytest.raises(ValueError):
            comparator.filter_threshold([], -0.1)

    def test_needs_two_groups(self, comparator):
        with pytest.raises(ComparisonError):
            comparator.compare({"only": ["ball"]})

    def test_to_frame_is_wide(self, comparator, groups):
        df = comparator.to_frame(comparator.compare(groups))
        assert df.columns == ["term", "austen", "bronte", "wells"]
        assert df.height == 2

    def test_to_frame_empty(self, comparator):
        assert comparator.to_frame([]).columns == ["term"]

    def test_to_frame_rejects_group_named_term(self, comparator):
        rows = comparator.compare({"term": ["ball", "moor"], "other": ["ball"]})
        with pytest.raises(ComparisonError):
            comparator.to_frame(rows)


class TestFrequencyComparison:
    """Test the aligned row value type."""

    def test_rows_are_hashable_and_read_only(self, comparator, groups):
        rows = comparator.compare(groups)
        assert len(set(rows)) == len(rows)
        with pytest.raises(TypeError):
            rows[0].proportions["austen"] = 1.0

    def test_equal_rows_hash_alike(self):
        proportions = {"a": 0.5, "b": 0.25}
        first = FrequencyComparison("ball", proportions)
        proportions["a"] = 0.0
        second = FrequencyComparison("ball", {"b": 0.25, "a": 0.5})
        assert first == second
        assert hash(first) == hash(second)


class TestCorrelate:
    """Test Pearson correlation between groups."""

    def test_perfect_correlation(self, comparator):
        groups = {
            "a": ["x"] * 1 + ["y"] * 2 + ["z"] * 3,
            "b": ["x"] * 2 + ["y"] * 4 + ["z"] * 6,
        }
        rows = comparator.compare(groups)
        assert comparator.correlate(rows, "a", "b") == pytest.approx(1.0)

    def test_unknown_group(self, comparator, groups):
        rows = comparator.compare(groups)
        with pytest.raises(ComparisonError):
            comparator.correlate(rows, "austen", "dickens")

    def test_too_few_rows(self, comparator):
        rows = comparator.compare({"a": ["x"], "b": ["x"]})
        with pytest.raises(ComparisonError):
            comparator.correlate(rows, "a", "b")
