"""
Tests for litcorpus.frequency and litcorpus.tfidf.

Includes the 'the cat sat' / 'the dog sat' end-to-end scenario.
"""

import math

import pytest

from litcorpus import Corpus, Document, FrequencyCounter, StopwordRemover, TfIdfRanker
from litcorpus.frequency import TermCount


@pytest.fixture
def counter():
    return FrequencyCounter()


@pytest.fixture
def ranker():
    return TfIdfRanker()


@pytest.fixture
def cat_dog_counts(cat_dog_corpus, tokenizer, counter):
    streams = cat_dog_corpus.token_streams(tokenizer, StopwordRemover(stopwords={"the"}))
    return counter.count_corpus(streams)


class TestFrequencyCounter:
    """Test term counting."""

    def test_cat_dog_counts(self, cat_dog_counts):
        assert cat_dog_counts == {
            ("A", "cat"): 1, ("A", "sat"): 1,
            ("B", "dog"): 1, ("B", "sat"): 1,
        }

    def test_counts_sum_to_filtered_token_total(self, small_corpus, tokenizer, stopwords, counter):
        streams = small_corpus.token_streams(tokenizer, stopwords)
        counts = counter.count_corpus(streams)
        totals = counter.totals(counts)

        for title, stream in streams.items():
            assert totals[title] == len(list(stream))

    def test_counting_is_idempotent(self, counter):
        tokens = ["rain", "garden", "rain"]
        assert counter.count(tokens, "T") == counter.count(tokens, "T")

    def test_corpus_counts_equal_merged_document_counts(self, small_corpus, tokenizer, counter):
        streams = small_corpus.token_streams(tokenizer)
        per_document = [counter.count(stream, title) for title, stream in streams.items()]
        assert counter.count_corpus(streams) == counter.merge(*reversed(per_document))

    def test_absent_terms_have_no_rows(self, cat_dog_counts):
        assert ("A", "dog") not in cat_dog_counts
        assert all(n >= 1 for n in cat_dog_counts.values())

    def test_empty_document_has_no_rows(self, counter):
        assert counter.count([], "Empty") == {}

    def test_totals_keep_titles_without_counts(self, counter):
        counts = {("A", "cat"): 2, ("A", "sat"): 1}
        assert counter.totals(counts) == {"A": 3}
        assert counter.totals(counts, ["A", "Empty"]) == {"A": 3, "Empty": 0}

    def test_to_records_order(self, counter):
        counts = {("A", "b"): 2, ("A", "a"): 2, ("B", "a"): 2, ("A", "c"): 5}
        records = counter.to_records(counts)
        assert [(r.title, r.term, r.n) for r in records] == [
            ("A", "c", 5), ("A", "a", 2), ("B", "a", 2), ("A", "b", 2)]

    def test_to_frame(self, cat_dog_counts, counter):
        df = counter.to_frame(cat_dog_counts)
        assert df.columns == ["title", "term", "n"]
        assert df.height == 4

    def test_term_count_requires_positive_n(self):
        with pytest.raises(ValueError):
            TermCount("A", "cat", 0)


class TestTfIdfRanker:
    """Test tf-idf computation and ranking."""

    def test_cat_dog_scenario(self, cat_dog_counts, ranker):
        records = {(r.title, r.term): r for r in ranker.compute(cat_dog_counts)}

        for title in ("A", "B"):
            sat = records[(title, "sat")]
            assert sat.df == 2
            assert sat.idf == 0.0
            assert sat.tf_idf == 0.0

        cat = records[("A", "cat")]
        assert cat.total == 2
        assert cat.tf == 0.5
        assert cat.df == 1
        assert cat.idf == pytest.approx(math.log(2))
        assert cat.tf_idf == pytest.approx(0.3466, abs=1e-4)
        assert records[("B", "dog")].tf_idf == pytest.approx(cat.tf_idf)

    def test_term_in_every_document_scores_zero(self, small_corpus, tokenizer, stopwords, ranker):
        counts = FrequencyCounter().count_corpus(small_corpus.token_streams(tokenizer, stopwords))
        records = ranker.compute(counts)

        everywhere = [r for r in records if r.term == "garden"]
        assert len(everywhere) == len(small_corpus)
        assert all(r.tf_idf == 0.0 for r in everywhere)

    def test_tf_idf_is_product(self, small_corpus, tokenizer, ranker):
        counts = FrequencyCounter().count_corpus(small_corpus.token_streams(tokenizer))
        for record in ranker.compute(counts):
            assert abs(record.tf_idf - record.tf * record.idf) <= 1e-9
            assert record.tf == pytest.approx(record.n / record.total)

    def test_title_without_tokens_is_skipped_but_counted(self, ranker):
        counts = {("A", "cat"): 1, ("B", "dog"): 1}
        records = ranker.compute(counts, totals={"A": 1, "B": 1, "Empty": 0})

        assert {r.title for r in records} == {"A", "B"}
        assert all(r.idf == pytest.approx(math.log(3)) for r in records)

    def test_empty_counts(self, ranker):
        assert ranker.compute({}) == []

    def test_rank_global_is_deterministic(self, ranker):
        counts = {("B", "b"): 1, ("A", "a"): 1, ("B", "a"): 1, ("A", "b"): 1, ("C", "c"): 2}
        first = ranker.rank_global(ranker.compute(counts))
        second = ranker.rank_global(ranker.compute(dict(reversed(list(counts.items())))))
        assert first == second
        # c only in C, tf=1; a and b in two of three titles, tf=1/2
        assert [(r.term, r.title) for r in first] == [
            ("c", "C"), ("a", "A"), ("a", "B"), ("b", "A"), ("b", "B")]

    def test_top_per_title(self, ranker):
        counts = {
            ("A", "common"): 4, ("A", "rare"): 1, ("A", "only"): 3,
            ("B", "common"): 2, ("B", "else"): 2,
        }
        top = ranker.top_per_title(ranker.compute(counts), k=2)

        assert list(top) == ["A", "B"]
        assert [r.term for r in top["A"]] == ["only", "rare"]
        assert [r.term for r in top["B"]] == ["else", "common"]

    def test_top_per_title_rejects_bad_k(self, ranker):
        with pytest.raises(ValueError):
            ranker.top_per_title([], k=0)

    def test_to_matrix_drops_zero_scores(self, cat_dog_counts, ranker):
        matrix, titles, terms = ranker.to_matrix(ranker.compute(cat_dog_counts))

        assert titles == ["A", "B"]
        assert terms == ["cat", "dog", "sat"]
        assert matrix.shape == (2, 3)
        assert matrix.nnz == 2

    def test_to_frame_columns(self, cat_dog_counts, ranker):
        df = ranker.to_frame(ranker.compute(cat_dog_counts))
        assert df.columns == ["title", "term", "n", "total", "tf", "df", "idf", "tf_idf"]


class TestEndToEnd:
    """Pipeline from documents to ranked terms."""

    def test_distinctive_terms_rank_first(self, tokenizer):
        corpus = Corpus([
            Document.from_text("Whale", "the whale the sea the whale ship"),
            Document.from_text("Moor", "the moor the wind the moor house"),
        ])
        counts = FrequencyCounter().count_corpus(
            corpus.token_streams(tokenizer, StopwordRemover(stopwords={"the"})))
        top = TfIdfRanker().top_per_title(TfIdfRanker().compute(counts), k=1)

        assert top["Whale"][0].term == "whale"
        assert top["Moor"][0].term == "moor"

    def test_stopword_only_document_counts_toward_corpus_size(self, tokenizer):
        corpus = Corpus([
            Document.from_text("A", "cat sat"),
            Document.from_text("B", "cat dog"),
            Document.from_text("C", "the the"),
        ])
        counter = FrequencyCounter()
        counts = counter.count_corpus(
            corpus.token_streams(tokenizer, StopwordRemover(stopwords={"the"})))
        totals = counter.totals(counts, corpus.titles)

        assert totals == {"A": 2, "B": 2, "C": 0}

        cat = [r for r in TfIdfRanker().compute(counts, totals) if r.term == "cat"]
        assert len(cat) == 2
        assert all(r.idf == pytest.approx(math.log(3 / 2)) for r in cat)
        assert all(r.tf_idf > 0 for r in cat)
