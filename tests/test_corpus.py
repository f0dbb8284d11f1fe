"""
Tests for litcorpus.document and litcorpus.corpus.
"""

import pytest

from litcorpus import Corpus, CorpusError, Document, StopwordRemover


class TestDocument:
    """Test the immutable document structure."""

    def test_from_text_splits_lines(self):
        doc = Document.from_text("T", "one\ntwo\n\nthree")
        assert doc.lines == ("one", "two", "", "three")
        assert len(doc) == 4
        assert doc.text == "one\ntwo\n\nthree"

    def test_metadata_properties(self):
        doc = Document("Emma", ["x"], {"gutenberg_id": 158, "author": "Austen, Jane"})
        assert doc.gutenberg_id == 158
        assert doc.author == "Austen, Jane"

    def test_is_immutable(self):
        doc = Document("T", ["x"], {"author": "A"})
        with pytest.raises(AttributeError):
            doc.title = "Other"
        with pytest.raises(TypeError):
            doc.metadata["author"] = "B"

    def test_metadata_copied(self):
        meta = {"author": "A"}
        doc = Document("T", ["x"], meta)
        meta["author"] = "B"
        assert doc.author == "A"

    def test_empty_title_rejected(self):
        with pytest.raises(ValueError):
            Document("", ["x"])

    def test_is_empty(self):
        assert Document("T", ["", "   "]).is_empty()
        assert not Document("T", ["word"]).is_empty()

    def test_to_dict(self):
        data = Document("T", ["a", "b"], {"author": "A"}).to_dict()
        assert data == {"title": "T", "text": "a\nb", "line_count": 2, "author": "A"}


class TestCorpus:
    """Test corpus construction and views."""

    def test_keyed_by_title_in_load_order(self, small_corpus):
        assert small_corpus.titles == ["Garden Days", "Moor House", "Time Engine"]
        assert "Moor House" in small_corpus
        assert small_corpus["Moor House"].author == "Brontë, Charlotte"

    def test_duplicate_titles_rejected(self):
        with pytest.raises(CorpusError):
            Corpus([Document("T", ["a"]), Document("T", ["b"])])

    def test_unknown_title(self, small_corpus):
        with pytest.raises(CorpusError):
            small_corpus.get_document("Missing")

    def test_documents_read_only(self, small_corpus):
        with pytest.raises(TypeError):
            small_corpus.documents["New"] = Document("New", [])

    def test_token_streams_with_stopwords(self, cat_dog_corpus, tokenizer):
        streams = cat_dog_corpus.token_streams(tokenizer, StopwordRemover(stopwords={"the"}))
        assert {title: list(s) for title, s in streams.items()} == {
            "A": ["cat", "sat"], "B": ["dog", "sat"]}

    def test_group_by_author(self, small_corpus):
        groups = small_corpus.group_by("author")
        assert set(groups) == {"Austen, Jane", "Brontë, Charlotte", "Wells, H. G."}

    def test_group_token_streams_concatenates(self, cat_dog_corpus, tokenizer):
        grouped = cat_dog_corpus.group_token_streams({"all": ["A", "B"]}, tokenizer)
        assert list(grouped["all"]) == ["the", "cat", "sat", "the", "dog", "sat"]
        assert list(grouped["all"]) == list(grouped["all"])

    def test_group_token_streams_unknown_title(self, cat_dog_corpus):
        with pytest.raises(CorpusError):
            cat_dog_corpus.group_token_streams({"g": ["A", "Z"]})

    def test_tidy_table(self, small_corpus, tokenizer, stopwords):
        df = small_corpus.tidy(tokenizer, stopwords)

        assert df.columns == ["title", "author", "linenumber", "chapter", "word"]
        assert "the" not in df["word"].to_list()
        garden = df.filter(df["title"] == "Garden Days")
        assert garden["chapter"].max() == 3
        assert garden["linenumber"].min() == 1

    def test_tidy_empty_corpus(self):
        assert Corpus().tidy().height == 0

    def test_statistics(self, cat_dog_corpus):
        stats = cat_dog_corpus.get_statistics()
        assert stats["total_documents"] == 2
        assert stats["tokens_per_document"] == {"A": 3, "B": 3}
        assert stats["token_count"]["total"] == 6

    def test_filter_by_titles(self, small_corpus):
        subset = small_corpus.filter_by_titles(["Time Engine"])
        assert subset.titles == ["Time Engine"]
        assert len(small_corpus) == 3
