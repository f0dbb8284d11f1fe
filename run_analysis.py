from litcorpus import (
    CorpusReader,
    CrossCorpusComparator,
    FrequencyCounter,
    PersistenceManager,
    SentimentLexicon,
    SentimentScorer,
    StopwordRemover,
    TfIdfRanker,
    Tokenizer,
    load_config,
)
from litcorpus import plotting
from litcorpus.logging_config import setup_logging
import sys

import polars as pl


def section(number, title):
    print("\n" + "=" * 80)
    print(f"[{number}] {title}")
    print("=" * 80)


def main(config_path=None):
    config = load_config(config_path)
    setup_logging(config.output.log_level, config.output.log_file)

    # =========================================================================
    # 1. LOAD CORPUS
    # =========================================================================
    section(1, "Loading corpus")

    reader = CorpusReader.from_config(config)
    corpus = reader.download(config.all_book_ids, meta_fields=('title', 'author'))

    stats = corpus.get_statistics()
    for title, n_tokens in stats['tokens_per_document'].items():
        print(f"  • {title:45s} {n_tokens:8d} tokens")

    tokenizer = Tokenizer()
    stopwords = StopwordRemover(
        language=config.analysis.stopword_language,
        custom_stopwords=config.analysis.custom_stopwords
    )
    output = PersistenceManager(config.output.directory)

    # =========================================================================
    # 2. WORD FREQUENCIES
    # =========================================================================
    section(2, "Most common words (stop-words removed)")

    filtered = corpus.token_streams(tokenizer, stopwords)
    counter = FrequencyCounter()
    counts = counter.count_corpus(filtered)
    totals = counter.totals(counts, corpus.titles)

    tidy = corpus.tidy(tokenizer, stopwords)
    word_counts = tidy.group_by('word').len().sort(['len', 'word'], descending=[True, False])
    print(word_counts.head(15))

    output.save_table(tidy, "tidy_tokens.csv")
    output.save_table(counter.to_frame(counts), "term_counts.csv")

    # =========================================================================
    # 3. SENTIMENT
    # =========================================================================
    section(3, "Sentiment (bing lexicon)")

    scorer = SentimentScorer(SentimentLexicon.from_nltk(), tokenizer)
    sentiment_counts = scorer.corpus_word_counts(corpus.token_streams(tokenizer))

    for row in sentiment_counts[:15]:
        print(f"  • {row.term:15s} {row.label.value:10s} {row.n:6d}")

    trajectory = pl.concat([
        scorer.trajectory(doc, config.analysis.sentiment_block_size) for doc in corpus
    ])
    contribution = scorer.contribution(sentiment_counts, n=10)

    output.save_table(scorer.to_frame(sentiment_counts), "sentiment_word_counts.csv")
    output.save_table(trajectory, "sentiment_trajectory.csv")

    # =========================================================================
    # 4. TF-IDF
    # =========================================================================
    section(4, "Highest tf-idf terms")

    ranker = TfIdfRanker()
    records = ranker.compute(counts, totals)
    ranked = ranker.rank_global(records)
    top_terms = ranker.top_per_title(records, k=config.analysis.top_k)

    for record in ranked[:15]:
        print(f"  • {record.title:40s} {record.term:15s} {record.tf_idf:.5f}")

    output.save_table(ranker.to_frame(ranked), "tfidf.csv")
    matrix, row_titles, column_terms = ranker.to_matrix(records)
    output.save_sparse_matrix(matrix, "tfidf.npz", row_titles, column_terms)

    # =========================================================================
    # 5. AUTHOR COMPARISON
    # =========================================================================
    section(5, "Word frequencies across authors")

    group_titles = {
        group: [doc.title for doc in corpus if doc.gutenberg_id in ids]
        for group, ids in config.books.items()
    }
    group_streams = corpus.group_token_streams(group_titles, tokenizer)

    comparator = CrossCorpusComparator(stopwords, tokenizer)
    shared = comparator.compare(group_streams)
    displayed = comparator.filter_threshold(shared, config.analysis.comparison_threshold)

    reference = next(iter(config.books))
    for group in config.books:
        if group == reference:
            continue
        r = comparator.correlate(shared, reference, group)
        print(f"  • Pearson r ({reference} vs {group}): {r:.3f}")

    output.save_table(comparator.to_frame(shared), "author_frequencies.csv")

    # =========================================================================
    # 6. CHARTS
    # =========================================================================
    section(6, "Rendering charts")

    figures = {
        "sentiment_contribution.png": plotting.plot_sentiment_contribution(contribution),
        "sentiment_trajectory.png": plotting.plot_sentiment_trajectory(trajectory),
        "tfidf_top_terms.png": plotting.plot_tfidf_top_terms(top_terms),
        "author_frequencies.png": plotting.plot_frequency_comparison(displayed, reference),
    }
    for filename, fig in figures.items():
        output.save_figure(fig, filename)
    plotting.close_all(figures)

    print(f"\n✓ Results written to {output.base_path}")


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else None)
