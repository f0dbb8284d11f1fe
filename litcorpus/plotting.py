"""
Plotting: Chart rendering for analysis results.

Every function takes ordered result records and returns a matplotlib
Figure; saving is left to the caller (see PersistenceManager).
"""

import math
from typing import Dict, List, Mapping, Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import polars as pl  # noqa: E402

from .comparison import FrequencyComparison  # noqa: E402
from .sentiment import SentimentLabel, SentimentWordCount  # noqa: E402
from .tfidf import TfIdfRecord  # noqa: E402

LABEL_COLORS = {
    SentimentLabel.POSITIVE: '#1b9e77',
    SentimentLabel.NEGATIVE: '#d95f02',
}


def plot_sentiment_contribution(
    contribution: Mapping[SentimentLabel, List[SentimentWordCount]],
    title: str = "Contribution to sentiment"
):
    """Horizontal bar chart per label of the words contributing most."""
    labels = list(contribution)
    fig, axes = plt.subplots(1, max(len(labels), 1), figsize=(5 * max(len(labels), 1), 5),
                             squeeze=False)

    for ax, label in zip(axes[0], labels):
        rows = list(reversed(contribution[label]))
        ax.barh([r.term for r in rows], [r.n for r in rows], color=LABEL_COLORS[label])
        ax.set_title(label.value)
        ax.set_xlabel("Count")

    fig.suptitle(title)
    fig.tight_layout()
    return fig


def plot_sentiment_trajectory(trajectory: pl.DataFrame, ncols: int = 2):
    """Net sentiment per block of lines, one panel per title."""
    titles = trajectory['title'].unique(maintain_order=True).to_list()
    nrows = max(math.ceil(len(titles) / ncols), 1)
    fig, axes = plt.subplots(nrows, ncols, figsize=(6 * ncols, 3 * nrows), squeeze=False)

    for ax, book in zip(axes.flat, titles):
        part = trajectory.filter(pl.col('title') == book)
        values = np.array(part['sentiment'].to_list())
        colors = np.where(values >= 0, LABEL_COLORS[SentimentLabel.POSITIVE],
                          LABEL_COLORS[SentimentLabel.NEGATIVE])
        ax.bar(part['index'].to_list(), values, color=colors)
        ax.set_title(book)
        ax.set_xlabel("Index")
        ax.set_ylabel("Sentiment")

    for ax in list(axes.flat)[len(titles):]:
        ax.set_visible(False)

    fig.tight_layout()
    return fig


def plot_tfidf_top_terms(top_terms: Mapping[str, Sequence[TfIdfRecord]], ncols: int = 2):
    """Faceted bar charts of the highest tf-idf terms of every title."""
    titles = list(top_terms)
    nrows = max(math.ceil(len(titles) / ncols), 1)
    fig, axes = plt.subplots(nrows, ncols, figsize=(5 * ncols, 4 * nrows), squeeze=False)

    for ax, book in zip(axes.flat, titles):
        records = list(reversed(top_terms[book]))
        ax.barh([r.term for r in records], [r.tf_idf for r in records], color='#7570b3')
        ax.set_title(book)
        ax.set_xlabel("tf-idf")

    for ax in list(axes.flat)[len(titles):]:
        ax.set_visible(False)

    fig.tight_layout()
    return fig


def plot_frequency_comparison(
    rows: Sequence[FrequencyComparison],
    reference: str,
    annotate: int = 20
):
    """
    Log-log scatter of each group's proportions against a reference group.

    Points on the diagonal are used equally often by both groups.
    """
    others: List[str] = [g for g in (rows[0].proportions if rows else []) if g != reference]
    fig, axes = plt.subplots(1, max(len(others), 1), figsize=(6 * max(len(others), 1), 6),
                             squeeze=False)

    for ax, group in zip(axes[0], others):
        x = np.array([row.proportions[group] for row in rows])
        y = np.array([row.proportions[reference] for row in rows])
        ax.scatter(x, y, alpha=0.3, s=10, color='#666666')

        low = min(x.min(), y.min())
        high = max(x.max(), y.max())
        ax.plot([low, high], [low, high], linestyle='--', color='#999999')

        for row in rows[:annotate]:
            ax.annotate(row.term, (row.proportions[group], row.proportions[reference]),
                        fontsize=7)

        ax.set_xscale('log')
        ax.set_yscale('log')
        ax.set_xlabel(group)
        ax.set_ylabel(reference)

    fig.tight_layout()
    return fig


def close_all(figures: Dict[str, object]):
    for fig in figures.values():
        plt.close(fig)
