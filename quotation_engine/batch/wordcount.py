"""Word counts for one batch of newspaper pages."""

import logging
from pathlib import Path

import pandas as pd

from ..features.dtm import tokenize_words

logger = logging.getLogger(__name__)


def count_words(text) -> int:
    """Number of words in a page; missing text counts as zero."""
    return len(tokenize_words(text))


def compute_wordcounts(df: pd.DataFrame) -> pd.DataFrame:
    """
    Count words in each document.

    Args:
        df: DataFrame with columns doc_id, text

    Returns:
        DataFrame with columns doc_id, wordcount
    """
    missing = {'doc_id', 'text'} - set(df.columns)
    if missing:
        raise ValueError(f"Batch frame is missing columns: {sorted(missing)}")

    return pd.DataFrame({
        'doc_id': df['doc_id'].to_numpy(),
        'wordcount': [count_words(text) for text in df['text']],
    })


def run_wordcount(input_path: str, output_path: str) -> pd.DataFrame:
    """Read a batch Feather file, count words and write the result as Feather."""
    input_path = Path(input_path)
    output_path = Path(output_path)

    if not input_path.exists():
        raise FileNotFoundError(f"Batch input not found: {input_path}")

    pages = pd.read_feather(input_path)
    counts = compute_wordcounts(pages)

    # Renamed into place; a partial file never sits at output_path
    output_path.parent.mkdir(parents=True, exist_ok=True)
    partial_path = output_path.with_name(output_path.name + '.part')
    try:
        counts.reset_index(drop=True).to_feather(partial_path)
        partial_path.replace(output_path)
    except Exception:
        partial_path.unlink(missing_ok=True)
        raise

    logger.info("Counted words in %d documents from %s", len(counts), input_path.name)
    return counts
