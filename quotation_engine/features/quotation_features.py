"""Features of potential quotations (document, verse pairs)."""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd
from scipy.stats import norm
from sklearn.feature_extraction.text import TfidfTransformer

from .dtm import DocumentTermMatrix, verse_ngrams, verse_token_counts
from ..config import get_config

logger = logging.getLogger(__name__)

POTENTIAL_QUOTATION_COLUMNS = [
    'doc_id', 'verse_id', 'version',
    'tokens', 'tfidf', 'proportion', 'runs_pval', 'sim_total', 'sim_mean',
]


def runs_test_pvalue(sequence: Iterable[bool]) -> float:
    """
    One-sided Wald-Wolfowitz runs test for clustering of matched positions.

    Small p-values mean fewer runs than chance would give, i.e. the matched
    tokens of a verse appear together, as in a real quotation. Uses the
    normal approximation.

    Returns:
        1.0 when nothing matched, 0.0 when every position matched, and 1.0
        when the run count has no variance.
    """
    seq = np.asarray(list(sequence), dtype=bool)
    n1 = int(seq.sum())
    n2 = len(seq) - n1

    if n1 == 0:
        return 1.0
    if n2 == 0:
        return 0.0

    runs = 1 + int(np.count_nonzero(seq[1:] != seq[:-1]))
    n = n1 + n2
    mean = 2.0 * n1 * n2 / n + 1
    variance = 2.0 * n1 * n2 * (2.0 * n1 * n2 - n) / (n ** 2 * (n - 1))

    if variance <= 0:
        return 1.0

    z = (runs - mean) / np.sqrt(variance)
    return float(norm.cdf(z))


class QuotationFeatureEngine:
    """Engine for computing potential quotation features."""

    def __init__(
        self,
        ngram_range: Optional[Tuple[int, int]] = None,
        min_tokens: Optional[int] = None
    ):
        """
        Initialize feature engine.

        Args:
            ngram_range: Smallest and largest n-gram size used as tokens
            min_tokens: Fewest shared tokens for a pair to be kept
        """
        config = get_config()
        self.ngram_range = tuple(ngram_range or config.get('features.ngram_range', [1, 1]))
        self.min_tokens = int(min_tokens if min_tokens is not None else config.get('features.min_tokens', 2))
        if self.min_tokens < 1:
            raise ValueError(f"min_tokens must be at least 1, got {self.min_tokens}")

    def compute_features(
        self,
        documents: pd.DataFrame,
        verses: pd.DataFrame
    ) -> pd.DataFrame:
        """
        Compute features for every document/verse pair sharing enough tokens.

        Args:
            documents: DataFrame with columns doc_id, text
            verses: DataFrame with columns verse_id, version, text

        Returns:
            DataFrame with columns doc_id, verse_id, version, tokens, tfidf,
            proportion, runs_pval, sim_total, sim_mean
        """
        self._check_columns(documents, ['doc_id', 'text'], 'documents')
        self._check_columns(verses, ['verse_id', 'version', 'text'], 'verses')

        if documents.empty or verses.empty:
            return pd.DataFrame(columns=POTENTIAL_QUOTATION_COLUMNS)

        doc_texts = documents['text'].fillna('').tolist()
        verse_texts = verses['text'].fillna('').tolist()

        dtm = DocumentTermMatrix(self.ngram_range).fit(verse_texts)
        verse_dtm = dtm.transform(verse_texts)
        doc_dtm = dtm.transform(doc_texts)

        overlap = (doc_dtm @ verse_dtm.T).tocoo()
        keep = overlap.data >= self.min_tokens
        rows, cols = overlap.row[keep], overlap.col[keep]
        tokens = overlap.data[keep]

        logger.info(
            "Found %d potential quotations among %d documents x %d verses",
            len(tokens), len(documents), len(verses)
        )

        if len(tokens) == 0:
            return pd.DataFrame(columns=POTENTIAL_QUOTATION_COLUMNS)

        counts = verse_token_counts(verse_dtm)
        proportion = tokens / counts[cols]

        features = pd.DataFrame({
            'doc_id': documents['doc_id'].to_numpy()[rows],
            'verse_id': verses['verse_id'].to_numpy()[cols],
            'version': verses['version'].to_numpy()[cols],
            'tokens': tokens.astype(int),
            'tfidf': self._tfidf_scores(doc_dtm, verse_dtm, rows, cols),
            'proportion': proportion,
            'runs_pval': self._runs_pvalues(doc_texts, verse_texts, rows, cols),
        })

        grouped = features.groupby(['doc_id', 'version'])['proportion']
        features['sim_total'] = grouped.transform('sum')
        features['sim_mean'] = grouped.transform('mean')

        return features[POTENTIAL_QUOTATION_COLUMNS]

    def _check_columns(self, df: pd.DataFrame, columns: List[str], name: str) -> None:
        missing = set(columns) - set(df.columns)
        if missing:
            raise ValueError(f"{name} is missing columns: {sorted(missing)}")

    def _tfidf_scores(self, doc_dtm, verse_dtm, rows: np.ndarray, cols: np.ndarray) -> np.ndarray:
        """Sum of the verse's TF-IDF weights over the tokens the document shares."""
        transformer = TfidfTransformer(norm=None)
        verse_weights = transformer.fit_transform(verse_dtm)
        scores = (doc_dtm @ verse_weights.T).tocsr()
        return np.asarray(scores[rows, cols]).ravel()

    def _runs_pvalues(
        self,
        doc_texts: List[str],
        verse_texts: List[str],
        rows: np.ndarray,
        cols: np.ndarray
    ) -> np.ndarray:
        """
        Runs test over each verse's token positions, matched or not.

        Positions are the verse's n-grams of the smallest size in the range,
        in reading order.
        """
        size = (self.ngram_range[0], self.ngram_range[0])
        doc_terms: Dict[int, set] = {}
        verse_terms: Dict[int, List[str]] = {}
        pvalues = np.empty(len(rows))

        for i, (row, col) in enumerate(zip(rows, cols)):
            if row not in doc_terms:
                doc_terms[row] = set(verse_ngrams(doc_texts[row], size))
            if col not in verse_terms:
                verse_terms[col] = verse_ngrams(verse_texts[col], size)
            terms = doc_terms[row]
            pvalues[i] = runs_test_pvalue(term in terms for term in verse_terms[col])

        return pvalues
