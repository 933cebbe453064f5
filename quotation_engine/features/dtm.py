"""Tokenization and document-term matrices over a verse vocabulary."""

import re
from typing import Iterable, List, Tuple

import numpy as np
from scipy import sparse
from sklearn.feature_extraction.text import CountVectorizer

_WORD_RE = re.compile(r"[a-z]+(?:'[a-z]+)*")


def tokenize_words(text: str) -> List[str]:
    """Lowercase words; punctuation and digits are dropped."""
    if not isinstance(text, str):
        return []
    return _WORD_RE.findall(text.lower())


def verse_ngrams(text: str, ngram_range: Tuple[int, int] = (1, 1)) -> List[str]:
    """
    Word n-grams of a text in reading order.

    All n-grams of the smallest size come first, then the next size, and so
    on.
    """
    tokens = tokenize_words(text)
    min_n, max_n = ngram_range
    grams = []
    for n in range(min_n, max_n + 1):
        grams.extend(" ".join(tokens[i:i + n]) for i in range(len(tokens) - n + 1))
    return grams


def binarize(matrix: sparse.spmatrix) -> sparse.csr_matrix:
    """Presence/absence version of a count matrix."""
    matrix = sparse.csr_matrix(matrix, dtype=np.int64, copy=True)
    matrix.eliminate_zeros()
    matrix.data = np.ones_like(matrix.data)
    return matrix


class DocumentTermMatrix:
    """Binary document-term matrices sharing one verse vocabulary."""

    def __init__(self, ngram_range: Tuple[int, int] = (1, 1)):
        self.ngram_range = tuple(ngram_range)
        self.vectorizer = CountVectorizer(
            tokenizer=tokenize_words,
            lowercase=False,
            token_pattern=None,
            ngram_range=self.ngram_range,
            binary=True,
        )
        self.is_empty = False

    def fit(self, verse_texts: Iterable[str]) -> 'DocumentTermMatrix':
        """
        Learn the vocabulary from the verse texts.

        Verses without a single term (numbers or punctuation only) leave the
        vocabulary empty, and every matrix then has zero columns.
        """
        verse_texts = list(verse_texts)
        self.is_empty = not any(verse_ngrams(text, self.ngram_range) for text in verse_texts)
        if not self.is_empty:
            self.vectorizer.fit(verse_texts)
        return self

    def transform(self, texts: Iterable[str]) -> sparse.csr_matrix:
        """Binary DTM of `texts`; terms outside the verse vocabulary are ignored."""
        texts = list(texts)
        if self.is_empty:
            return sparse.csr_matrix((len(texts), 0), dtype=np.int64)
        return binarize(self.vectorizer.transform(texts))

    @property
    def vocabulary(self) -> List[str]:
        if self.is_empty:
            return []
        return list(self.vectorizer.get_feature_names_out())


def verse_token_counts(verse_dtm: sparse.spmatrix) -> np.ndarray:
    """Number of distinct tokens in each verse."""
    return np.asarray(binarize(verse_dtm).sum(axis=1)).ravel()


def proportion_quoted(
    doc_dtm: sparse.spmatrix,
    verse_dtm: sparse.spmatrix
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Shared tokens and proportion of each verse found in each document.

    tokens[d, v] is the cross product of the binary document and verse
    matrices; proportion divides it by the verse's distinct token count.
    Verses without tokens get proportion 0. Intended for small inputs, as
    both results are dense documents x verses arrays.

    Returns:
        Tuple of (tokens, proportion) arrays
    """
    doc_bin = binarize(doc_dtm)
    verse_bin = binarize(verse_dtm)

    tokens = np.asarray((doc_bin @ verse_bin.T).todense())
    counts = verse_token_counts(verse_bin)

    with np.errstate(divide='ignore', invalid='ignore'):
        proportion = np.where(counts > 0, tokens / counts, 0.0)

    return tokens, proportion
