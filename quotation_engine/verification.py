"""Sanity check of the proportion-of-verse-quoted formula.

The feature pipeline computes the share of a verse found in a document as a
cross product of binary document-term matrices divided by the verse's token
count. This module compares that against a plain set intersection for a few
hand-written texts and KJV verses.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from .features.dtm import DocumentTermMatrix, proportion_quoted, verse_ngrams

KJV_VERSES = pd.DataFrame({
    'verse_id': [
        'John 11:35 (KJV)',
        'Genesis 1:1 (KJV)',
        'Matthew 5:9 (KJV)',
        'Psalms 23:1 (KJV)',
    ],
    'version': ['KJV'] * 4,
    'text': [
        'Jesus wept.',
        'In the beginning God created the heaven and the earth.',
        'Blessed are the peacemakers: for they shall be called the children of God.',
        'The LORD is my shepherd; I shall not want.',
    ],
})

EXAMPLE_TEXTS = pd.DataFrame({
    'doc_id': ['funeral', 'sermon', 'speech', 'market'],
    'text': [
        'Jesus wept, and so did the congregation.',
        'The preacher reminded us that the LORD is my shepherd; I shall not want.',
        'Blessed are the peacemakers, said the senator, for they shall be called patriots.',
        'Cotton prices rose sharply in the spring market.',
    ],
})

TOLERANCE = 1e-9


@dataclass
class VerificationResult:
    proportions: pd.DataFrame
    expected: pd.DataFrame
    passed: bool

    @property
    def max_difference(self) -> float:
        return float(np.abs(self.proportions.to_numpy() - self.expected.to_numpy()).max())


def expected_proportions(
    documents: pd.DataFrame,
    verses: pd.DataFrame,
    ngram_range: Tuple[int, int] = (1, 1)
) -> pd.DataFrame:
    """Share of each verse's distinct tokens present in each document."""
    doc_sets = [set(verse_ngrams(text, ngram_range)) for text in documents['text']]
    verse_sets = [set(verse_ngrams(text, ngram_range)) for text in verses['text']]

    values = [
        [len(doc & verse) / len(verse) if verse else 0.0 for verse in verse_sets]
        for doc in doc_sets
    ]
    return pd.DataFrame(values, index=documents['doc_id'], columns=verses['verse_id'])


def verify_proportion_formula(
    documents: Optional[pd.DataFrame] = None,
    verses: Optional[pd.DataFrame] = None,
    ngram_range: Tuple[int, int] = (1, 1)
) -> VerificationResult:
    """Compare the matrix formula with the set-based reference."""
    documents = EXAMPLE_TEXTS if documents is None else documents
    verses = KJV_VERSES if verses is None else verses

    dtm = DocumentTermMatrix(ngram_range).fit(verses['text'])
    _, proportion = proportion_quoted(dtm.transform(documents['text']), dtm.transform(verses['text']))

    proportions = pd.DataFrame(proportion, index=documents['doc_id'], columns=verses['verse_id'])
    expected = expected_proportions(documents, verses, ngram_range)
    passed = bool(np.allclose(proportions.to_numpy(), expected.to_numpy(), rtol=0, atol=TOLERANCE))

    return VerificationResult(proportions, expected, passed)
