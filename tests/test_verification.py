import pandas as pd
import pytest

from quotation_engine.verification import (
    EXAMPLE_TEXTS,
    KJV_VERSES,
    expected_proportions,
    verify_proportion_formula,
)


def test_formula_matches_reference():
    result = verify_proportion_formula()

    assert result.passed
    assert result.max_difference < 1e-12
    assert result.proportions.shape == (4, 4)


@pytest.mark.parametrize('doc_id, verse_id, expected', [
    ('funeral', 'John 11:35 (KJV)', 1.0),
    ('funeral', 'Genesis 1:1 (KJV)', 0.25),
    ('sermon', 'Psalms 23:1 (KJV)', 1.0),
    ('sermon', 'Matthew 5:9 (KJV)', 2 / 12),
    ('speech', 'Matthew 5:9 (KJV)', 0.75),
    ('speech', 'Psalms 23:1 (KJV)', 2 / 9),
    ('market', 'Genesis 1:1 (KJV)', 0.25),
    ('market', 'John 11:35 (KJV)', 0.0),
])
def test_known_proportions(doc_id, verse_id, expected):
    result = verify_proportion_formula()
    assert result.proportions.loc[doc_id, verse_id] == pytest.approx(expected)


def test_bigram_proportions():
    result = verify_proportion_formula(ngram_range=(2, 2))

    assert result.passed
    # "jesus wept" is the only bigram of John 11:35
    assert result.proportions.loc['funeral', 'John 11:35 (KJV)'] == 1.0
    # only "in the" of Genesis 1:1's nine bigrams appears in the market report
    assert result.proportions.loc['market', 'Genesis 1:1 (KJV)'] == pytest.approx(1 / 9)


def test_expected_proportions_handles_empty_verse():
    verses = pd.DataFrame({'verse_id': ['empty'], 'version': ['KJV'], 'text': ['']})

    expected = expected_proportions(EXAMPLE_TEXTS, verses)

    assert (expected['empty'] == 0.0).all()


def test_custom_inputs():
    docs = pd.DataFrame({'doc_id': ['d'], 'text': ['the lord is my shepherd']})
    result = verify_proportion_formula(docs, KJV_VERSES.iloc[[3]])

    assert result.passed
    assert result.proportions.iloc[0, 0] == pytest.approx(5 / 9)


def test_verses_without_words_get_zero_proportion():
    verses = pd.DataFrame({'verse_id': ['blank', 'number'], 'version': ['KJV'] * 2, 'text': ['', '1:1']})

    result = verify_proportion_formula(EXAMPLE_TEXTS, verses)

    assert result.passed
    assert result.proportions.shape == (4, 2)
    assert (result.proportions.to_numpy() == 0.0).all()
