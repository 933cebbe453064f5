import math

import numpy as np
import pandas as pd
import pytest
from scipy.stats import norm

from quotation_engine.features import (
    DocumentTermMatrix,
    FeatureRecipe,
    Formula,
    QuotationFeatureEngine,
    load_formulas,
    proportion_quoted,
    runs_test_pvalue,
    tokenize_words,
    verse_ngrams,
)
from quotation_engine.features.quotation_features import POTENTIAL_QUOTATION_COLUMNS
from quotation_engine.verification import EXAMPLE_TEXTS, KJV_VERSES


def test_tokenize_words():
    assert tokenize_words("The LORD's prayer, v. 9-13!") == ["the", "lord's", "prayer", "v"]
    assert tokenize_words(None) == []
    assert tokenize_words("") == []


def test_verse_ngrams_in_reading_order():
    assert verse_ngrams("Jesus wept.") == ["jesus", "wept"]
    assert verse_ngrams("In the beginning God", (2, 3)) == [
        "in the", "the beginning", "beginning god",
        "in the beginning", "the beginning god",
    ]
    assert verse_ngrams("Jesus wept.", (3, 3)) == []


def test_dtm_ignores_terms_outside_verse_vocabulary():
    dtm = DocumentTermMatrix().fit(["Jesus wept."])

    matrix = dtm.transform(["Jesus wept and wept again"])

    assert dtm.vocabulary == ["jesus", "wept"]
    assert matrix.toarray().tolist() == [[1, 1]]


def test_proportion_quoted_bounds_and_verbatim():
    verses = ["Jesus wept.", "The LORD is my shepherd; I shall not want."]
    docs = [
        "Jesus wept. Jesus wept.",
        "the the the shall",
        "nothing relevant here",
    ]
    dtm = DocumentTermMatrix().fit(verses)

    tokens, proportion = proportion_quoted(dtm.transform(docs), dtm.transform(verses))

    assert tokens.tolist() == [[2, 0], [0, 2], [0, 0]]
    assert proportion[0, 0] == 1.0
    assert proportion[1, 1] == pytest.approx(2 / 9)
    assert ((proportion >= 0) & (proportion <= 1)).all()


def test_proportion_quoted_zero_token_verse():
    dtm = DocumentTermMatrix().fit(["Jesus wept.", "1:1"])

    _, proportion = proportion_quoted(dtm.transform(["Jesus wept"]), dtm.transform(["Jesus wept.", "1:1"]))

    assert proportion.tolist() == [[1.0, 0.0]]


def test_runs_test_clustered_matches_are_significant():
    p = runs_test_pvalue([True, True, True, False, False, False])

    expected = norm.cdf((2 - 4) / math.sqrt(1.2))
    assert p == pytest.approx(expected)
    assert p < 0.05


def test_runs_test_alternating_is_not_significant():
    assert runs_test_pvalue([True, False] * 5) > 0.9


@pytest.mark.parametrize('sequence, expected', [
    ([False, False, False], 1.0),
    ([True, True], 0.0),
    ([True, False], 1.0),
    ([], 1.0),
])
def test_runs_test_edge_cases(sequence, expected):
    assert runs_test_pvalue(sequence) == expected


def test_engine_finds_potential_quotations():
    engine = QuotationFeatureEngine(min_tokens=2)

    features = engine.compute_features(EXAMPLE_TEXTS, KJV_VERSES)
    pairs = features.set_index(['doc_id', 'verse_id'])

    assert len(features) == 7
    assert pairs.loc[('funeral', 'John 11:35 (KJV)'), 'tokens'] == 2
    assert pairs.loc[('funeral', 'John 11:35 (KJV)'), 'proportion'] == 1.0
    assert pairs.loc[('funeral', 'John 11:35 (KJV)'), 'runs_pval'] == 0.0
    assert pairs.loc[('sermon', 'Psalms 23:1 (KJV)'), 'proportion'] == 1.0
    assert pairs.loc[('speech', 'Matthew 5:9 (KJV)'), 'proportion'] == 0.75
    assert pairs.loc[('speech', 'Matthew 5:9 (KJV)'), 'runs_pval'] < 0.01
    assert ('market', 'John 11:35 (KJV)') not in pairs.index


def test_engine_tfidf_sums_verse_weights():
    features = QuotationFeatureEngine(min_tokens=2).compute_features(EXAMPLE_TEXTS, KJV_VERSES)
    row = features.set_index(['doc_id', 'verse_id']).loc[('funeral', 'John 11:35 (KJV)')]

    # "jesus" and "wept" each occur in one of four verses
    idf = math.log(5 / 2) + 1
    assert row['tfidf'] == pytest.approx(2 * idf)


def test_engine_similarity_within_version():
    features = QuotationFeatureEngine(min_tokens=2).compute_features(EXAMPLE_TEXTS, KJV_VERSES)
    funeral = features[features['doc_id'] == 'funeral']

    assert len(funeral) == 2
    assert funeral['sim_total'].tolist() == pytest.approx([1.25, 1.25])
    assert funeral['sim_mean'].tolist() == pytest.approx([0.625, 0.625])


def test_engine_min_tokens_and_validation():
    assert len(QuotationFeatureEngine(min_tokens=1).compute_features(EXAMPLE_TEXTS, KJV_VERSES)) == 13
    assert QuotationFeatureEngine(min_tokens=50).compute_features(EXAMPLE_TEXTS, KJV_VERSES).empty

    with pytest.raises(ValueError, match='min_tokens'):
        QuotationFeatureEngine(min_tokens=0)
    with pytest.raises(ValueError, match='missing columns'):
        QuotationFeatureEngine().compute_features(EXAMPLE_TEXTS[['doc_id']], KJV_VERSES)


def test_engine_uses_config_defaults(test_config):
    engine = QuotationFeatureEngine()
    assert engine.ngram_range == (1, 1)
    assert engine.min_tokens == 2


def test_dtm_without_any_verse_terms():
    dtm = DocumentTermMatrix((2, 2)).fit(["Amen.", "1:1"])

    assert dtm.vocabulary == []
    assert dtm.transform(["Jesus wept", "Amen"]).shape == (2, 0)


def test_engine_verses_without_words():
    verses = pd.DataFrame({'verse_id': ['Genesis 1:1'], 'version': ['KJV'], 'text': ['1:1']})

    features = QuotationFeatureEngine(min_tokens=1).compute_features(EXAMPLE_TEXTS, verses)

    assert features.empty
    assert list(features.columns) == POTENTIAL_QUOTATION_COLUMNS


def test_engine_runs_test_over_smallest_ngrams():
    verses = pd.DataFrame({'verse_id': ['v'], 'version': ['KJV'], 'text': ['alpha beta gamma delta']})
    docs = pd.DataFrame({'doc_id': ['d'], 'text': ['alpha beta zzz']})

    features = QuotationFeatureEngine(ngram_range=(1, 2), min_tokens=1).compute_features(docs, verses)

    # "alpha", "beta" and "alpha beta"
    assert features['tokens'].tolist() == [3]
    assert features['proportion'].iloc[0] == pytest.approx(3 / 7)
    assert features['runs_pval'].iloc[0] == pytest.approx(runs_test_pvalue([True, True, False, False]))
    assert features['runs_pval'].iloc[0] == pytest.approx(0.1103, abs=1e-4)


def test_formula_parse():
    formula = Formula.parse("label ~ tokens + proportion + lds", name='small')

    assert formula.outcome == 'label'
    assert formula.predictors == ['tokens', 'proportion', 'lds']
    assert formula.name == 'small'
    assert str(formula) == 'label ~ tokens + proportion + lds'


@pytest.mark.parametrize('text', ['tokens + proportion', 'label ~ ', ' ~ tokens', 'label ~ a + a'])
def test_formula_parse_rejects_malformed(text):
    with pytest.raises(ValueError):
        Formula.parse(text)


def test_load_formulas(test_config):
    formulas = load_formulas(test_config)

    assert set(formulas) == {'all', 'minimal'}
    assert formulas['minimal'].predictors == ['tokens', 'proportion']


def test_recipe_centers_scales_and_dummies():
    train = pd.DataFrame({
        'tokens': [2.0, 4.0, 6.0],
        'flat': [1.0, 1.0, 1.0],
        'lds': pd.Categorical(['lds', 'not-lds', 'not-lds'], categories=['not-lds', 'lds']),
    })
    recipe = FeatureRecipe.for_frame(train)

    out = recipe.fit_transform(train)

    assert recipe.numeric == ['tokens', 'flat']
    assert recipe.categorical == ['lds']
    assert list(out.columns) == ['tokens', 'flat', 'lds_lds']
    assert out['tokens'].tolist() == pytest.approx([-1.0, 0.0, 1.0])
    assert out['flat'].tolist() == [0.0, 0.0, 0.0]
    assert out['lds_lds'].tolist() == [1.0, 0.0, 0.0]


def test_recipe_replays_training_statistics():
    recipe = FeatureRecipe(['tokens'], ['version']).fit(pd.DataFrame({
        'tokens': [2.0, 4.0, 6.0],
        'version': ['KJV', 'RV', 'KJV'],
    }))

    out = recipe.transform(pd.DataFrame({'tokens': [8.0, np.nan], 'version': ['Vulgate', 'RV']}))

    assert out['tokens'].tolist() == pytest.approx([2.0, 0.0])
    assert out['version_RV'].tolist() == [0.0, 1.0]


def test_recipe_errors():
    recipe = FeatureRecipe(['tokens'], [])
    with pytest.raises(ValueError, match='fitted'):
        recipe.transform(pd.DataFrame({'tokens': [1.0]}))
    with pytest.raises(ValueError, match='Missing predictor'):
        recipe.fit(pd.DataFrame({'other': [1.0]}))
