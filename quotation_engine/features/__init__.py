"""Feature engineering modules."""

from .dtm import DocumentTermMatrix, proportion_quoted, tokenize_words, verse_ngrams
from .quotation_features import QuotationFeatureEngine, runs_test_pvalue
from .recipe import FeatureRecipe, Formula, load_formulas

__all__ = [
    'DocumentTermMatrix',
    'proportion_quoted',
    'tokenize_words',
    'verse_ngrams',
    'QuotationFeatureEngine',
    'runs_test_pvalue',
    'FeatureRecipe',
    'Formula',
    'load_formulas',
]
