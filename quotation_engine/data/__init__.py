"""Data access layer for labeled quotations and the train/test split."""

from .base import QuotationSource
from .quotation_data import CSVQuotationSource, SQLQuotationSource, get_quotation_source
from .splits import add_labels, load_or_create_split, prepare_labeled_data

__all__ = [
    'QuotationSource',
    'SQLQuotationSource',
    'CSVQuotationSource',
    'get_quotation_source',
    'prepare_labeled_data',
    'add_labels',
    'load_or_create_split',
]
