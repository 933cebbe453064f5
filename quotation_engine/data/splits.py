"""Label derivation and the persisted train/test split."""

import logging
from pathlib import Path
from typing import Iterable, Optional, Tuple

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from .base import FEATURE_COLUMNS
from .quotation_data import coerce_match

logger = logging.getLogger(__name__)

# Column order of the cached train/test CSVs
CACHE_COLUMNS = [
    'verse_id', 'doc_id', 'match',
    'tokens', 'tfidf', 'proportion', 'runs_pval', 'sim_total', 'sim_mean',
    'lds',
]

LABEL_LEVELS = ['quotation', 'noise']
LDS_LEVELS = ['not-lds', 'lds']

TRAIN_FILE = 'train.csv'
TEST_FILE = 'test.csv'


def prepare_labeled_data(df: pd.DataFrame, lds_versions: Iterable[str]) -> pd.DataFrame:
    """
    Reduce joined quotation rows to the cached CSV schema.

    Rows lacking any feature value are dropped; the Bible version is
    collapsed into the lds / not-lds class.
    """
    lds_versions = set(lds_versions)
    df = df.dropna(subset=FEATURE_COLUMNS).copy()
    df['lds'] = np.where(df['version'].isin(lds_versions), 'lds', 'not-lds')
    df['match'] = coerce_match(df['match'])
    return df[CACHE_COLUMNS].reset_index(drop=True)


def add_labels(df: pd.DataFrame) -> pd.DataFrame:
    """Add the categorical label and fix the lds categories."""
    df = df.copy()
    df['match'] = coerce_match(df['match'])
    df['label'] = pd.Categorical(
        np.where(df['match'], 'quotation', 'noise'),
        categories=LABEL_LEVELS
    )
    df['lds'] = pd.Categorical(df['lds'], categories=LDS_LEVELS)
    return df


def load_or_create_split(
    df: Optional[pd.DataFrame],
    cache_dir: str,
    test_proportion: float = 0.25,
    random_state: int = 42
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Return the train/test partition, creating and caching it on first use.

    When both cached files exist they are read back unchanged so reruns
    train on the same rows. Otherwise `df` (in the cached CSV schema) is
    split stratified by label and written to `cache_dir`.

    Returns:
        Tuple of (train, test) DataFrames with a `label` column
    """
    cache = Path(cache_dir)
    train_path = cache / TRAIN_FILE
    test_path = cache / TEST_FILE

    if train_path.exists() and test_path.exists():
        logger.info("Using cached train/test split from %s", cache)
        train = pd.read_csv(train_path, dtype={'verse_id': str, 'doc_id': str})
        test = pd.read_csv(test_path, dtype={'verse_id': str, 'doc_id': str})
        return add_labels(train), add_labels(test)

    if df is None or df.empty:
        raise ValueError(f"No cached split in {cache} and no data to split")
    if not 0 < test_proportion < 1:
        raise ValueError(f"test_proportion must be between 0 and 1, got {test_proportion}")

    df = df[CACHE_COLUMNS]
    train, test = train_test_split(
        df,
        test_size=test_proportion,
        stratify=coerce_match(df['match']),
        random_state=random_state
    )

    cache.mkdir(parents=True, exist_ok=True)
    train.to_csv(train_path, index=False)
    test.to_csv(test_path, index=False)
    logger.info(
        "Created train/test split (%d/%d rows) in %s", len(train), len(test), cache
    )

    return (
        add_labels(train.reset_index(drop=True)),
        add_labels(test.reset_index(drop=True)),
    )
