"""Shared fixtures: an isolated config and synthetic labeled quotations."""

import numpy as np
import pandas as pd
import pytest
import yaml

from quotation_engine.config import CONFIG_ENV_VAR, get_config, reset_config

TEST_CONFIG = {
    'logging': {'level': 'DEBUG'},
    'database': {'provider': 'csv', 'csv_path': 'labeled.csv'},
    'scriptures': {'lds_versions': ['Book of Mormon', 'Doctrine and Covenants', 'Pearl of Great Price']},
    'features': {'ngram_range': [1, 1], 'min_tokens': 2},
    'training': {
        'cache_dir': 'cache',
        'test_proportion': 0.25,
        'random_seed': 7,
        'formulas': {
            'all': 'label ~ tokens + tfidf + proportion + runs_pval + sim_total + sim_mean + lds',
            'minimal': 'label ~ tokens + proportion',
        },
    },
    'models': {
        'logistic': {'C': [0.1, 1.0]},
        'boosted': {'type': 'lightgbm', 'validation_split': 0.0, 'n_estimators': [20], 'max_depth': [3]},
        'neural': {'size': [3], 'decay': [0.01], 'max_iter': [500]},
    },
}


@pytest.fixture(autouse=True)
def test_config(tmp_path, monkeypatch):
    """Point the global config at a temporary YAML file."""
    path = tmp_path / 'config.yaml'
    path.write_text(yaml.safe_dump(TEST_CONFIG))
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    reset_config()
    yield get_config()
    reset_config()


def make_labeled_quotations(n: int = 240, seed: int = 0) -> pd.DataFrame:
    """Joined quotation rows where genuine quotations are easy to separate."""
    rng = np.random.default_rng(seed)
    match = rng.random(n) < 0.4

    proportion = np.where(match, rng.uniform(0.5, 1.0, n), rng.uniform(0.0, 0.4, n))
    tokens = np.where(match, rng.integers(6, 20, n), rng.integers(2, 6, n))
    runs_pval = np.where(match, rng.uniform(0.0, 0.1, n), rng.uniform(0.1, 1.0, n))
    sim_total = proportion + rng.uniform(0.0, 1.0, n)

    return pd.DataFrame({
        'verse_id': [f"verse-{i % 50}" for i in range(n)],
        'doc_id': [f"doc-{i}" for i in range(n)],
        'match': match,
        'tokens': tokens,
        'tfidf': tokens * rng.uniform(1.0, 3.0, n),
        'proportion': proportion,
        'runs_pval': runs_pval,
        'sim_total': sim_total,
        'sim_mean': sim_total / 2,
        'version': rng.choice(['KJV', 'Douay-Rheims', 'Book of Mormon'], n),
    })


@pytest.fixture
def labeled_quotations():
    return make_labeled_quotations()


@pytest.fixture
def train_test(tmp_path, labeled_quotations, test_config):
    """Train/test split of the synthetic data with labels attached."""
    from quotation_engine.data import load_or_create_split, prepare_labeled_data

    prepared = prepare_labeled_data(labeled_quotations, test_config.lds_versions)
    return load_or_create_split(prepared, str(tmp_path / 'split'), 0.25, random_state=7)
