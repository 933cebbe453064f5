"""Boosted tree quotation classifier."""

import logging
import pandas as pd
import numpy as np
from typing import Optional
import lightgbm as lgb
import xgboost as xgb
from catboost import CatBoostClassifier
from sklearn.model_selection import train_test_split

from .base_model import BaseModel
from ..config import get_config
from ..features.recipe import Formula

logger = logging.getLogger(__name__)

MODEL_TYPES = ('lightgbm', 'xgboost', 'catboost')


class BoostedTreeModel(BaseModel):
    """Gradient boosted trees for genuine vs. coincidental matches."""

    family = 'boosted'

    def __init__(
        self,
        formula: Formula,
        model_type: str = 'lightgbm',
        n_estimators: int = 100,
        max_depth: int = 6,
        learning_rate: float = 0.1,
        validation_split: float = 0.0,
        **params
    ):
        """
        Initialize boosted tree model.

        Args:
            formula: Predictors to use
            model_type: 'lightgbm', 'xgboost', or 'catboost'
            n_estimators: Number of boosting rounds
            max_depth: Maximum tree depth
            learning_rate: Shrinkage per round
            validation_split: Fraction held out for early stopping (0 disables)
        """
        if model_type not in MODEL_TYPES:
            raise ValueError(f"Unsupported model type: {model_type}")
        if not 0 <= validation_split < 1:
            raise ValueError(f"validation_split must be in [0, 1), got {validation_split}")

        super().__init__(
            formula,
            model_type=model_type,
            n_estimators=n_estimators,
            max_depth=max_depth,
            learning_rate=learning_rate,
            **params
        )
        self.validation_split = validation_split
        self.random_state = get_config().random_seed

    def _fit(self, X: pd.DataFrame, y: np.ndarray, **kwargs):
        """Train with an optional held-out set for early stopping."""
        X_val: Optional[pd.DataFrame] = None
        y_val: Optional[np.ndarray] = None

        if self.validation_split > 0:
            X, X_val, y, y_val = train_test_split(
                X, y,
                test_size=self.validation_split,
                stratify=y,
                random_state=self.random_state
            )

        # Train based on model type
        if self.model_type == 'lightgbm':
            self._train_lightgbm(X, y, X_val, y_val, **kwargs)
        elif self.model_type == 'xgboost':
            self._train_xgboost(X, y, X_val, y_val, **kwargs)
        else:
            self._train_catboost(X, y, X_val, y_val, **kwargs)

    def _train_lightgbm(
        self,
        X_train: pd.DataFrame,
        y_train: np.ndarray,
        X_val: Optional[pd.DataFrame],
        y_val: Optional[np.ndarray],
        **kwargs
    ):
        """Train LightGBM classifier."""
        train_data = lgb.Dataset(X_train, label=y_train)

        params = {
            'objective': 'binary',
            'metric': 'binary_logloss',
            'boosting_type': 'gbdt',
            'num_leaves': 31,
            'max_depth': self.params['max_depth'],
            'learning_rate': self.params['learning_rate'],
            'seed': self.random_state,
            'verbose': -1
        }
        params.update({k: v for k, v in self.params.items()
                       if k not in ('n_estimators', 'max_depth', 'learning_rate')})
        params.update(kwargs)

        valid_sets = [train_data]
        callbacks = []
        if X_val is not None:
            valid_sets.append(lgb.Dataset(X_val, label=y_val, reference=train_data))
            callbacks = [lgb.early_stopping(stopping_rounds=50, verbose=False), lgb.log_evaluation(period=100)]

        self.model = lgb.train(
            params,
            train_data,
            valid_sets=valid_sets,
            num_boost_round=self.params['n_estimators'],
            callbacks=callbacks
        )
        if X_val is not None:
            logger.debug("LightGBM stopped at iteration %d", self.model.best_iteration)

    def _train_xgboost(
        self,
        X_train: pd.DataFrame,
        y_train: np.ndarray,
        X_val: Optional[pd.DataFrame],
        y_val: Optional[np.ndarray],
        **kwargs
    ):
        """Train XGBoost classifier."""
        params = {
            'objective': 'binary:logistic',
            'eval_metric': 'logloss',
            'subsample': 1.0,
            'random_state': self.random_state,
            'verbosity': 0
        }
        params.update(self.params)
        params.update(kwargs)

        if X_val is not None:
            params['early_stopping_rounds'] = 50
            self.model = xgb.XGBClassifier(**params)
            self.model.fit(X_train, y_train, eval_set=[(X_val, y_val)], verbose=False)
        else:
            self.model = xgb.XGBClassifier(**params)
            self.model.fit(X_train, y_train)

    def _train_catboost(
        self,
        X_train: pd.DataFrame,
        y_train: np.ndarray,
        X_val: Optional[pd.DataFrame],
        y_val: Optional[np.ndarray],
        **kwargs
    ):
        """Train CatBoost classifier."""
        params = {
            'iterations': self.params['n_estimators'],
            'learning_rate': self.params['learning_rate'],
            'depth': self.params['max_depth'],
            'loss_function': 'Logloss',
            'random_seed': self.random_state,
            'allow_writing_files': False,
            'verbose': False
        }
        params.update({k: v for k, v in self.params.items()
                       if k not in ('n_estimators', 'max_depth', 'learning_rate')})
        params.update(kwargs)

        if X_val is not None:
            params['early_stopping_rounds'] = 50
            self.model = CatBoostClassifier(**params)
            self.model.fit(X_train, y_train, eval_set=(X_val, y_val))
        else:
            self.model = CatBoostClassifier(**params)
            self.model.fit(X_train, y_train)

    def _predict_positive(self, X: pd.DataFrame) -> np.ndarray:
        if self.model_type == 'lightgbm':
            return self.model.predict(X, num_iteration=self.model.best_iteration or None)
        return self.model.predict_proba(X)[:, 1]

    def feature_importance(self) -> pd.Series:
        """Importance of each preprocessed feature, largest first."""
        if not self.is_trained:
            raise ValueError("Model must be trained before reading importances")

        if self.model_type == 'lightgbm':
            values = self.model.feature_importance(importance_type='gain')
        else:
            values = self.model.feature_importances_
        return pd.Series(values, index=self.feature_names).sort_values(ascending=False)
