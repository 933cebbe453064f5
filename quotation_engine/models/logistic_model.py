"""Logistic regression quotation classifier."""

import numpy as np
import pandas as pd
from sklearn.linear_model import LogisticRegression

from .base_model import BaseModel
from ..features.recipe import Formula


class LogisticModel(BaseModel):
    """Logistic regression on the recipe's scaled predictors."""

    family = 'logistic'

    def __init__(self, formula: Formula, C: float = 1.0, max_iter: int = 1000, **params):
        """
        Initialize logistic model.

        Args:
            formula: Predictors to use
            C: Inverse regularization strength
            max_iter: Solver iteration limit
        """
        super().__init__(formula, model_type='sklearn', C=C, max_iter=max_iter, **params)

    def _fit(self, X: pd.DataFrame, y: np.ndarray, **kwargs):
        self.model = LogisticRegression(**self.params)
        self.model.fit(X, y)

    def _predict_positive(self, X: pd.DataFrame) -> np.ndarray:
        return self.model.predict_proba(X)[:, 1]

    def coefficients(self) -> pd.Series:
        """Fitted coefficients by feature name, intercept first."""
        if not self.is_trained:
            raise ValueError("Model must be trained before reading coefficients")
        values = np.concatenate([self.model.intercept_, self.model.coef_[0]])
        return pd.Series(values, index=['(intercept)'] + list(self.feature_names))
