"""Base classes for models."""

from abc import ABC, abstractmethod
import pickle
from pathlib import Path
from typing import Any, Dict, Optional
import numpy as np
import pandas as pd

from ..evaluation.evaluator import LABELS, POSITIVE, NEGATIVE, to_labels
from ..features.recipe import FeatureRecipe, Formula


class BaseModel(ABC):
    """Base class for all quotation classifiers."""

    family = 'base'

    def __init__(self, formula: Formula, model_type: Optional[str] = None, **params):
        """
        Initialize base model.

        Args:
            formula: Predictors the model is trained on
            model_type: Library backing the model
            **params: Model hyperparameters
        """
        self.formula = formula
        self.model_type = model_type or self.family
        self.params: Dict[str, Any] = dict(params)
        self.model = None
        self.recipe: Optional[FeatureRecipe] = None
        self.feature_names = None
        self.is_trained = False
        self.threshold = 0.5

    def _prepare(self, X: pd.DataFrame, fit: bool = False) -> pd.DataFrame:
        """Select the formula's predictors and apply the recipe."""
        missing = set(self.formula.predictors) - set(X.columns)
        if missing:
            raise ValueError(f"Missing features: {sorted(missing)}")

        X = X[self.formula.predictors]
        if fit:
            self.recipe = FeatureRecipe.for_frame(X).fit(X)
            self.feature_names = self.recipe.feature_names
        return self.recipe.transform(X)

    @staticmethod
    def _encode_target(y: pd.Series) -> np.ndarray:
        """1 for quotation, 0 for noise."""
        return (to_labels(y) == POSITIVE).astype(int).to_numpy()

    def train(self, X: pd.DataFrame, y: pd.Series, **kwargs):
        """
        Train the model.

        Args:
            X: Potential quotation rows holding at least the formula predictors
            y: Labels (quotation/noise or bool)
            **kwargs: Additional training parameters
        """
        X_prepared = self._prepare(X, fit=True)
        target = self._encode_target(y)

        if len(X_prepared) == 0:
            raise ValueError("No training data")
        if len(np.unique(target)) < 2:
            raise ValueError("Training data must contain both quotation and noise rows")

        self._fit(X_prepared, target, **kwargs)
        self.is_trained = True

    @abstractmethod
    def _fit(self, X: pd.DataFrame, y: np.ndarray, **kwargs):
        """Fit the underlying estimator on preprocessed features."""
        pass

    @abstractmethod
    def _predict_positive(self, X: pd.DataFrame) -> np.ndarray:
        """Probability of quotation for preprocessed features."""
        pass

    def predict_proba(self, X: pd.DataFrame) -> pd.Series:
        """
        Predict the probability that each row is a genuine quotation.

        Args:
            X: Feature matrix

        Returns:
            Probabilities indexed like X
        """
        if not self.is_trained:
            raise ValueError("Model must be trained before prediction")

        X_prepared = self._prepare(X)
        return pd.Series(self._predict_positive(X_prepared), index=X.index)

    def predict(self, X: pd.DataFrame) -> pd.Series:
        """Predict quotation/noise labels."""
        proba = self.predict_proba(X)
        return pd.Series(
            pd.Categorical(
                np.where(proba >= self.threshold, POSITIVE, NEGATIVE),
                categories=LABELS
            ),
            index=proba.index
        )

    def save(self, filepath: str):
        """Save model to disk."""
        Path(filepath).parent.mkdir(parents=True, exist_ok=True)

        model_data = {
            'family': self.family,
            'model': self.model,
            'model_type': self.model_type,
            'formula': self.formula,
            'params': self.params,
            'recipe': self.recipe,
            'feature_names': self.feature_names,
            'is_trained': self.is_trained
        }

        with open(filepath, 'wb') as f:
            pickle.dump(model_data, f)

    def load(self, filepath: str):
        """Load model from disk."""
        with open(filepath, 'rb') as f:
            model_data = pickle.load(f)

        if model_data.get('family', self.family) != self.family:
            raise ValueError(
                f"{filepath} holds a {model_data['family']} model, not {self.family}"
            )

        self.model = model_data['model']
        self.model_type = model_data['model_type']
        self.formula = model_data['formula']
        self.params = model_data['params']
        self.recipe = model_data['recipe']
        self.feature_names = model_data['feature_names']
        self.is_trained = model_data['is_trained']
