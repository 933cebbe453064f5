"""Single-hidden-layer neural network quotation classifier."""

import numpy as np
import pandas as pd
from sklearn.neural_network import MLPClassifier

from .base_model import BaseModel
from ..config import get_config
from ..features.recipe import Formula


class NeuralNetModel(BaseModel):
    """Feed-forward network with one hidden layer and weight decay."""

    family = 'neural'

    def __init__(
        self,
        formula: Formula,
        size: int = 5,
        decay: float = 0.0001,
        max_iter: int = 1000,
        **params
    ):
        """
        Initialize neural network model.

        Args:
            formula: Predictors to use
            size: Units in the hidden layer
            decay: L2 weight decay
            max_iter: Optimizer iteration limit
        """
        super().__init__(formula, model_type='sklearn', size=size, decay=decay, max_iter=max_iter, **params)

    def _fit(self, X: pd.DataFrame, y: np.ndarray, **kwargs):
        params = dict(self.params)
        size = int(params.pop('size'))
        decay = float(params.pop('decay'))
        params.setdefault('random_state', get_config().random_seed)
        params.setdefault('solver', 'lbfgs')

        self.model = MLPClassifier(hidden_layer_sizes=(size,), alpha=decay, **params)
        self.model.fit(X.to_numpy(), y)

    def _predict_positive(self, X: pd.DataFrame) -> np.ndarray:
        return self.model.predict_proba(X.to_numpy())[:, 1]
