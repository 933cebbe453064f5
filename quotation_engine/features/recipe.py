"""Predictor formulas and the centering/scaling/dummy-encoding recipe."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from ..config import Config, get_config


@dataclass
class Formula:
    """A named model formula such as ``label ~ tokens + proportion``."""

    name: str
    outcome: str
    predictors: List[str] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str, name: Optional[str] = None) -> 'Formula':
        """Parse ``outcome ~ a + b + c``."""
        if '~' not in text:
            raise ValueError(f"Formula has no '~': {text!r}")

        lhs, rhs = text.split('~', 1)
        outcome = lhs.strip()
        predictors = [term.strip() for term in rhs.split('+') if term.strip()]

        if not outcome:
            raise ValueError(f"Formula has no outcome: {text!r}")
        if not predictors:
            raise ValueError(f"Formula has no predictors: {text!r}")
        if len(set(predictors)) != len(predictors):
            raise ValueError(f"Formula repeats a predictor: {text!r}")

        return cls(name=name or text, outcome=outcome, predictors=predictors)

    def __str__(self) -> str:
        return f"{self.outcome} ~ {' + '.join(self.predictors)}"


def load_formulas(config: Optional[Config] = None) -> Dict[str, Formula]:
    """Named formulas from ``training.formulas``."""
    config = config or get_config()
    formulas = config.get('training.formulas', {})
    if not formulas:
        raise ValueError("No formulas configured under training.formulas")
    return {name: Formula.parse(text, name=name) for name, text in formulas.items()}


class FeatureRecipe:
    """
    Preprocessing learned on the training set and replayed on new data.

    Numeric predictors are centered and scaled by the training mean and
    standard deviation. Categorical predictors become 0/1 indicator
    columns, one per level except the first.
    """

    def __init__(self, numeric: List[str], categorical: List[str]):
        self.numeric = list(numeric)
        self.categorical = list(categorical)
        self.means: Dict[str, float] = {}
        self.scales: Dict[str, float] = {}
        self.levels: Dict[str, List[str]] = {}
        self.is_fitted = False

    @classmethod
    def for_frame(cls, X: pd.DataFrame) -> 'FeatureRecipe':
        """Recipe treating numeric dtypes as numeric and everything else as categorical."""
        numeric, categorical = [], []
        for column in X.columns:
            dtype = X[column].dtype
            if pd.api.types.is_numeric_dtype(dtype) and not pd.api.types.is_bool_dtype(dtype):
                numeric.append(column)
            else:
                categorical.append(column)
        return cls(numeric, categorical)

    @property
    def columns(self) -> List[str]:
        return self.numeric + self.categorical

    @property
    def feature_names(self) -> List[str]:
        names = list(self.numeric)
        for column in self.categorical:
            names.extend(f"{column}_{level}" for level in self.levels.get(column, [])[1:])
        return names

    def _check_columns(self, X: pd.DataFrame) -> None:
        missing = set(self.columns) - set(X.columns)
        if missing:
            raise ValueError(f"Missing predictor columns: {sorted(missing)}")

    def fit(self, X: pd.DataFrame) -> 'FeatureRecipe':
        """Learn means, scales and categorical levels."""
        self._check_columns(X)

        for column in self.numeric:
            values = X[column].astype(float)
            mean = values.mean()
            std = values.std()
            self.means[column] = 0.0 if np.isnan(mean) else float(mean)
            self.scales[column] = 1.0 if np.isnan(std) or std == 0 else float(std)

        for column in self.categorical:
            values = X[column]
            if isinstance(values.dtype, pd.CategoricalDtype):
                levels = [str(level) for level in values.cat.categories]
            else:
                levels = sorted(values.dropna().astype(str).unique())
            self.levels[column] = levels

        self.is_fitted = True
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        """Apply the learned preprocessing."""
        if not self.is_fitted:
            raise ValueError("Recipe must be fitted before transform")
        self._check_columns(X)

        out = pd.DataFrame(index=X.index)
        for column in self.numeric:
            values = X[column].astype(float).fillna(self.means[column])
            out[column] = (values - self.means[column]) / self.scales[column]

        for column in self.categorical:
            values = X[column].astype(str)
            for level in self.levels[column][1:]:
                out[f"{column}_{level}"] = (values == level).astype(float)

        return out[self.feature_names]

    def fit_transform(self, X: pd.DataFrame) -> pd.DataFrame:
        return self.fit(X).transform(X)
