"""Train every formula x hyperparameter combination and rank the results."""

import logging
import pickle
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type

import pandas as pd
from sklearn.model_selection import ParameterGrid

from .base_model import BaseModel
from .boosted_model import BoostedTreeModel
from .logistic_model import LogisticModel
from .neural_model import NeuralNetModel
from ..config import Config, get_config
from ..evaluation import Evaluator
from ..features.recipe import Formula

logger = logging.getLogger(__name__)

MODEL_FAMILIES: Dict[str, Type[BaseModel]] = {
    'logistic': LogisticModel,
    'boosted': BoostedTreeModel,
    'neural': NeuralNetModel,
}


def build_model(family: str, formula: Formula, **params) -> BaseModel:
    """Instantiate an untrained model of the given family."""
    if family not in MODEL_FAMILIES:
        raise ValueError(f"Unknown model family: {family}")
    return MODEL_FAMILIES[family](formula, **params)


def load_model(filepath: str) -> BaseModel:
    """Load a model saved with BaseModel.save, whatever its family."""
    with open(filepath, 'rb') as f:
        model_data = pickle.load(f)

    family = model_data.get('family')
    extra = {'model_type': model_data['model_type']} if family == 'boosted' else {}
    model = build_model(family, model_data['formula'], **extra)
    model.load(filepath)
    return model


def grid_from_config(family: str, config: Optional[Config] = None) -> Tuple[Dict[str, list], Dict[str, Any]]:
    """
    Split ``models.<family>`` into the searched grid and fixed settings.

    List values are searched; scalars are passed to every model. The
    ``type`` key selects the library for boosted trees.
    """
    config = config or get_config()
    settings = config.get(f'models.{family}', {}) or {}

    param_grid = {key: value for key, value in settings.items() if isinstance(value, list)}
    fixed = {}
    for key, value in settings.items():
        if isinstance(value, list):
            continue
        fixed['model_type' if key == 'type' else key] = value

    return param_grid, fixed


class ModelGrid:
    """One model family trained over formulas and a hyperparameter grid."""

    def __init__(
        self,
        family: str,
        formulas: Dict[str, Formula],
        param_grid: Optional[Dict[str, list]] = None,
        fixed_params: Optional[Dict[str, Any]] = None,
        metric: str = 'balanced_accuracy'
    ):
        if family not in MODEL_FAMILIES:
            raise ValueError(f"Unknown model family: {family}")
        if not formulas:
            raise ValueError("ModelGrid needs at least one formula")

        self.family = family
        self.formulas = formulas
        self.param_grid = param_grid or {}
        self.fixed_params = fixed_params or {}
        self.metric = metric
        self.models: List[BaseModel] = []
        self.results: Optional[pd.DataFrame] = None

    @classmethod
    def from_config(
        cls,
        family: str,
        formulas: Dict[str, Formula],
        config: Optional[Config] = None
    ) -> 'ModelGrid':
        param_grid, fixed = grid_from_config(family, config)
        return cls(family, formulas, param_grid, fixed)

    def configurations(self) -> List[Tuple[Formula, Dict[str, Any]]]:
        """Every (formula, hyperparameters) pair, formulas outermost."""
        return [
            (formula, params)
            for formula in self.formulas.values()
            for params in ParameterGrid(self.param_grid)
        ]

    def run(self, train: pd.DataFrame, test: pd.DataFrame) -> pd.DataFrame:
        """
        Train each configuration on `train` and score it on `test`.

        Returns:
            One row per configuration, best first
        """
        configurations = self.configurations()
        logger.info("Training %d %s models", len(configurations), self.family)

        rows = []
        self.models = []
        for config_id, (formula, params) in enumerate(configurations):
            model = build_model(self.family, formula, **self.fixed_params, **params)
            model.train(train, train[formula.outcome])

            predicted = model.predict(test)
            metrics = Evaluator.evaluate_classifier(predicted, test[formula.outcome])

            self.models.append(model)
            rows.append({
                'config_id': config_id,
                'model': self.family,
                'formula': formula.name,
                **params,
                **metrics
            })
            logger.debug(
                "%s %s %s: balanced accuracy %.4f",
                self.family, formula.name, params, metrics.get('balanced_accuracy', float('nan'))
            )

        self.results = Evaluator.rank(pd.DataFrame(rows), self.metric)
        return self.results

    def best_model(self) -> BaseModel:
        """The trained model ranked first by the last run."""
        if self.results is None or self.results.empty:
            raise ValueError("Grid has not been run")
        return self.models[int(self.results.iloc[0]['config_id'])]


def compare_families(
    results: Iterable[pd.DataFrame],
    metric: str = 'balanced_accuracy'
) -> pd.DataFrame:
    """Rank the results of several grids together."""
    frames = [frame for frame in results if frame is not None and not frame.empty]
    if not frames:
        return pd.DataFrame()
    return Evaluator.rank(pd.concat(frames, ignore_index=True, sort=False), metric)
