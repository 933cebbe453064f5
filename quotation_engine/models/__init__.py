"""Classifiers for genuine quotations vs. coincidental overlaps."""

from .base_model import BaseModel
from .logistic_model import LogisticModel
from .boosted_model import BoostedTreeModel
from .neural_model import NeuralNetModel
from .grid import ModelGrid, build_model, compare_families, grid_from_config, load_model

__all__ = [
    'BaseModel',
    'LogisticModel',
    'BoostedTreeModel',
    'NeuralNetModel',
    'ModelGrid',
    'build_model',
    'compare_families',
    'grid_from_config',
    'load_model',
]
