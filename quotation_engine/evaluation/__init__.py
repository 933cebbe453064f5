"""Classifier evaluation."""

from .evaluator import Evaluator, to_labels

__all__ = ['Evaluator', 'to_labels']
