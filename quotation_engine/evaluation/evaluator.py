"""Evaluation metrics for quotation classifiers."""

import pandas as pd
import numpy as np
from typing import Dict, List, Optional
from sklearn.metrics import confusion_matrix

POSITIVE = 'quotation'
NEGATIVE = 'noise'
LABELS = [POSITIVE, NEGATIVE]


def to_labels(values: pd.Series) -> pd.Series:
    """Normalize bool, 0/1 or string labels to 'quotation' / 'noise'."""
    values = pd.Series(values)
    if pd.api.types.is_bool_dtype(values) or pd.api.types.is_numeric_dtype(values):
        return pd.Series(
            np.where(values.astype(bool), POSITIVE, NEGATIVE),
            index=values.index
        )

    labels = values.astype(str)
    unknown = set(labels.unique()) - set(LABELS)
    if unknown:
        raise ValueError(f"Unknown labels: {sorted(unknown)}")
    return labels


def _ratio(numerator: float, denominator: float) -> float:
    return float(numerator) / denominator if denominator > 0 else 0.0


class Evaluator:
    """Evaluate classifier performance."""

    @staticmethod
    def confusion_matrix(
        predicted: pd.Series,
        actual: pd.Series
    ) -> pd.DataFrame:
        """
        Confusion matrix with predictions as rows and truth as columns.

        Both axes are ordered quotation, noise.
        """
        pred = to_labels(predicted)
        act = to_labels(actual)
        # sklearn puts truth on rows
        counts = confusion_matrix(act, pred, labels=LABELS).T
        return pd.DataFrame(
            counts,
            index=pd.Index(LABELS, name='predicted'),
            columns=pd.Index(LABELS, name='actual')
        )

    @staticmethod
    def evaluate_classifier(
        predicted: pd.Series,
        actual: pd.Series
    ) -> Dict[str, float]:
        """
        Evaluate quotation/noise predictions.

        Args:
            predicted: Predicted labels
            actual: True labels

        Returns:
            Dictionary of metrics
        """
        # Align indices
        common_idx = predicted.index.intersection(actual.index)
        pred = predicted[common_idx]
        act = actual[common_idx]

        if len(pred) == 0:
            return {}

        cm = Evaluator.confusion_matrix(pred, act)
        tp = cm.loc[POSITIVE, POSITIVE]
        fp = cm.loc[POSITIVE, NEGATIVE]
        fn = cm.loc[NEGATIVE, POSITIVE]
        tn = cm.loc[NEGATIVE, NEGATIVE]
        n = tp + fp + fn + tn

        accuracy = _ratio(tp + tn, n)
        precision = _ratio(tp, tp + fp)
        recall = _ratio(tp, tp + fn)
        specificity = _ratio(tn, tn + fp)
        f1 = _ratio(2 * precision * recall, precision + recall)

        # Cohen's kappa against chance agreement from the margins
        expected = ((tp + fp) * (tp + fn) + (fn + tn) * (fp + tn)) / float(n * n)
        kappa = (accuracy - expected) / (1 - expected) if expected < 1 else 0.0

        return {
            'accuracy': accuracy,
            'balanced_accuracy': (recall + specificity) / 2,
            'precision': precision,
            'recall': recall,
            'specificity': specificity,
            'f1': f1,
            'kappa': float(kappa),
            'n_samples': int(n)
        }

    @staticmethod
    def rank(
        results: pd.DataFrame,
        metric: str = 'balanced_accuracy',
        tiebreakers: Optional[List[str]] = None
    ) -> pd.DataFrame:
        """Sort model results best first."""
        if results.empty:
            return results
        if metric not in results.columns:
            raise ValueError(f"Unknown metric: {metric}")

        tiebreakers = tiebreakers if tiebreakers is not None else ['precision', 'recall']
        keys = [metric] + [key for key in tiebreakers if key in results.columns and key != metric]
        return results.sort_values(keys, ascending=False, kind='mergesort').reset_index(drop=True)
