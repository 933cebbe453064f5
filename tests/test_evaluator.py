import pandas as pd
import pytest

from quotation_engine.evaluation import Evaluator, to_labels


@pytest.fixture
def predictions():
    predicted = pd.Series(['quotation', 'quotation', 'noise', 'noise', 'quotation'])
    actual = pd.Series(['quotation', 'noise', 'noise', 'quotation', 'quotation'])
    return predicted, actual


def test_confusion_matrix_layout(predictions):
    cm = Evaluator.confusion_matrix(*predictions)

    assert list(cm.index) == ['quotation', 'noise']
    assert list(cm.columns) == ['quotation', 'noise']
    # rows are predictions, columns the truth
    assert cm.loc['quotation', 'quotation'] == 2
    assert cm.loc['quotation', 'noise'] == 1
    assert cm.loc['noise', 'quotation'] == 1
    assert cm.loc['noise', 'noise'] == 1


def test_evaluate_classifier(predictions):
    metrics = Evaluator.evaluate_classifier(*predictions)

    assert metrics['accuracy'] == pytest.approx(0.6)
    assert metrics['precision'] == pytest.approx(2 / 3)
    assert metrics['recall'] == pytest.approx(2 / 3)
    assert metrics['specificity'] == pytest.approx(0.5)
    assert metrics['balanced_accuracy'] == pytest.approx((2 / 3 + 0.5) / 2)
    assert metrics['f1'] == pytest.approx(2 / 3)
    assert metrics['kappa'] == pytest.approx((0.6 - 0.52) / 0.48)
    assert metrics['n_samples'] == 5


def test_evaluate_classifier_undefined_ratios_are_zero():
    predicted = pd.Series(['noise', 'noise', 'noise'])
    actual = pd.Series(['noise', 'quotation', 'noise'])

    metrics = Evaluator.evaluate_classifier(predicted, actual)

    assert metrics['precision'] == 0.0
    assert metrics['recall'] == 0.0
    assert metrics['f1'] == 0.0
    assert metrics['specificity'] == 1.0
    assert metrics['balanced_accuracy'] == 0.5


def test_evaluate_classifier_aligns_indices():
    predicted = pd.Series(['quotation', 'noise'], index=[10, 11])
    actual = pd.Series(['noise', 'noise'], index=[11, 12])

    metrics = Evaluator.evaluate_classifier(predicted, actual)

    assert metrics['n_samples'] == 1
    assert metrics['accuracy'] == 1.0

    assert Evaluator.evaluate_classifier(predicted, pd.Series(['noise'], index=[99])) == {}


def test_to_labels_accepts_bools_and_categoricals():
    assert to_labels(pd.Series([True, False])).tolist() == ['quotation', 'noise']
    categorical = pd.Series(pd.Categorical(['noise', 'quotation'], categories=['quotation', 'noise']))
    assert to_labels(categorical).tolist() == ['noise', 'quotation']

    with pytest.raises(ValueError, match='Unknown labels'):
        to_labels(pd.Series(['maybe']))


def test_rank_orders_by_metric_then_tiebreakers():
    results = pd.DataFrame({
        'formula': ['a', 'b', 'c', 'd'],
        'balanced_accuracy': [0.80, 0.90, 0.90, 0.70],
        'precision': [0.9, 0.7, 0.8, 0.99],
        'recall': [0.5, 0.5, 0.5, 0.5],
    })

    ranked = Evaluator.rank(results)

    assert ranked['formula'].tolist() == ['c', 'b', 'a', 'd']

    with pytest.raises(ValueError, match='Unknown metric'):
        Evaluator.rank(results, metric='auc')
