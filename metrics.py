from typing import Dict

import numpy as np
from sklearn.metrics import confusion_matrix, precision_recall_fscore_support

from svm_errors import InvalidInputError


def _as_pair(predicted, actual):
    predicted = np.asarray(predicted, dtype=np.float64).ravel()
    actual = np.asarray(actual, dtype=np.float64).ravel()
    if predicted.shape[0] != actual.shape[0]:
        raise InvalidInputError(f"Length mismatch: {predicted.shape[0]} predictions vs {actual.shape[0]} labels")
    if predicted.shape[0] == 0:
        raise InvalidInputError("Cannot score empty predictions")
    return predicted, actual


def accuracy(predicted, actual) -> float:
    """Percentage (0-100) of positions where prediction and label are exactly equal."""
    predicted, actual = _as_pair(predicted, actual)
    n_correct = int(np.count_nonzero(predicted == actual))
    return n_correct / predicted.shape[0] * 100


def classification_summary(predicted, actual) -> Dict[str, object]:
    predicted, actual = _as_pair(predicted, actual)
    labels = np.union1d(actual, predicted)
    prec, rec, f1, _ = precision_recall_fscore_support(
        actual, predicted, labels=labels, average="weighted", zero_division=0
    )
    cm = confusion_matrix(actual, predicted, labels=labels)
    return {
        "accuracy": accuracy(predicted, actual),
        "precision_weighted": float(prec),
        "recall_weighted": float(rec),
        "f1_weighted": float(f1),
        "labels": labels.tolist(),
        "confusion_matrix": cm.tolist(),
    }
