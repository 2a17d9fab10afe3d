import math
from pathlib import Path
from typing import Tuple

import numpy as np
import pandas as pd

from svm_errors import InvalidInputError, NumericDegeneracyError


# -----------------------------
# CSV loading
# -----------------------------

def load_csv_dataset(csv_path: Path) -> Tuple[np.ndarray, np.ndarray]:
    """Read a headered CSV; the last column is the label, the rest are features."""
    csv_path = Path(csv_path)
    if not csv_path.is_file():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    df = pd.read_csv(csv_path, dtype=str, skipinitialspace=True)
    if df.shape[1] < 2:
        raise InvalidInputError(f"Expected at least one feature column and a label column in {csv_path}")
    if df.shape[0] == 0:
        raise InvalidInputError(f"No data rows in {csv_path}")

    for col in df.columns:
        values = pd.to_numeric(df[col], errors="coerce")
        bad = values.isna()
        if bad.any():
            row = int(np.flatnonzero(bad.to_numpy())[0])
            raise InvalidInputError(
                f"Malformed numeric value {df[col].iloc[row]!r} in column {col!r} (data row {row + 1})"
            )
        df[col] = values

    data = df.to_numpy(dtype=np.float64)
    return data[:, :-1], data[:, -1]


# -----------------------------
# Scaling
# -----------------------------

def _standardize(values: np.ndarray, what: str) -> np.ndarray:
    if values.shape[0] < 2:
        raise NumericDegeneracyError(f"Need at least 2 samples to standardize {what}, got {values.shape[0]}")
    mean = values.mean(axis=0)
    std = values.std(axis=0, ddof=1)
    # a constant column can still leave a tiny non-zero std from rounding in the mean
    constant = np.ptp(values, axis=0) == 0
    bad = constant | ~np.isfinite(std) | (std == 0)
    if np.any(bad):
        cols = np.flatnonzero(np.atleast_1d(bad)).tolist()
        raise NumericDegeneracyError(f"Zero standard deviation in {what} (columns {cols})")
    return (values - mean) / std


def scale_features(X: np.ndarray) -> np.ndarray:
    X = np.asarray(X, dtype=np.float64)
    if X.ndim != 2 or X.shape[0] == 0 or X.shape[1] == 0:
        raise InvalidInputError(f"Expected a non-empty 2-D feature matrix, got shape {X.shape}")
    return _standardize(X, "features")


def scale_labels(y: np.ndarray) -> np.ndarray:
    y = np.asarray(y, dtype=np.float64)
    if y.ndim != 1 or y.shape[0] == 0:
        raise InvalidInputError(f"Expected a non-empty label vector, got shape {y.shape}")
    return _standardize(y, "labels")


# -----------------------------
# Split
# -----------------------------

def split(
    X: np.ndarray,
    y: np.ndarray,
    ratio: float = 0.2,
    seed: int = 43,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    X = np.asarray(X, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if not 0.0 <= ratio < 1.0:
        raise InvalidInputError(f"Holdout ratio must be in [0, 1), got {ratio}")
    if X.ndim != 2 or X.shape[0] == 0:
        raise InvalidInputError(f"Expected a non-empty 2-D feature matrix, got shape {X.shape}")
    if y.ndim != 1 or y.shape[0] != X.shape[0]:
        raise InvalidInputError(f"Expected {X.shape[0]} labels, got shape {y.shape}")

    n = X.shape[0]
    # half away from zero; builtin round() rounds half to even
    n_train = int(math.floor(n * (1.0 - ratio) + 0.5))

    rng = np.random.default_rng(seed)
    indices = rng.permutation(n)
    train_idx, test_idx = indices[:n_train], indices[n_train:]
    return X[train_idx], X[test_idx], y[train_idx], y[test_idx]
