import numpy as np
import pytest

from preprocessing import load_csv_dataset, scale_features, scale_labels, split
from svm_errors import InvalidInputError, NumericDegeneracyError


# -----------------------------
# Scaling
# -----------------------------

def test_scaled_columns_have_zero_mean_unit_std():
    rng = np.random.default_rng(7)
    X = rng.normal(loc=[5.0, -3.0, 100.0], scale=[2.0, 0.1, 30.0], size=(50, 3))
    Xs = scale_features(X)
    np.testing.assert_allclose(Xs.mean(axis=0), 0.0, atol=1e-12)
    np.testing.assert_allclose(Xs.std(axis=0, ddof=1), 1.0, rtol=1e-12)


def test_scale_uses_sample_std():
    Xs = scale_features([[1.0], [3.0]])
    # mean 2, sample std sqrt(2)
    np.testing.assert_allclose(Xs.ravel(), [-1 / np.sqrt(2), 1 / np.sqrt(2)])


def test_scale_returns_new_matrix():
    X = np.array([[1.0, 2.0], [3.0, 5.0], [4.0, 9.0]])
    before = X.copy()
    Xs = scale_features(X)
    assert Xs is not X
    np.testing.assert_array_equal(X, before)


@pytest.mark.parametrize("value", [7.0, 0.1, 0.7, 1e-3, 3.3])
def test_zero_variance_column_raises(value):
    # 0.1, 0.7 and 3.3 are not exact in binary, so their mean picks up rounding error
    X = np.array([[1.0, value], [2.0, value], [3.0, value]])
    with pytest.raises(NumericDegeneracyError, match=r"columns \[1\]"):
        scale_features(X)


def test_constant_inexact_labels_raise():
    with pytest.raises(NumericDegeneracyError):
        scale_labels([0.1, 0.1, 0.1])


def test_single_row_cannot_be_scaled():
    with pytest.raises(NumericDegeneracyError):
        scale_features([[1.0, 2.0]])


@pytest.mark.parametrize("bad", [[], [1.0, 2.0], np.zeros((3, 0))])
def test_scale_features_rejects_non_matrix(bad):
    with pytest.raises(InvalidInputError):
        scale_features(bad)


def test_scale_labels():
    ys = scale_labels([0.0, 0.0, 1.0, 1.0])
    assert ys.mean() == pytest.approx(0.0)
    assert ys.std(ddof=1) == pytest.approx(1.0)
    with pytest.raises(NumericDegeneracyError):
        scale_labels([1.0, 1.0, 1.0])


# -----------------------------
# Split
# -----------------------------

def _indexed_dataset(n):
    # row i holds i in both features and label so partitions map back to indices
    X = np.arange(n, dtype=float).reshape(-1, 1)
    return np.hstack([X, X * 10]), np.arange(n, dtype=float)


def test_split_is_deterministic():
    X, y = _indexed_dataset(25)
    first = split(X, y, 0.3, seed=11)
    second = split(X, y, 0.3, seed=11)
    for a, b in zip(first, second):
        np.testing.assert_array_equal(a, b)


def test_split_covers_every_row_once():
    X, y = _indexed_dataset(25)
    X_train, X_test, y_train, y_test = split(X, y, 0.3, seed=3)
    assert len(y_train) + len(y_test) == 25
    idx = np.concatenate([y_train, y_test]).astype(int)
    assert sorted(idx.tolist()) == list(range(25))
    # rows stay paired with their labels
    np.testing.assert_array_equal(X_train[:, 0], y_train)
    np.testing.assert_array_equal(X_test[:, 0], y_test)


def test_split_sizes_round_half_up():
    X, y = _indexed_dataset(10)
    X_train, X_test, _, _ = split(X, y, 0.25, seed=0)
    assert len(X_train) == 8
    assert len(X_test) == 2

    X, y = _indexed_dataset(4)
    X_train, X_test, y_train, y_test = split(X, y, 0.5, seed=43)
    assert (len(X_train), len(X_test)) == (2, 2)


def test_split_keeps_permuted_order():
    X, y = _indexed_dataset(12)
    _, _, y_train, y_test = split(X, y, 0.5, seed=5)
    perm = np.random.default_rng(5).permutation(12)
    np.testing.assert_array_equal(np.concatenate([y_train, y_test]), perm)


def test_split_zero_ratio_keeps_everything_for_training():
    X, y = _indexed_dataset(6)
    X_train, X_test, y_train, y_test = split(X, y, 0.0, seed=1)
    assert len(y_train) == 6
    assert X_test.shape == (0, 2)
    assert y_test.shape == (0,)


@pytest.mark.parametrize("ratio", [-0.1, 1.0, 1.5])
def test_split_rejects_bad_ratio(ratio):
    X, y = _indexed_dataset(5)
    with pytest.raises(InvalidInputError):
        split(X, y, ratio, seed=1)


def test_split_rejects_empty_or_mismatched_data():
    with pytest.raises(InvalidInputError):
        split(np.zeros((0, 2)), np.zeros(0), 0.2, seed=1)
    X, y = _indexed_dataset(5)
    with pytest.raises(InvalidInputError):
        split(X, y[:4], 0.2, seed=1)


# -----------------------------
# CSV loading
# -----------------------------

def test_load_csv_dataset(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("a,b,label\n1,2.5,0\n3,4,1\n-1,0.5,1\n", encoding="utf-8")
    X, y = load_csv_dataset(path)
    np.testing.assert_array_equal(X, [[1.0, 2.5], [3.0, 4.0], [-1.0, 0.5]])
    np.testing.assert_array_equal(y, [0.0, 1.0, 1.0])


def test_load_csv_rejects_malformed_field(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("a,b,label\n1,2,0\n3,oops,1\n", encoding="utf-8")
    with pytest.raises(InvalidInputError, match="oops"):
        load_csv_dataset(path)


def test_load_csv_requires_label_column(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("only\n1\n2\n", encoding="utf-8")
    with pytest.raises(InvalidInputError):
        load_csv_dataset(path)


def test_load_csv_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_csv_dataset(tmp_path / "missing.csv")
