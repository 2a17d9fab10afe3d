from functools import partial

import numpy as np
from tqdm import tqdm

from svm_errors import DegenerateTrainingError, InvalidInputError

EPOCHS = 100
CHECKPOINT_EVERY = 10


# ---------------------------
# Kernel functions
# ---------------------------
def _check_pair(x1, x2):
    x1 = np.asarray(x1, dtype=np.float64).ravel()
    x2 = np.asarray(x2, dtype=np.float64).ravel()
    if x1.shape != x2.shape:
        raise InvalidInputError(f"Kernel inputs differ in length: {x1.size} != {x2.size}")
    return x1, x2


def poly_kernel(x1, x2, degree=3, C=1.0) -> float:
    x1, x2 = _check_pair(x1, x2)
    return float((C + np.dot(x1, x2)) ** degree)


def rbf_kernel(x1, x2, gamma=0.01) -> float:
    x1, x2 = _check_pair(x1, x2)
    return float(np.exp(-gamma * np.sum((x1 - x2) ** 2)))


def sigmoid_kernel(x1, x2, gamma=0.01, coef0=0.0) -> float:
    x1, x2 = _check_pair(x1, x2)
    return float(np.tanh(gamma * np.dot(x1, x2) + coef0))


KERNELS = {
    "poly": poly_kernel,
    "rbf": rbf_kernel,
    "sigmoid": sigmoid_kernel,
}


class KernelSVM:
    """Binary kernel classifier trained with a fixed-budget dual coefficient update.

    Labels are used exactly as given. The update rule and the decision sum
    both assume signed labels; {0, 1} labels are accepted but zero-labelled
    rows then drop out of the decision sum.
    """

    def __init__(self, degree=3, C=1.0, gamma=0.01, coef0=0.0, kernel="poly", verbose=False):
        self.degree = degree
        self.C = C
        self.gamma = gamma
        self.coef0 = coef0
        self.kernel = kernel
        self.verbose = verbose
        self._kernel = self._bind_kernel(kernel)

        # set by train()
        self.alpha = None
        self.b = None
        self.X = None
        self.y = None
        self.support_indices = None

    def _bind_kernel(self, kernel):
        if kernel not in KERNELS:
            raise InvalidInputError(f"Unknown kernel type: {kernel!r} (expected one of {sorted(KERNELS)})")
        params = {
            "poly": {"degree": self.degree, "C": self.C},
            "rbf": {"gamma": self.gamma},
            "sigmoid": {"gamma": self.gamma, "coef0": self.coef0},
        }[kernel]
        return partial(KERNELS[kernel], **params)

    @property
    def is_trained(self):
        return self.alpha is not None

    # ---------------------------
    # Training
    # ---------------------------
    def _similarity_matrix(self, X):
        n_samples = X.shape[0]
        K = np.zeros((n_samples, n_samples))
        for i in range(n_samples):
            for j in range(n_samples):
                K[i, j] = self._kernel(X[i], X[j])
        return K

    def train(self, X, y):
        X = np.array(X, dtype=np.float64)
        y = np.array(y, dtype=np.float64)
        if X.ndim != 2 or X.shape[0] == 0 or X.shape[1] == 0:
            raise InvalidInputError(f"Expected a non-empty 2-D feature matrix, got shape {X.shape}")
        if y.ndim != 1 or y.shape[0] != X.shape[0]:
            raise InvalidInputError(f"Expected {X.shape[0]} labels, got shape {y.shape}")
        if not (np.all(np.isfinite(X)) and np.all(np.isfinite(y))):
            raise InvalidInputError("Training data contains non-finite values")

        n_samples = X.shape[0]
        alpha = np.zeros(n_samples)
        K = self._similarity_matrix(X)

        support_indices = []
        for epoch in tqdm(range(EPOCHS), desc="Training", unit="epoch", disable=not self.verbose):
            for i in range(n_samples):
                # alpha is updated in place, so f sees earlier updates of this epoch
                f = np.dot(alpha, y)
                if y[i] * f < 1:
                    alpha[i] += self.C - y[i] * f

            if epoch % CHECKPOINT_EVERY == 0:
                support_indices.extend(int(i) for i in np.flatnonzero(alpha > 0))

        alpha *= y

        if not support_indices:
            raise DegenerateTrainingError("No support vectors found; cannot estimate the bias")
        b_sum = 0.0
        for i in support_indices:
            b_sum += y[i] - np.dot(alpha, K[i])
        b = b_sum / len(support_indices)

        self.alpha = alpha
        self.b = float(b)
        self.X = X
        self.y = y
        self.support_indices = support_indices
        if self.verbose:
            print(f"Training completed. Support entries: {len(support_indices)} "
                  f"(unique: {len(set(support_indices))}), b={self.b:.4f}")
        return self

    # ---------------------------
    # Make a prediction
    # ---------------------------
    def decision_function(self, x):
        if not self.is_trained:
            raise InvalidInputError("KernelSVM is not trained; call train() first")
        x = np.asarray(x, dtype=np.float64).ravel()
        if x.shape[0] != self.X.shape[1]:
            raise InvalidInputError(f"Expected a vector of length {self.X.shape[1]}, got {x.shape[0]}")

        result = 0.0
        for alpha, y_i, x_i in zip(self.alpha, self.y, self.X):
            result += alpha * y_i * self._kernel(x_i, x)
        return float(result + self.b)

    def predict(self, x):
        return 1.0 if self.decision_function(x) >= 1 else 0.0

    def predict_batch(self, X):
        X = np.asarray(X, dtype=np.float64)
        if X.ndim != 2:
            raise InvalidInputError(f"Expected a 2-D feature matrix, got shape {X.shape}")
        y_pred = [self.predict(x) for x in tqdm(X, desc="Predicting", unit="row", disable=not self.verbose)]
        return np.array(y_pred, dtype=np.float64)


Classifier = KernelSVM
