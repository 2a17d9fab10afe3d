import argparse
import json
import sys
import time
from pathlib import Path

import numpy as np
import pandas as pd

from kernel_svm import KERNELS, KernelSVM
from metrics import classification_summary
from preprocessing import load_csv_dataset, scale_features, split


# -----------------------------
# Train/Eval
# -----------------------------

def train_and_eval(
    X: np.ndarray,
    y: np.ndarray,
    test_size: float = 0.2,
    seed: int = 43,
    scale: bool = True,
    kernel: str = "poly",
    C: float = 1.0,
    gamma: float = 0.01,
    degree: int = 3,
    coef0: float = 0.0,
    verbose: bool = False,
):
    if scale:
        X = scale_features(X)
    X_train, X_test, y_train, y_test = split(X, y, ratio=test_size, seed=seed)

    svm = KernelSVM(degree=degree, C=C, gamma=gamma, coef0=coef0, kernel=kernel, verbose=verbose)
    t0 = time.time()
    svm.train(X_train, y_train)
    train_time = time.time() - t0

    if len(y_test) == 0:
        # test_size=0 leaves nothing to hold out; score on the training rows instead
        print("Warning: empty test partition, scoring on the training set", file=sys.stderr)
        X_test, y_test = X_train, y_train
    y_pred = svm.predict_batch(X_test)

    metrics = classification_summary(y_pred, y_test)
    metrics.update({
        "train_time_sec": float(train_time),
        "n_train": int(len(y_train)),
        "n_test": int(len(y_test)),
        "n_features": int(X_train.shape[1]),
        "n_support_entries": len(svm.support_indices),
        "n_support_unique": len(set(svm.support_indices)),
        "b": svm.b,
        "kernel": kernel,
        "C": C,
        "gamma": gamma,
        "degree": degree,
        "coef0": coef0,
        "scaled": bool(scale),
        "seed": seed,
        "test_size": test_size,
    })
    return svm, metrics


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Train scratch Kernel SVM (binary) on a CSV whose last column is the label")
    ap.add_argument("--csv", type=str, required=True, help="CSV with a header row; last column is the label")
    ap.add_argument("--output_dir", type=str, default=None, help="Optional directory for metrics.json and metrics_summary.csv")
    ap.add_argument("--seed", type=int, default=43)
    ap.add_argument("--test_size", type=float, default=0.2)
    ap.add_argument("--no_scale", action="store_true", help="Skip feature standardization")
    ap.add_argument("--kernel", type=str, default="poly", choices=sorted(KERNELS))
    ap.add_argument("--C", type=float, default=1.0)
    ap.add_argument("--gamma", type=float, default=0.01)
    ap.add_argument("--degree", type=int, default=3)
    ap.add_argument("--coef0", type=float, default=0.0)
    ap.add_argument("--verbose", action="store_true", help="Show training/prediction progress")
    return ap.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    csv_path = Path(args.csv)

    print(f"Loading data from: {csv_path}")
    X, y = load_csv_dataset(csv_path)
    print(f"Features loaded: X={X.shape}, y={y.shape}")

    svm, metrics = train_and_eval(
        X,
        y,
        test_size=args.test_size,
        seed=args.seed,
        scale=not args.no_scale,
        kernel=args.kernel,
        C=args.C,
        gamma=args.gamma,
        degree=args.degree,
        coef0=args.coef0,
        verbose=args.verbose,
    )

    if args.output_dir is not None:
        out_dir = Path(args.output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        with open(out_dir / "metrics.json", "w", encoding="utf-8") as f:
            json.dump(metrics, f, indent=2)
        pd.DataFrame([
            {
                "accuracy": metrics["accuracy"],
                "f1_weighted": metrics["f1_weighted"],
                "precision_weighted": metrics["precision_weighted"],
                "recall_weighted": metrics["recall_weighted"],
                "train_time_sec": metrics["train_time_sec"],
                "n_train": metrics["n_train"],
                "n_test": metrics["n_test"],
                "n_features": metrics["n_features"],
                "kernel": metrics["kernel"],
            }
        ]).to_csv(out_dir / "metrics_summary.csv", index=False)

    print(f"Accuracy is: {metrics['accuracy']}")
    print(json.dumps({k: metrics[k] for k in ["accuracy", "f1_weighted", "n_train", "n_test", "n_features", "n_support_entries", "b", "kernel"]}, indent=2))


if __name__ == "__main__":
    main()
