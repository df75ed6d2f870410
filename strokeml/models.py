from __future__ import annotations

from typing import Callable, Dict

import pandas as pd
from joblib import Parallel, delayed
from sklearn.calibration import CalibratedClassifierCV
from sklearn.ensemble import RandomForestClassifier
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import Pipeline
from sklearn.svm import SVC

from .config import Config
from .preprocess import build_preprocessor

MODEL_NAMES = ("logistic_regression", "random_forest", "svm")


def _pipeline(X: pd.DataFrame, clf, cfg: Config) -> Pipeline:
    preproc, _, _ = build_preprocessor(X, cfg)
    return Pipeline([("pre", preproc), ("clf", clf)])


def fit_logistic_regression(X: pd.DataFrame, y: pd.Series, cfg: Config) -> Pipeline:
    model = _pipeline(X, LogisticRegression(max_iter=cfg.lr_max_iter), cfg)
    model.fit(X, y)
    return model


def fit_random_forest(X: pd.DataFrame, y: pd.Series, cfg: Config) -> Pipeline:
    """Bagged ensemble of ``cfg.n_estimators`` decision trees."""

    clf = RandomForestClassifier(
        n_estimators=cfg.n_estimators,
        bootstrap=True,
        random_state=cfg.random_state,
    )
    model = _pipeline(X, clf, cfg)
    model.fit(X, y)
    return model


def fit_svm(X: pd.DataFrame, y: pd.Series, cfg: Config) -> Pipeline:
    """Kernel SVM with calibrated probability output."""

    # sigmoid calibration on cross-validated decision values, one final SVC
    clf = CalibratedClassifierCV(SVC(random_state=cfg.random_state), ensemble=False)
    model = _pipeline(X, clf, cfg)
    model.fit(X, y)
    return model


TRAINERS: Dict[str, Callable[[pd.DataFrame, pd.Series, Config], Pipeline]] = {
    "logistic_regression": fit_logistic_regression,
    "random_forest": fit_random_forest,
    "svm": fit_svm,
}


def train_model(name: str, X: pd.DataFrame, y: pd.Series, cfg: Config) -> Pipeline:
    name = name.lower()
    if name not in TRAINERS:
        raise ValueError(f"Unknown model '{name}'")
    return TRAINERS[name](X, y, cfg)


def train_models(
    X: pd.DataFrame,
    y: pd.Series,
    cfg: Config,
    names=MODEL_NAMES,
    n_jobs: int = 1,
) -> Dict[str, Pipeline]:
    """Fit each named model on the same training partition.

    The trainers share no state, so ``n_jobs > 1`` gives the same models as a
    sequential run.
    """

    names = list(names)
    if n_jobs == 1:
        fitted = [train_model(name, X, y, cfg) for name in names]
    else:
        fitted = Parallel(n_jobs=n_jobs)(delayed(train_model)(name, X, y, cfg) for name in names)
    return dict(zip(names, fitted))
