from dataclasses import dataclass, field
from typing import Dict, Optional

import numpy as np
import pandas as pd
from sklearn.metrics import confusion_matrix, roc_auc_score, roc_curve

# Models whose class decision is taken from the probability threshold rather
# than the estimator's own predict().
THRESHOLD_MODELS = {'logistic_regression'}


@dataclass(frozen=True)
class EvaluationResult:
    model: str
    tn: int
    fp: int
    fn: int
    tp: int
    roc_auc: Optional[float] = None
    fpr: list = field(default_factory=list, repr=False)
    tpr: list = field(default_factory=list, repr=False)
    thresholds: list = field(default_factory=list, repr=False)

    @property
    def n(self) -> int:
        return self.tn + self.fp + self.fn + self.tp

    @property
    def accuracy(self) -> float:
        return _ratio(self.tp + self.tn, self.n)

    @property
    def precision(self) -> float:
        return _ratio(self.tp, self.tp + self.fp)

    @property
    def recall(self) -> float:
        return _ratio(self.tp, self.tp + self.fn)

    @property
    def specificity(self) -> float:
        return _ratio(self.tn, self.tn + self.fp)

    @property
    def false_positive_rate(self) -> float:
        return _ratio(self.fp, self.fp + self.tn)

    @property
    def f1(self) -> float:
        p, r = self.precision, self.recall
        return _ratio(2 * p * r, p + r)

    def summary(self) -> Dict[str, Optional[float]]:
        return {
            'model': self.model,
            'tn': self.tn, 'fp': self.fp, 'fn': self.fn, 'tp': self.tp,
            'accuracy': self.accuracy,
            'precision': self.precision,
            'recall': self.recall,
            'specificity': self.specificity,
            'false_positive_rate': self.false_positive_rate,
            'f1': self.f1,
            'roc_auc': self.roc_auc,
        }

    def to_dict(self):
        out = self.summary()
        out['roc_curve'] = {'fpr': self.fpr, 'tpr': self.tpr, 'thresholds': self.thresholds}
        return out


def _ratio(num, den) -> float:
    return float(num / den) if den else 0.0


def predict_scores(model, X) -> np.ndarray:
    """Positive-class probability for each row."""
    proba = model.predict_proba(X)
    classes = list(getattr(model, 'classes_', [0, 1]))
    if 1 not in classes:
        return np.zeros(len(proba))
    return np.asarray(proba[:, classes.index(1)], dtype=float)


def predict_labels(model, X, name: str, threshold: float = 0.5, scores=None) -> np.ndarray:
    if name in THRESHOLD_MODELS:
        if scores is None:
            scores = predict_scores(model, X)
        return (np.asarray(scores) >= threshold).astype(int)
    return np.asarray(model.predict(X)).astype(int)


def confusion_counts(y_true, y_pred) -> Dict[str, int]:
    tn, fp, fn, tp = confusion_matrix(y_true, y_pred, labels=[0, 1]).ravel()
    return {'tn': int(tn), 'fp': int(fp), 'fn': int(fn), 'tp': int(tp)}


def roc_points(y_true, scores):
    """ROC curve over the score threshold sweep.

    Rows are ordered by score descending and all rows sharing a score form a
    single threshold step, so the order within a tie never changes the
    curve. Returns empty
    arrays and ``None`` AUC when ``y_true`` holds only one class.
    """
    y_true = np.asarray(y_true).astype(int)
    scores = np.asarray(scores, dtype=float)
    if np.unique(y_true).size < 2:
        empty = np.array([], dtype=float)
        return empty, empty, empty, None
    fpr, tpr, thresholds = roc_curve(y_true, scores, pos_label=1)
    auc = float(roc_auc_score(y_true, scores))
    return fpr, tpr, thresholds, auc


def evaluate_model(name: str, model, X_test, y_test, threshold: float = 0.5) -> EvaluationResult:
    scores = predict_scores(model, X_test)
    y_pred = predict_labels(model, X_test, name, threshold=threshold, scores=scores)
    counts = confusion_counts(y_test, y_pred)
    fpr, tpr, thresholds, auc = roc_points(y_test, scores)
    return EvaluationResult(
        model=name,
        roc_auc=auc,
        fpr=[float(v) for v in fpr],
        tpr=[float(v) for v in tpr],
        thresholds=[float(v) for v in thresholds],
        **counts,
    )


def evaluate_models(models: dict, X_test, y_test, threshold: float = 0.5) -> Dict[str, EvaluationResult]:
    return {name: evaluate_model(name, m, X_test, y_test, threshold) for name, m in models.items()}


def evaluation_table(results) -> pd.DataFrame:
    rows = [r.summary() for r in (results.values() if isinstance(results, dict) else results)]
    return pd.DataFrame(rows).set_index('model')
