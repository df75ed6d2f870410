from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from .config import Config
from .data import load_data
from .evaluate import EvaluationResult, evaluate_models, predict_labels, predict_scores
from .io_utils import save_model
from .models import MODEL_NAMES, train_models
from .preprocess import BmiCleaningReport, clean_bmi, mark_invalid_bmi, split_features_target
from .split import Split, stratified_split


@dataclass
class PipelineResult:
    df: pd.DataFrame
    bmi_report: BmiCleaningReport
    split: Split
    models: dict = field(default_factory=dict)
    results: dict[str, EvaluationResult] = field(default_factory=dict)
    model_path: Path | None = None


def prepare(df: pd.DataFrame, cfg: Config) -> tuple[BmiCleaningReport, Split]:
    """Clean ``df`` in place and split it."""

    report = clean_bmi(df)
    print(f"[prepare] bmi: {report.n_invalid} invalid entries {report.invalid_values} -> median {report.median:.2f}")
    split = stratified_split(
        df,
        target=cfg.target,
        train_size=cfg.train_size,
        random_state=cfg.random_state,
    )
    print(f"[prepare] split: train={len(split.train_index)}, test={len(split.test_index)}")
    return report, split


def run_pipeline(
    cfg: Config | None = None,
    df: pd.DataFrame | None = None,
    names=MODEL_NAMES,
    n_jobs: int = 1,
    persist: bool = True,
) -> PipelineResult:
    """ingest -> clean -> split -> fit -> evaluate -> persist, in one pass."""

    cfg = cfg or Config()
    if df is None:
        print(f"[prepare] loading {cfg.data_path}")
        df = load_data(cfg.data_path)
    report, split = prepare(df, cfg)

    X_train, y_train = split_features_target(split.train(df), cfg)
    X_test, y_test = split_features_target(split.test(df), cfg)

    print(f"[train] fitting {', '.join(names)}")
    models = train_models(X_train, y_train, cfg, names=names, n_jobs=n_jobs)

    results = evaluate_models(models, X_test, y_test, threshold=cfg.decision_threshold)
    for name, res in results.items():
        print(f"[evaluate] {name}: tn={res.tn} fp={res.fp} fn={res.fn} tp={res.tp} auc={res.roc_auc}")

    model_path = None
    if persist and "random_forest" in models:
        model_path = save_model(models["random_forest"], cfg.model_path)
        print(f"[persist] saved random forest to {model_path}")

    return PipelineResult(
        df=df,
        bmi_report=report,
        split=split,
        models=models,
        results=results,
        model_path=model_path,
    )


def predict_frame(model, df: pd.DataFrame, cfg: Config, name: str = "random_forest") -> pd.DataFrame:
    """Score new records with a persisted model.

    Unparseable bmi values become NaN on a copy of ``df``; the model fills
    them with its training median.
    """

    missing = [f for f in cfg.feature_columns if f not in df.columns]
    if missing:
        raise ValueError(f"Missing columns in dataset: {missing}")
    out = df.copy()
    mark_invalid_bmi(out)
    X = out[cfg.feature_columns]
    scores = predict_scores(model, X)
    out["stroke_probability"] = scores
    out["stroke_pred"] = predict_labels(model, X, name, threshold=cfg.decision_threshold, scores=scores)
    return out
