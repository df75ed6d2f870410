import argparse
from pathlib import Path

import pandas as pd

from strokeml.config import Config
from strokeml.data import REQUIRED_COLUMNS, check_columns, load_data, read_stroke_csv
from strokeml.evaluate import evaluate_models, evaluation_table
from strokeml.feature_importance import (
    forest_feature_importances,
    permutation_feature_importances,
    plot_feature_importance_barplot,
)
from strokeml.io_utils import (
    artdir,
    dump_joblib,
    load_joblib,
    load_model,
    load_npz,
    load_parquet,
    run_id_from_cfg,
    save_json,
    save_model,
    save_npz,
    save_parquet,
)
from strokeml.models import MODEL_NAMES, train_models
from strokeml.pipeline import predict_frame, prepare, run_pipeline
from strokeml.plotting import confusion_matrix_plot, roc_curves_plot
from strokeml.preprocess import split_features_target
from strokeml.split import Split


def _config_from_args(args) -> Config:
    cfg = Config()
    if getattr(args, "data", None):
        cfg.data_path = args.data
    if getattr(args, "model_path", None):
        cfg.model_path = args.model_path
    return cfg


def _load_split(A: Path) -> Split:
    data = load_npz(A / "split.npz")
    return Split(train_index=data["train_index"], test_index=data["test_index"])


def _model_file(A: Path, name: str) -> Path:
    return A / f"{name}.joblib"


def _save_evaluation(A: Path, results) -> list:
    table = evaluation_table(results)
    table.to_csv(A / "metrics.csv")
    save_json(A / "report.json", {name: res.to_dict() for name, res in results.items()})

    outputs = [A / "metrics.csv", A / "report.json"]
    outputs.append(roc_curves_plot(results, out_path=str(A / "roc_curves.png")))
    for name, res in results.items():
        outputs.append(confusion_matrix_plot(res, str(A / f"confusion_{name}.png")))
    return outputs


def _save_importances(A: Path, rf_model) -> list:
    imp = forest_feature_importances(rf_model)
    imp.to_csv(A / "rf_feature_importances.csv", index=False)
    bar = plot_feature_importance_barplot(imp, A / "rf_feature_importances.png")
    return [A / "rf_feature_importances.csv", bar]


def _save_permutation_importances(A: Path, rf_model, X_test, y_test, cfg: Config) -> list:
    if y_test.nunique() < 2:
        print("[evaluate] test partition holds one class, skipping permutation importances")
        return []
    perm = permutation_feature_importances(rf_model, X_test, y_test, random_state=cfg.random_state)
    perm.to_csv(A / "rf_permutation_importances.csv", index=False)
    return [A / "rf_permutation_importances.csv"]


def cmd_prepare(args):
    cfg = _config_from_args(args)
    run_id = run_id_from_cfg(cfg, tag=args.tag)
    A = artdir(run_id)

    print(f"[prepare] loading {cfg.data_path}…")
    df = load_data(cfg.data_path)
    report, split = prepare(df, cfg)

    save_parquet(A / "df_clean.parquet", df)
    save_npz(A / "split.npz", train_index=split.train_index, test_index=split.test_index)
    save_json(A / "bmi_report.json", report.as_dict())

    print(f"[prepare] saved: {A}/df_clean.parquet, split.npz, bmi_report.json")


def cmd_train(args):
    cfg = _config_from_args(args)
    run_id = run_id_from_cfg(cfg, tag=args.tag)
    A = artdir(run_id)

    df = load_parquet(A / "df_clean.parquet")
    split = _load_split(A)
    X_train, y_train = split_features_target(split.train(df), cfg)

    names = args.models or MODEL_NAMES
    print(f"[train] fitting {', '.join(names)} on {len(X_train)} rows…")
    models = train_models(X_train, y_train, cfg, names=names, n_jobs=args.n_jobs)

    saved = []
    for name, model in models.items():
        saved.append(dump_joblib(_model_file(A, name), model))

    if "random_forest" in models:
        saved.extend(_save_importances(A, models["random_forest"]))
        saved.append(save_model(models["random_forest"], cfg.model_path))
        print(f"[persist] random forest written to {cfg.model_path}")

    print("[train] saved: " + ", ".join(str(p) for p in saved))


def cmd_evaluate(args):
    cfg = _config_from_args(args)
    run_id = run_id_from_cfg(cfg, tag=args.tag)
    A = artdir(run_id)

    df = load_parquet(A / "df_clean.parquet")
    split = _load_split(A)
    X_test, y_test = split_features_target(split.test(df), cfg)

    models = {}
    for name in args.models or MODEL_NAMES:
        path = _model_file(A, name)
        if not path.exists():
            print(f"[evaluate] {path.name} missing, skipping {name} (run `train` first)")
            continue
        models[name] = load_joblib(path)
    if not models:
        raise FileNotFoundError(f"No trained models found under {A}")

    print(f"[evaluate] scoring {len(models)} model(s) on {len(X_test)} test rows…")
    results = evaluate_models(models, X_test, y_test, threshold=cfg.decision_threshold)
    print(evaluation_table(results).round(3).to_string())

    outputs = _save_evaluation(A, results)
    if "random_forest" in models:
        outputs.extend(_save_permutation_importances(A, models["random_forest"], X_test, y_test, cfg))
    print("[evaluate] saved: " + ", ".join(str(p) for p in outputs))


def cmd_run(args):
    cfg = _config_from_args(args)
    run_id = run_id_from_cfg(cfg, tag=getattr(args, "tag", None))
    A = artdir(run_id)

    res = run_pipeline(cfg, n_jobs=getattr(args, "n_jobs", 1))
    save_parquet(A / "df_clean.parquet", res.df)
    save_npz(A / "split.npz", train_index=res.split.train_index, test_index=res.split.test_index)
    save_json(A / "bmi_report.json", res.bmi_report.as_dict())
    print(evaluation_table(res.results).round(3).to_string())

    outputs = _save_evaluation(A, res.results)
    if "random_forest" in res.models:
        outputs.extend(_save_importances(A, res.models["random_forest"]))
    print("[run] saved: " + ", ".join(str(p) for p in outputs))


def cmd_predict(args):
    cfg = _config_from_args(args)
    model = load_model(cfg.model_path)

    df = read_stroke_csv(args.input)
    check_columns(df, [c for c in REQUIRED_COLUMNS if c != cfg.target])
    scored = predict_frame(model, df, cfg)

    out = Path(args.output)
    out.parent.mkdir(parents=True, exist_ok=True)
    keep = [c for c in ("id", cfg.target) if c in scored.columns]
    scored[keep + ["stroke_probability", "stroke_pred"]].to_csv(out, index=False)
    n_pos = int(pd.Series(scored["stroke_pred"]).sum())
    print(f"[predict] scored {len(scored)} rows ({n_pos} predicted positive) -> {out}")


def main(argv=None):
    p = argparse.ArgumentParser(description="Stroke classification pipeline with caching")
    p.add_argument("--data", help="Input CSV (defaults to Config.data_path)")
    p.add_argument("--model-path", help="Where the random forest is persisted")
    sub = p.add_subparsers(dest="cmd")

    sp = sub.add_parser("prepare", help="Load, clean BMI, split; cache the cleaned frame and split")
    sp.add_argument("--tag", default=None, help="Optional run tag")
    sp.set_defaults(fn=cmd_prepare)

    sp = sub.add_parser("train", help="Fit models on the cached train partition")
    sp.add_argument("--tag", default=None)
    sp.add_argument("--models", nargs="+", choices=MODEL_NAMES, default=None)
    sp.add_argument("--n-jobs", type=int, default=1, help="Fit models in parallel")
    sp.set_defaults(fn=cmd_train)

    sp = sub.add_parser("evaluate", help="Confusion matrices, rates and ROC curves on the test partition")
    sp.add_argument("--tag", default=None)
    sp.add_argument("--models", nargs="+", choices=MODEL_NAMES, default=None)
    sp.set_defaults(fn=cmd_evaluate)

    sp = sub.add_parser("run", help="Full pipeline in one pass (default)")
    sp.add_argument("--tag", default=None)
    sp.add_argument("--n-jobs", type=int, default=1)
    sp.set_defaults(fn=cmd_run)

    sp = sub.add_parser("predict", help="Score a CSV with the persisted random forest")
    sp.add_argument("input", help="CSV with the patient feature columns")
    sp.add_argument("--output", default="outputs/predictions.csv")
    sp.set_defaults(fn=cmd_predict)

    args = p.parse_args(argv)
    fn = getattr(args, "fn", cmd_run)
    fn(args)

if __name__ == "__main__":
    main()
