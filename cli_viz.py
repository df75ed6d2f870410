import argparse

from strokeml.association import analyze_associations
from strokeml.config import Config
from strokeml.io_utils import artdir, load_parquet, run_id_from_cfg
from strokeml.plotting_seaborn import (
    correlation_heatmap,
    distribution_by_target,
    target_distribution,
    target_rate_by_category,
)

NUMERIC_EDA = ["age", "avg_glucose_level", "bmi"]


def _parse_csv_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [token.strip() for token in raw.split(',') if token.strip()]


def main(argv=None):
    p = argparse.ArgumentParser(description="Exploratory plots and association tests for a prepared run")
    p.add_argument("--tag", default=None, help="Run tag (used for folder lookup)")
    p.add_argument("--data", help="Input CSV the run was prepared from")
    p.add_argument("--model-path", help="Model path the run was prepared with")
    p.add_argument("--features", help="Comma separated numeric features for distribution/correlation plots")
    p.add_argument("--categories", help="Comma separated categorical features for rate plots/chi-square")
    p.add_argument("--violin-kind", choices=("violin", "box"), default="violin")
    p.add_argument("--corr-method", choices=("pearson", "spearman", "kendall"), default="pearson")
    p.add_argument("--skip-tests", action="store_true", help="Skip chi-square association tests")
    args = p.parse_args(argv)

    cfg = Config()
    if args.data:
        cfg.data_path = args.data
    if args.model_path:
        cfg.model_path = args.model_path
    run_id = run_id_from_cfg(cfg, tag=args.tag)
    A = artdir(run_id)

    clean_path = A / "df_clean.parquet"
    if not clean_path.exists():
        raise FileNotFoundError(f"{clean_path} missing; run `python cli.py prepare` or `run` first")

    print(f"[viz] loading cached data for {run_id}…")
    df = load_parquet(clean_path)
    out_dir = A / "eda"
    features = _parse_csv_list(args.features) or [c for c in NUMERIC_EDA if c in df.columns]
    categories = _parse_csv_list(args.categories) or [c for c in cfg.categorical_features if c in df.columns]

    outputs = []

    print("[viz] label distribution…")
    outputs.append(target_distribution(df[cfg.target], out_dir / "label_distribution.png", target=cfg.target))

    if features:
        print(f"[viz] {args.violin_kind} plots for {features}")
        try:
            outputs.append(distribution_by_target(
                df, features, out_dir / f"{args.violin_kind}_by_{cfg.target}.png",
                target=cfg.target, plot_type=args.violin_kind,
            ))
        except ValueError as exc:
            print(f"[viz] distribution plots skipped: {exc}")

        print("[viz] correlation heatmap…")
        try:
            corr_cols = features + [cfg.target]
            outputs.append(correlation_heatmap(df, corr_cols, out_dir / "correlation.png", method=args.corr_method))
        except ValueError as exc:
            print(f"[viz] correlation skipped: {exc}")
    else:
        print("[viz] no numeric features discovered; skipping distribution plots")

    if categories:
        print(f"[viz] {cfg.target} rate by {categories}")
        try:
            outputs.append(target_rate_by_category(df, categories, out_dir / "rate_by_category.png", target=cfg.target))
        except ValueError as exc:
            print(f"[viz] category rates skipped: {exc}")

        if not args.skip_tests:
            analyze_associations(df, categories, out_dir, target=cfg.target)
            outputs.append(out_dir / "association_report.json")

    print(f"[viz] done. Files saved to: {out_dir}")
    if outputs:
        print("[viz] generated: " + ", ".join(str(o) for o in outputs))

if __name__ == "__main__":
    main()
