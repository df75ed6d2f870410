"""Association between categorical patient attributes and the stroke label.

The helpers run chi-square tests (with Cramér's V as an effect size) and
produce count/percentage cross-tabulations for each categorical attribute
against the target, saving a JSON report next to the run's other artifacts.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Sequence, Union

import numpy as np
import pandas as pd
from scipy.stats import chi2_contingency

PathLike = Union[str, Path]


def safe_json_dump(obj: Any, path: PathLike) -> None:
    """Dump JSON handling numpy/scalar types gracefully."""

    def convert(value: Any):
        if hasattr(value, "item"):
            return value.item()
        if isinstance(value, pd.DataFrame):
            return value.to_dict(orient="records")
        if isinstance(value, pd.Series):
            return value.to_dict()
        if isinstance(value, (set, frozenset)):
            return sorted(value)
        if isinstance(value, np.ndarray):
            return value.tolist()
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, default=convert)


def chi_square_test(
    df: pd.DataFrame,
    column: str,
    target: str = "stroke",
) -> dict[str, Any]:
    """Run chi-square test of independence between ``column`` and ``target``."""

    if column not in df.columns:
        raise ValueError(f"Column '{column}' not found in dataframe")
    if target not in df.columns:
        raise ValueError(f"Column '{target}' not found in dataframe")

    contingency = pd.crosstab(df[column], df[target])
    if min(contingency.shape) < 2:
        raise ValueError(f"Need at least two levels of '{column}' and '{target}' for chi-square")
    chi2, p_value, dof, expected = chi2_contingency(contingency)
    n = contingency.to_numpy().sum()
    r, c = contingency.shape
    denom = min(r - 1, c - 1)
    cramers_v = float(np.sqrt(chi2 / (n * denom))) if denom > 0 else 0.0

    if cramers_v >= 0.5:
        association = "strong"
    elif cramers_v >= 0.3:
        association = "moderate"
    elif cramers_v >= 0.1:
        association = "weak"
    else:
        association = "negligible"

    return {
        "chi2": float(chi2),
        "p_value": float(p_value),
        "dof": int(dof),
        "significant": bool(p_value < 0.05),
        "cramers_v": cramers_v,
        "association": association,
        "contingency_table": {str(k): v for k, v in contingency.to_dict().items()},
    }


def cross_tabulation_summary(
    df: pd.DataFrame,
    columns: Iterable[str],
    target: str = "stroke",
    out_dir: PathLike | None = None,
) -> dict[str, dict[str, pd.DataFrame]]:
    """Count and row-percentage cross-tabulations of each column vs the target."""

    results: dict[str, dict[str, pd.DataFrame]] = {}
    out_dir_path = Path(out_dir) if out_dir else None
    if out_dir_path:
        out_dir_path.mkdir(parents=True, exist_ok=True)

    for col in columns:
        if col not in df.columns:
            continue
        counts = pd.crosstab(df[col], df[target])
        pct = pd.crosstab(df[col], df[target], normalize="index") * 100
        results[col] = {"counts": counts, "pct": pct}
        if out_dir_path:
            counts.to_csv(out_dir_path / f"{col}_counts.csv")
            pct.round(2).to_csv(out_dir_path / f"{col}_pct.csv")
    return results


def analyze_associations(
    df: pd.DataFrame,
    columns: Sequence[str],
    out_dir: PathLike,
    target: str = "stroke",
) -> dict[str, Any]:
    """Chi-square every categorical column against the target and save a report."""

    output_dir = Path(out_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    report: dict[str, Any] = {"chi_square": {}, "skipped": {}}

    for col in columns:
        if col not in df.columns:
            continue
        try:
            res = chi_square_test(df, col, target=target)
        except ValueError as exc:
            report["skipped"][col] = str(exc)
            print(f"[associations] {col}: skipped ({exc})")
            continue
        report["chi_square"][col] = res
        print(
            f"[associations] {col}: chi2={res['chi2']:.3f}, p={res['p_value']:.4f}"
            f" ({'significant' if res['significant'] else 'ns'}, V={res['cramers_v']:.3f})"
        )

    cross_tabulation_summary(df, columns, target=target, out_dir=output_dir / "tables")

    report_path = output_dir / "association_report.json"
    safe_json_dump(report, report_path)
    print(f"[associations] saved report to {report_path}")
    return report
