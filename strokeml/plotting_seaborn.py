"""Seaborn exploratory visualizations of the stroke dataset.

These plots describe the cleaned data before any model is fitted: numeric
distributions split by the stroke label, correlation between numeric
attributes, and the stroke rate inside each category of a categorical
attribute.
"""

from __future__ import annotations

from math import ceil
from pathlib import Path
from typing import Sequence, Union

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

sns.set_style("whitegrid")
sns.set_context("notebook")

PathLike = Union[str, Path]


def _ensure_output_path(out_path: PathLike) -> Path:
    path = Path(out_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _ensure_features(df: pd.DataFrame, features: Sequence[str]) -> list[str]:
    if not features:
        raise ValueError("`features` must contain at least one column name.")
    missing = [col for col in features if col not in df.columns]
    if missing:
        raise ValueError(f"Missing features in dataframe: {missing}")
    return list(features)


def distribution_by_target(
    df: pd.DataFrame,
    features: Sequence[str],
    out_path: PathLike,
    target: str = "stroke",
    plot_type: str = "violin",
) -> Path:
    """Violin or box plot of each numeric feature, split by the target label."""

    plot_type = plot_type.lower()
    if plot_type not in {"violin", "box"}:
        raise ValueError("plot_type must be 'violin' or 'box'.")
    features = _ensure_features(df, features)
    if target not in df.columns:
        raise ValueError(f"Missing target column: {target}")
    out_file = _ensure_output_path(out_path)

    n_features = len(features)
    fig, axes = plt.subplots(n_features, 1, figsize=(8, 3.5 * n_features))
    if n_features == 1:
        axes = [axes]

    for ax, feature in zip(axes, features):
        if plot_type == "violin":
            sns.violinplot(data=df, x=target, y=feature, inner="quartile", ax=ax)
        else:
            sns.boxplot(data=df, x=target, y=feature, ax=ax)
        ax.set_title(f"{feature} by {target}")
        ax.set_xlabel(target)
        ax.set_ylabel(feature)

    plt.tight_layout()
    fig.savefig(out_file, dpi=200, bbox_inches="tight")
    plt.close(fig)
    return out_file


def correlation_heatmap(
    df: pd.DataFrame,
    features: Sequence[str],
    out_path: PathLike,
    method: str = "pearson",
) -> Path:
    """Correlation heatmap for the selected numeric features."""

    features = _ensure_features(df, features)
    if len(df) < 2:
        raise ValueError("Need at least two rows for a correlation heatmap.")
    out_file = _ensure_output_path(out_path)

    corr = df[features].corr(method=method)
    fig, ax = plt.subplots(figsize=(1.2 * len(features) + 3, 1.0 * len(features) + 2))
    sns.heatmap(
        corr,
        ax=ax,
        cmap="coolwarm",
        vmin=-1,
        vmax=1,
        center=0,
        annot=len(features) <= 10,
        fmt=".2f",
        cbar_kws={"label": "Correlation"},
    )
    ax.set_title(f"{method.capitalize()} correlation")
    plt.tight_layout()
    fig.savefig(out_file, dpi=200, bbox_inches="tight")
    plt.close(fig)
    return out_file


def target_rate_by_category(
    df: pd.DataFrame,
    cat_features: Sequence[str],
    out_path: PathLike,
    target: str = "stroke",
    col_wrap: int = 2,
) -> Path:
    """Bar grid of the positive-label rate (%) inside each category."""

    cat_features = _ensure_features(df, cat_features)
    if target not in df.columns:
        raise ValueError(f"Missing target column: {target}")
    out_file = _ensure_output_path(out_path)

    n = len(cat_features)
    n_cols = max(1, min(col_wrap, n))
    n_rows = ceil(n / n_cols)
    fig, axes = plt.subplots(n_rows, n_cols, figsize=(6 * n_cols, 4 * n_rows))
    axes = np.array(axes).reshape(-1)
    for ax in axes[n:]:
        ax.axis("off")

    for ax, col in zip(axes, cat_features):
        rates = df.groupby(col)[target].mean().sort_values(ascending=False) * 100
        sns.barplot(x=rates.index.astype(str), y=rates.values, color="#dd8452", ax=ax)
        ax.set_title(f"{target} rate by {col}")
        ax.set_xlabel(col)
        ax.set_ylabel(f"{target} (%)")
        for idx, v in enumerate(rates.values):
            ax.text(idx, v, f"{v:.1f}%", ha="center", va="bottom", fontsize=8)
        for label in ax.get_xticklabels():
            label.set_rotation(15)
            label.set_horizontalalignment("right")

    plt.tight_layout()
    fig.savefig(out_file, dpi=200, bbox_inches="tight")
    plt.close(fig)
    return out_file


def target_distribution(labels: Sequence, out_path: PathLike, target: str = "stroke") -> Path:
    """Count (and share) of each label value."""

    labels_arr = np.asarray(labels)
    if labels_arr.size == 0:
        raise ValueError("`labels` cannot be empty.")

    out_file = _ensure_output_path(out_path)
    counts = pd.Series(labels_arr, name=target).value_counts().sort_index()
    percentages = counts / counts.sum() * 100

    fig, ax = plt.subplots(figsize=(6, 4))
    sns.barplot(x=counts.index.astype(str), y=counts.values, color="#55a868", ax=ax)
    ax.set_xlabel(target)
    ax.set_ylabel("Count")
    ax.set_title(f"{target} label distribution")
    for idx, (count, pct) in enumerate(zip(counts.values, percentages.values)):
        ax.text(idx, count + counts.max() * 0.01, f"{pct:.1f}%", ha="center", va="bottom")

    plt.tight_layout()
    fig.savefig(out_file, dpi=200, bbox_inches="tight")
    plt.close(fig)
    return out_file
