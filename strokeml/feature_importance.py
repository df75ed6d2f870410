"""Feature importance utilities for the fitted stroke classifiers.

The functions here read importances out of a fitted random forest pipeline
(impurity based) or estimate them for any fitted pipeline by permuting the
raw input columns of a held-out frame. A bar plot helper renders either table
inside the run's artifact directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from sklearn.inspection import permutation_importance

sns.set_style("whitegrid")

PathLike = Union[str, Path]


def _ensure_output_path(out_path: PathLike) -> Path:
    path = Path(out_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _transformed_feature_names(model) -> list[str]:
    pre = model.named_steps.get("pre")
    if pre is None:
        raise ValueError("Pipeline has no 'pre' step to read feature names from.")
    return [str(n) for n in pre.get_feature_names_out()]


def forest_feature_importances(model) -> pd.DataFrame:
    """Impurity-based importances of a fitted random forest pipeline.

    Names refer to the transformed design matrix (``num__age``,
    ``cat__gender_Male``, ...).
    """

    clf = model.named_steps["clf"]
    if not hasattr(clf, "feature_importances_"):
        raise ValueError(f"{type(clf).__name__} does not expose feature_importances_")
    names = _transformed_feature_names(model)
    importances = np.asarray(clf.feature_importances_, dtype=float)
    if len(names) != importances.size:
        raise ValueError("feature names length does not match importances")
    std = np.std([tree.feature_importances_ for tree in clf.estimators_], axis=0)
    df = pd.DataFrame({"feature": names, "importance": importances, "std": std})
    return df.sort_values("importance", ascending=False).reset_index(drop=True)


def permutation_feature_importances(
    model,
    X: pd.DataFrame,
    y,
    n_repeats: int = 10,
    random_state: int = 42,
    scoring: str = "roc_auc",
) -> pd.DataFrame:
    """Score drop when each raw input column is shuffled."""

    result = permutation_importance(
        model, X, y, n_repeats=n_repeats, random_state=random_state, scoring=scoring
    )
    df = pd.DataFrame({
        "feature": list(X.columns),
        "importance": result.importances_mean,
        "std": result.importances_std,
    })
    return df.sort_values("importance", ascending=False).reset_index(drop=True)


def plot_feature_importance_barplot(
    importance_df: pd.DataFrame,
    out_path: PathLike,
    top_k: int = 15,
    title: str = "Random forest feature importances",
) -> Path:
    """Draw a horizontal bar plot of the top-k features."""

    if importance_df.empty:
        raise ValueError("importance_df cannot be empty")
    subset = importance_df.nlargest(top_k, "importance")
    out_file = _ensure_output_path(out_path)

    plt.figure(figsize=(8, max(4, 0.35 * len(subset))))
    ax = sns.barplot(data=subset, x="importance", y="feature", orient="h", color="#4c72b0")
    if "std" in subset.columns:
        ax.errorbar(
            subset["importance"],
            np.arange(len(subset)),
            xerr=subset["std"],
            fmt="none",
            ecolor="black",
            capsize=3,
        )
    ax.set_title(title)
    ax.set_xlabel("Importance")
    plt.tight_layout()
    plt.savefig(out_file, dpi=200, bbox_inches="tight")
    plt.close()
    return out_file
