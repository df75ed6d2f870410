import os
import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns


def _ensure_dir(out_path):
    dir_name = os.path.dirname(str(out_path))
    if dir_name:
        os.makedirs(dir_name, exist_ok=True)


def roc_curves_plot(results, out_path='outputs/roc_curves.png', title=None):
    """
    All ROC curves on one axes.

    Parameters
    ----------
    results : dict[str, EvaluationResult]
        Evaluation results keyed by model name.
    out_path : str
        Where to save the PNG.
    title : str or None
        Figure title.
    """
    _ensure_dir(out_path)
    plt.figure(figsize=(6, 5))
    for name, res in results.items():
        if not res.fpr:
            # single-class test set, no curve
            continue
        auc = f" (AUC={res.roc_auc:.3f})" if res.roc_auc is not None else ''
        plt.plot(res.fpr, res.tpr, label=f'{name}{auc}')
    plt.plot([0, 1], [0, 1], linestyle='--', color='grey', linewidth=1)
    plt.xlabel('False positive rate')
    plt.ylabel('True positive rate')
    plt.title(title or 'ROC curves')
    plt.legend(loc='lower right', fontsize=8)
    plt.tight_layout()
    plt.savefig(out_path, dpi=200)
    plt.close()
    return out_path


def confusion_matrix_plot(result, out_path, normalize=False):
    """Heatmap of one model's 2x2 confusion matrix (rows = actual)."""
    _ensure_dir(out_path)
    cm = np.array([[result.tn, result.fp], [result.fn, result.tp]], dtype=float)
    fmt = '.0f'
    if normalize:
        rows = cm.sum(axis=1, keepdims=True)
        cm = np.divide(cm, rows, out=np.zeros_like(cm), where=rows > 0)
        fmt = '.2f'
    plt.figure(figsize=(4, 3.5))
    sns.heatmap(
        cm,
        annot=True,
        fmt=fmt,
        cmap='Blues',
        cbar=False,
        xticklabels=['No stroke', 'Stroke'],
        yticklabels=['No stroke', 'Stroke'],
    )
    plt.xlabel('Predicted')
    plt.ylabel('Actual')
    plt.title(f'Confusion matrix: {result.model}')
    plt.tight_layout()
    plt.savefig(out_path, dpi=200)
    plt.close()
    return out_path
