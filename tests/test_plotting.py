import pandas as pd
import pytest

from strokeml.evaluate import EvaluationResult
from strokeml.feature_importance import plot_feature_importance_barplot
from strokeml.plotting import confusion_matrix_plot, roc_curves_plot
from strokeml.plotting_seaborn import correlation_heatmap, distribution_by_target, target_rate_by_category
from strokeml.preprocess import clean_bmi


@pytest.fixture
def results():
    return {
        "logistic_regression": EvaluationResult(
            model="logistic_regression", tn=5, fp=1, fn=1, tp=3, roc_auc=0.8,
            fpr=[0.0, 0.2, 1.0], tpr=[0.0, 0.75, 1.0], thresholds=[2.0, 0.5, 0.1],
        ),
        "svm": EvaluationResult(model="svm", tn=6, fp=0, fn=4, tp=0),
    }


def test_roc_plot_skips_models_without_curve(results, tmp_path):
    out = roc_curves_plot(results, out_path=str(tmp_path / "figs" / "roc.png"))
    assert (tmp_path / "figs" / "roc.png").exists()
    assert out.endswith("roc.png")


@pytest.mark.parametrize("normalize", [False, True])
def test_confusion_plot(results, tmp_path, normalize):
    confusion_matrix_plot(results["svm"], str(tmp_path / "cm.png"), normalize=normalize)
    assert (tmp_path / "cm.png").exists()


def test_importance_barplot_rejects_empty(tmp_path):
    with pytest.raises(ValueError):
        plot_feature_importance_barplot(pd.DataFrame(columns=["feature", "importance"]), tmp_path / "x.png")


def test_eda_plots(stroke_df, tmp_path):
    clean_bmi(stroke_df)
    assert distribution_by_target(stroke_df, ["age", "bmi"], tmp_path / "v.png", plot_type="box").exists()
    assert correlation_heatmap(stroke_df, ["age", "bmi", "avg_glucose_level"], tmp_path / "c.png").exists()
    assert target_rate_by_category(stroke_df, ["gender", "work_type", "smoking_status"], tmp_path / "r.png").exists()


def test_eda_plots_reject_unknown_features(stroke_df, tmp_path):
    with pytest.raises(ValueError):
        distribution_by_target(stroke_df, ["height"], tmp_path / "v.png")
    with pytest.raises(ValueError):
        distribution_by_target(stroke_df, ["age"], tmp_path / "v.png", plot_type="swarm")
