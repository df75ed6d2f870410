from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from strokeml.io_utils import load_model, save_model
from strokeml.pipeline import predict_frame, run_pipeline

from conftest import make_stroke_frame


def test_tiny_end_to_end(tiny_df, cfg):
    res = run_pipeline(cfg, df=tiny_df, names=("logistic_regression", "random_forest"))

    assert res.bmi_report.invalid_values == ["N/A"]
    assert res.df.loc[2, "bmi"] == pytest.approx(res.bmi_report.median)
    assert res.bmi_report.median == pytest.approx(27.3)
    assert res.df["bmi"].notna().all()

    assert len(res.split.train_index) == 7
    assert len(res.split.test_index) == 3
    for result in res.results.values():
        assert result.tn + result.fp + result.fn + result.tp == 3
        assert result.tp + result.fn == 1

    assert res.model_path is not None and Path(res.model_path).exists()


def test_full_pipeline_persists_random_forest(stroke_df, cfg):
    res = run_pipeline(cfg, df=stroke_df)
    assert set(res.results) == {"logistic_regression", "random_forest", "svm"}

    n_pos = int(stroke_df.loc[res.split.test_index, "stroke"].sum())
    n_test = len(res.split.test_index)
    for result in res.results.values():
        assert result.tp + result.fn == n_pos
        assert result.tn + result.fp == n_test - n_pos
        assert result.roc_auc is not None

    loaded = load_model(cfg.model_path)
    X = stroke_df.loc[res.split.test_index, cfg.feature_columns]
    np.testing.assert_allclose(loaded.predict_proba(X), res.models["random_forest"].predict_proba(X))


def test_persist_overwrites_existing_file(tmp_path):
    path = tmp_path / "m.joblib"
    path.write_bytes(b"stale")
    save_model({"a": 1}, path)
    assert load_model(path) == {"a": 1}


def test_load_model_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_model(tmp_path / "absent.joblib")


def test_run_without_persist(stroke_df, cfg):
    res = run_pipeline(cfg, df=stroke_df, names=("random_forest",), persist=False)
    assert res.model_path is None
    assert not Path(cfg.model_path).exists()


def test_predict_frame_scores_new_records(stroke_df, cfg):
    res = run_pipeline(cfg, df=stroke_df, names=("random_forest",))
    new = make_stroke_frame(n=25, seed=3).drop(columns=["stroke"])
    before = new["bmi"].copy()
    scored = predict_frame(res.models["random_forest"], new, cfg)

    assert len(scored) == 25
    assert scored["stroke_probability"].between(0, 1).all()
    assert set(scored["stroke_pred"].unique()) <= {0, 1}
    assert scored["bmi"].dtype == float
    # input frame is left untouched
    pd.testing.assert_series_equal(new["bmi"], before)


def test_predict_frame_single_missing_bmi_row(stroke_df, cfg):
    res = run_pipeline(cfg, df=stroke_df, names=("random_forest",), persist=False)
    row = make_stroke_frame(n=5, seed=4).drop(columns=["stroke"]).iloc[[0]].copy()
    row["bmi"] = "N/A"
    scored = predict_frame(res.models["random_forest"], row, cfg)

    assert len(scored) == 1
    assert 0 <= scored["stroke_probability"].iloc[0] <= 1
    assert scored["bmi"].isna().all()


def test_predict_frame_scores_do_not_depend_on_batch(stroke_df, cfg):
    res = run_pipeline(cfg, df=stroke_df, names=("random_forest",), persist=False)
    model = res.models["random_forest"]
    batch = make_stroke_frame(n=40, seed=5).drop(columns=["stroke"])
    batch.loc[0, "bmi"] = "N/A"

    alone = predict_frame(model, batch.iloc[[0]], cfg)
    together = predict_frame(model, batch, cfg)
    assert alone["stroke_probability"].iloc[0] == pytest.approx(together["stroke_probability"].iloc[0])
    assert alone["stroke_pred"].iloc[0] == together["stroke_pred"].iloc[0]


def test_predict_frame_requires_feature_columns(stroke_df, cfg):
    res = run_pipeline(cfg, df=stroke_df, names=("random_forest",), persist=False)
    with pytest.raises(ValueError):
        predict_frame(res.models["random_forest"], stroke_df.drop(columns=["age"]), cfg)
