# tests/core/transform/test_impute_steps.py
"""Testes dos Steps de imputação (mean, median, mode)."""

import numpy as np
import pandas as pd
import pytest

from atlas_recipes.core.exceptions import StepEstimationError
from atlas_recipes.core.recipe.terms import TermInfo
from atlas_recipes.steps import StepImputeMean, StepImputeMedian, StepImputeMode


@pytest.fixture
def gappy_df():
    return pd.DataFrame(
        {
            "a": [1.0, np.nan, 3.0, 10.0],
            "s": ["u", None, "v", "u"],
            "empty": [np.nan, np.nan, np.nan, np.nan],
        }
    )


def test_impute_mean_fills_with_training_mean(gappy_df):
    step = StepImputeMean(terms=("a",)).estimate(gappy_df, TermInfo.from_frame(gappy_df))

    assert step.values == {"a": pytest.approx(14.0 / 3.0)}
    out = step.apply(pd.DataFrame({"a": [np.nan, 2.0]}))
    assert out["a"].iloc[0] == pytest.approx(14.0 / 3.0)
    assert out["a"].iloc[1] == 2.0


def test_impute_median_uses_training_median(gappy_df):
    step = StepImputeMedian(terms=("a",)).estimate(gappy_df, TermInfo.from_frame(gappy_df))

    out = step.apply(gappy_df)

    assert out["a"].iloc[1] == 3.0
    assert gappy_df["a"].isna().sum() == 1


def test_impute_mode_works_for_nominal_columns(gappy_df):
    step = StepImputeMode(terms=("s",)).estimate(gappy_df, TermInfo.from_frame(gappy_df))

    out = step.apply(gappy_df)

    assert step.modes == {"s": "u"}
    assert list(out["s"]) == ["u", "u", "v", "u"]


def test_column_without_observed_values_is_rejected(gappy_df):
    info = TermInfo.from_frame(gappy_df)
    with pytest.raises(StepEstimationError) as exc:
        StepImputeMean(terms=("empty",)).estimate(gappy_df, info)
    assert exc.value.details["columns"] == ["empty"]

    with pytest.raises(StepEstimationError):
        StepImputeMode(terms=("empty",)).estimate(gappy_df, info)


def test_impute_mean_requires_numeric(gappy_df):
    with pytest.raises(StepEstimationError):
        StepImputeMean(terms=("s",)).estimate(gappy_df, TermInfo.from_frame(gappy_df))
