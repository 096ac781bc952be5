# tests/core/transform/test_column_steps.py
"""Testes dos Steps estruturais (step_rm, step_rename) e de step_dummy."""

import numpy as np
import pandas as pd
import pytest

from atlas_recipes.core.exceptions import ConfigurationError, StepEstimationError
from atlas_recipes.core.recipe.levels import levels_of, strings_to_factors
from atlas_recipes.core.recipe.selectors import all_nominal
from atlas_recipes.core.recipe.terms import TermInfo
from atlas_recipes.steps import StepDummy, StepRename, StepRm


def test_rm_drops_selected_columns(abc_df):
    step = StepRm(terms=("b",)).estimate(abc_df, TermInfo.from_frame(abc_df))

    assert list(step.apply(abc_df).columns) == ["a", "c"]
    assert list(step.apply(abc_df[["a", "c"]]).columns) == ["a", "c"]


def test_rename_maps_old_to_new(abc_df):
    step = StepRename(mapping={"alpha": "a"}).estimate(abc_df, TermInfo.from_frame(abc_df))

    assert list(step.apply(abc_df).columns) == ["alpha", "b", "c"]
    assert step.role == "predictor"


def test_rename_validation(abc_df):
    with pytest.raises(ConfigurationError):
        StepRename(mapping={"x": 1})
    with pytest.raises(ConfigurationError):
        StepRename(mapping={"x": "a", "y": "a"})
    with pytest.raises(StepEstimationError):
        StepRename(mapping={"b": "a"}).estimate(abc_df, TermInfo.from_frame(abc_df))


@pytest.fixture
def factor_df(train_df):
    return strings_to_factors(train_df, levels_of(train_df))


def test_dummy_drops_reference_level(factor_df):
    step = StepDummy(terms=(all_nominal(),)).estimate(factor_df, TermInfo.from_frame(factor_df))

    out = step.apply(factor_df)

    assert list(out.columns) == ["x1", "x2", "y", "color_y"]
    assert list(out["color_y"]) == [0.0, 1.0, 0.0, 1.0]


def test_dummy_one_hot_keeps_all_levels(factor_df):
    step = StepDummy(terms=("color",), one_hot=True).estimate(factor_df, TermInfo.from_frame(factor_df))

    out = step.apply(factor_df)

    assert list(out.columns)[-2:] == ["color_x", "color_y"]
    assert (out["color_x"] + out["color_y"]).eq(1.0).all()


def test_dummy_missing_and_unknown_values(factor_df):
    step = StepDummy(terms=("color",), one_hot=True).estimate(factor_df, TermInfo.from_frame(factor_df))
    new = pd.DataFrame({"x1": [1.0, 2.0], "x2": [1.0, 2.0], "color": ["z", None], "y": [0, 1]})

    out = step.apply(new)

    assert list(out.loc[0, ["color_x", "color_y"]]) == [0.0, 0.0]
    assert np.isnan(out.loc[1, "color_x"])
    assert np.isnan(out.loc[1, "color_y"])


def test_dummy_requires_nominal(factor_df):
    with pytest.raises(StepEstimationError):
        StepDummy(terms=("x1",)).estimate(factor_df, TermInfo.from_frame(factor_df))


def test_dummy_accepts_zero_row_table(factor_df):
    step = StepDummy(terms=("color",)).estimate(factor_df, TermInfo.from_frame(factor_df))

    out = step.apply(factor_df.iloc[:0])

    assert len(out) == 0
    assert list(out.columns) == ["x1", "x2", "y", "color_y"]
    assert out["color_y"].dtype == float
