# tests/core/recipe/test_recipe_apply.py
"""
Testes do `apply()` / `juice()` da Recipe.

Cenários cobertos:
- replay determinístico sobre dados novos (idempotência, entrada intacta)
- Steps `skip=True`: refletidos na tabela retida, ausentes no replay
- seleção de colunas e formatos de saída
- política para categorias não vistas no treino
- recipe não treinada ou tabela não retida
- tabela nova sem linhas
"""

from dataclasses import dataclass, replace
from typing import ClassVar

import numpy as np
import pandas as pd
import pytest

from atlas_recipes import Recipe, RecipeOptions, all_numeric, all_outcomes, all_predictors, minus, starts_with
from atlas_recipes.core.exceptions import (
    NonNumericColumnError,
    StepApplicationError,
    UnpreparedPipelineError,
    UnseenCategoryError,
)
from atlas_recipes.steps import CheckCols, CheckMissing, StepDummy, StepRename, StepRm
from atlas_recipes.steps.base import BaseStep


def test_apply_replays_trained_steps_on_new_data(train_df, new_df):
    rec = Recipe.from_outcomes(train_df, "y").step("center", "x1", "x2").prepare()

    out = rec.apply(new_df)

    assert list(out["x1"]) == [2.5, 3.5]
    assert list(out["x2"]) == [25.0, 35.0]
    assert list(out.columns) == ["x1", "x2", "color", "y"]


def test_apply_is_idempotent_and_does_not_mutate_input(train_df, new_df):
    rec = Recipe.from_outcomes(train_df, "y").step("center", "x1").prepare()
    snapshot = new_df.copy()

    first = rec.apply(new_df)
    second = rec.apply(new_df)

    pd.testing.assert_frame_equal(first, second)
    pd.testing.assert_frame_equal(new_df, snapshot)


def test_apply_accepts_list_of_dict_rows(train_df):
    rec = Recipe.from_outcomes(train_df, "y").step("center", "x1").prepare()

    out = rec.apply([{"x1": 2.5, "x2": 1.0, "color": "x", "y": 0}])

    assert list(out["x1"]) == [0.0]


def test_apply_before_prepare_raises(train_df, new_df):
    rec = Recipe.from_outcomes(train_df, "y").step("center", "x1")

    with pytest.raises(UnpreparedPipelineError) as exc:
        rec.apply(new_df)

    assert str(exc.value) == "At least one step has not been trained. Please run `prepare()`."


def test_juice_requires_retained_table(train_df):
    rec = Recipe.from_outcomes(train_df, "y").step("center", "x1").prepare(retain=False)

    with pytest.raises(UnpreparedPipelineError):
        rec.juice()


def test_skipped_step_is_visible_only_in_retained_table(abc_df):
    rec = Recipe(abc_df).add_step(StepRm(terms=("b",), skip=True)).prepare()

    assert set(rec.juice().columns) == {"a", "c"}
    assert set(rec.apply(abc_df).columns) == {"a", "b", "c"}


def test_skipped_step_columns_stay_selectable_on_replay(abc_df):
    rec = Recipe(abc_df).add_step(StepRm(terms=("b",), skip=True)).prepare()

    out = rec.apply(abc_df, "b")

    assert list(out.columns) == ["b"]
    assert list(out["b"]) == [4, 5, 6]


def test_skipped_rename_replays_with_original_names(abc_df):
    rec = Recipe(abc_df).add_step(StepRename(mapping={"alpha": "a"}, skip=True)).prepare()

    assert list(rec.juice().columns) == ["b", "c", "alpha"]
    assert set(rec.apply(abc_df).columns) == {"a", "b", "c"}


def test_selectors_filter_output(train_df, new_df):
    rec = Recipe.from_outcomes(train_df, "y").prepare()

    assert list(rec.juice(all_predictors()).columns) == ["x1", "x2", "color"]
    assert list(rec.apply(new_df, all_outcomes()).columns) == ["y"]
    assert list(rec.apply(new_df, "y", "x1").columns) == ["x1", "y"]


def test_empty_selection_returns_zero_columns(train_df, new_df):
    rec = Recipe.from_outcomes(train_df, "y").prepare()

    out = rec.apply(new_df, starts_with("zzz"))

    assert out.shape == (2, 0)


def test_matrix_output_requires_numeric_columns(train_df, new_df):
    rec = Recipe.from_outcomes(train_df, "y").add_step(StepDummy(terms=("color",))).prepare()

    out = rec.apply(new_df, composition="matrix")
    assert isinstance(out, np.ndarray)
    assert out.shape == (2, 4)

    plain = Recipe.from_outcomes(train_df, "y").prepare()
    with pytest.raises(NonNumericColumnError) as exc:
        plain.juice(composition="sparse")
    assert exc.value.details["columns"] == ["color"]


def test_composition_from_options(train_df):
    rec = Recipe.from_outcomes(train_df, "y", options=RecipeOptions(composition="records")).prepare()

    rows = rec.juice("x1")

    assert rows[0] == {"x1": 1.0}
    assert len(rows) == 4


def test_unseen_category_under_error_policy(train_df):
    rec = Recipe.from_outcomes(train_df, "y").prepare()
    new = pd.DataFrame({"x1": [1.0], "x2": [1.0], "color": ["z"], "y": [0]})

    with pytest.raises(UnseenCategoryError) as exc:
        rec.apply(new)

    assert exc.value.details["column"] == "color"
    assert exc.value.details["values"] == ["z"]


def test_unseen_category_under_missing_policy(train_df):
    rec = Recipe.from_outcomes(train_df, "y", options=RecipeOptions(unseen_categories="missing")).prepare()
    new = pd.DataFrame({"x1": [1.0, 2.0], "x2": [1.0, 2.0], "color": ["z", "x"], "y": [0, 1]})

    out = rec.apply(new)

    assert pd.isna(out["color"].iloc[0])
    assert out["color"].iloc[1] == "x"
    assert list(out["color"].cat.categories) == ["x", "y"]


def test_replay_failure_carries_step_identity(train_df):
    rec = Recipe.from_outcomes(train_df, "y").step("center", "x1", id="center_x1").prepare()

    with pytest.raises(StepApplicationError) as exc:
        rec.apply(train_df.drop(columns=["x1"]))

    assert exc.value.details["number"] == 1
    assert exc.value.details["id"] == "center_x1"
    assert exc.value.details["type"] == "step_center"


def test_checks_validate_new_data(train_df, new_df):
    rec = Recipe.from_outcomes(train_df, "y")
    rec.add_check(CheckCols(terms=("x1", "x2"))).add_check(CheckMissing(terms=("x1",)))
    rec.prepare()

    pd.testing.assert_frame_equal(rec.apply(new_df), rec.apply(new_df))

    with pytest.raises(StepApplicationError) as exc:
        rec.apply(new_df.assign(x1=[np.nan, 1.0]))
    assert exc.value.details["columns"] == ["x1"]
    assert exc.value.details["type"] == "check_missing"

    with pytest.raises(StepApplicationError) as exc:
        rec.apply(new_df.drop(columns=["x2"]))
    assert exc.value.details["type"] == "check_cols"


def test_negated_selector_inside_step_terms(train_df):
    rec = Recipe.from_outcomes(train_df, "y").step("center", all_numeric() & minus("y")).prepare()

    out = rec.juice()

    assert rec.steps[0].columns == ("x1", "x2")
    assert list(out["y"]) == [0, 1, 0, 1]
    assert list(out["x1"]) == [-1.5, -0.5, 0.5, 1.5]


def test_zero_row_table_keeps_output_shape(train_df, new_df):
    rec = Recipe.from_outcomes(train_df, "y").step("normalize", "x1", "x2").step("dummy", "color").prepare()

    out = rec.apply(new_df.iloc[:0])

    assert len(out) == 0
    assert list(out.columns) == ["x1", "x2", "y", "color_y"]


@dataclass
class StepSizeLabel(BaseStep):
    type_tag: ClassVar[str] = "size_label"

    def estimate(self, table, info):
        return replace(self, trained=True)

    def apply(self, table):
        return table.assign(size=["small" if v < 3 else "big" for v in table["x1"]])


def test_retained_and_replayed_tables_share_category_sets(train_df, new_df):
    rec = Recipe.from_outcomes(train_df, "y").add_step(StepSizeLabel(id="size")).prepare()

    juiced = rec.juice()["size"]
    applied = rec.apply(new_df)["size"]

    assert isinstance(juiced.dtype, pd.CategoricalDtype)
    assert list(juiced.cat.categories) == ["big", "small"]
    assert juiced.dtype == applied.dtype
