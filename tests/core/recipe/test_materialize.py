# tests/core/recipe/test_materialize.py
"""
Testes da materialização da saída.

Cobrem os quatro formatos aceitos, a seleção vazia (zero colunas com as
linhas preservadas) e o erro explícito para saída matricial sobre colunas
não numéricas.
"""

import numpy as np
import pandas as pd
import pytest
from scipy import sparse

from atlas_recipes.core.exceptions import ConfigurationError, NonNumericColumnError
from atlas_recipes.core.recipe.materialize import FORMATS, check_composition, materialize


@pytest.fixture
def table():
    return pd.DataFrame({"a": [1.0, 0.0, np.nan], "b": [0, 2, 3], "s": ["x", "y", "z"]})


def test_formats_are_exactly_four():
    assert FORMATS == ("dataframe", "matrix", "sparse", "records")


def test_dataframe_selects_in_given_order(table):
    out = materialize(table, ["b", "a"], "dataframe")
    assert list(out.columns) == ["b", "a"]
    assert out is not table


def test_records(table):
    out = materialize(table, ["b", "s"], "records")
    assert out == [{"b": 0, "s": "x"}, {"b": 2, "s": "y"}, {"b": 3, "s": "z"}]


def test_matrix_is_dense_float(table):
    out = materialize(table, ["a", "b"], "matrix")
    assert isinstance(out, np.ndarray)
    assert out.shape == (3, 2)
    assert np.isnan(out[2, 0])
    assert out[1, 1] == 2.0


def test_sparse_is_compressed_sparse_column(table):
    out = materialize(table, ["a", "b"], "sparse")
    assert sparse.issparse(out)
    assert out.format == "csc"
    assert out.shape == (3, 2)
    assert out[1, 1] == 2.0


@pytest.mark.parametrize("composition", ["matrix", "sparse"])
def test_matrix_forms_reject_non_numeric_columns(table, composition):
    with pytest.raises(NonNumericColumnError) as exc:
        materialize(table, ["a", "s"], composition)
    assert exc.value.details["columns"] == ["s"]


def test_empty_selection_keeps_rows(table):
    out = materialize(table, [], "dataframe")
    assert out.shape == (3, 0)
    assert materialize(table, [], "matrix").shape == (3, 0)


def test_unknown_composition(table):
    with pytest.raises(ConfigurationError) as exc:
        check_composition("tibble")
    assert str(exc.value).startswith("`composition` should be one of:")

    with pytest.raises(ConfigurationError):
        materialize(table, ["a"], "json")
