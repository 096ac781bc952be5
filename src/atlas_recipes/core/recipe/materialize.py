# src/atlas_recipes/core/recipe/materialize.py
"""
Materialização da saída de uma recipe.

Formatos aceitos (exatamente quatro):
    - "dataframe": pandas DataFrame
    - "matrix": numpy.ndarray denso (float)
    - "sparse": scipy.sparse.csc_matrix (compressed-sparse-column)
    - "records": list[dict], uma entrada por linha

A verificação de colunas não numéricas acontece depois da resolução de
seletores, para que o erro nomeie as colunas ofensoras.
"""

from __future__ import annotations

from typing import Any, List, Sequence

from atlas_recipes.core.exceptions import ConfigurationError, NonNumericColumnError

from .types import ColumnType, infer_column_type

FORMATS = ("dataframe", "matrix", "sparse", "records")


def check_composition(composition: Any) -> str:
    if composition not in FORMATS:
        raise ConfigurationError(
            "`composition` should be one of: " + ", ".join(f"'{f}'" for f in FORMATS),
            details={"received": composition, "accepted": list(FORMATS)},
        )
    return composition


def non_numeric_columns(table: Any) -> List[str]:
    return [str(c) for c in table.columns if infer_column_type(table[c]) != ColumnType.NUMERIC]


def materialize(table: Any, columns: Sequence[str], composition: str = "dataframe") -> Any:
    """
    Seleciona `columns` (na ordem dada) e converte para `composition`.

    Seleção vazia produz uma tabela de zero colunas com o mesmo número de linhas.
    """
    import numpy as np  # type: ignore

    check_composition(composition)
    selected = table.loc[:, list(columns)].copy()

    if composition == "dataframe":
        return selected
    if composition == "records":
        return selected.to_dict(orient="records")

    bad = non_numeric_columns(selected)
    if bad:
        raise NonNumericColumnError(
            f"Columns are not numeric: {', '.join(bad)}",
            details={"columns": bad, "composition": composition},
            hint="Remova ou codifique (ex.: step_dummy) as colunas antes de pedir saída matricial.",
        )

    values = selected.to_numpy(dtype=float, na_value=np.nan)
    if composition == "matrix":
        return values

    from scipy import sparse  # type: ignore

    return sparse.csc_matrix(values)
