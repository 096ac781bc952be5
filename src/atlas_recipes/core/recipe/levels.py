# src/atlas_recipes/core/recipe/levels.py
"""
Controle de categorias (levels) de colunas nominais.

Colunas textuais convertidas em categóricas no treino precisam receber
exatamente o mesmo conjunto de categorias em toda aplicação posterior.
Categorias novas seguem uma política explícita:

    - "error": levanta `UnseenCategoryError` com coluna e valores
    - "missing": o valor vira NaN, mantendo o tipo categórico do treino

Limites explícitos:
    - Colunas numéricas, booleanas e de datas não possuem levels
    - Não reordena nem renomeia categorias
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from atlas_recipes.core.config.options import UNSEEN_POLICIES
from atlas_recipes.core.exceptions import ConfigurationError, UnseenCategoryError


def _is_nominal_text(series: Any) -> bool:
    import pandas as pd  # type: ignore
    from pandas.api.types import is_bool_dtype, is_object_dtype, is_string_dtype  # type: ignore

    dtype = series.dtype
    if isinstance(dtype, pd.CategoricalDtype):
        return True
    if is_bool_dtype(dtype):
        return False
    return bool(is_object_dtype(dtype) or is_string_dtype(dtype))


def get_levels(series: Any) -> Optional[List[Any]]:
    """Categorias ordenadas de uma coluna nominal; None para as demais."""
    import pandas as pd  # type: ignore

    if isinstance(series.dtype, pd.CategoricalDtype):
        return list(series.cat.categories)
    if not _is_nominal_text(series):
        return None
    return sorted(pd.unique(series.dropna()), key=str)


def levels_of(table: Any) -> Dict[str, Optional[List[Any]]]:
    return {str(col): get_levels(table[col]) for col in table.columns}


def strings_to_factors(
    table: Any,
    levels: Dict[str, Optional[List[Any]]],
    policy: str = "error",
) -> Any:
    """
    Reaplica os conjuntos de categorias capturados no treino.

    Args:
        table: pandas DataFrame (não é mutado).
        levels: Categorias por coluna (None = coluna sem levels).
        policy: "error" ou "missing".

    Returns:
        pd.DataFrame: cópia com as colunas nominais como `CategoricalDtype`.
    """
    import pandas as pd  # type: ignore

    if policy not in UNSEEN_POLICIES:
        raise ConfigurationError(
            f"Invalid unseen category policy: {policy!r}",
            details={"accepted": list(UNSEEN_POLICIES)},
        )

    out = table.copy()
    for col, cats in levels.items():
        if cats is None or col not in out.columns:
            continue
        series = out[col]
        if not _is_nominal_text(series):
            continue

        known = set(cats)
        unseen = [v for v in pd.unique(series.dropna()) if v not in known]
        if unseen and policy == "error":
            raise UnseenCategoryError(
                f"Column '{col}' contains categories not seen at training time",
                details={"column": col, "values": sorted((str(v) for v in unseen))},
                hint="Use unseen_categories='missing' para mapear categorias novas para NaN.",
            )

        out[col] = pd.Categorical(series, categories=cats)
    return out


def train_info(table: Any) -> Dict[str, int]:
    """Resumo do conjunto de treino: linhas totais e linhas completas."""
    return {
        "nrows": int(len(table)),
        "ncomplete": int(table.notna().all(axis=1).sum()),
    }
