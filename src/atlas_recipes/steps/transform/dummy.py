# src/atlas_recipes/steps/transform/dummy.py
"""
Step canônico: step_dummy.

Converte colunas nominais em colunas indicadoras usando
`sklearn.preprocessing.OneHotEncoder` com as categorias fixadas no treino.

Regras:
    - nomes das colunas criadas: `<coluna>_<categoria>`
    - sem `one_hot`, a primeira categoria é a referência (C-1 colunas)
    - colunas originais são removidas; as indicadoras vão para o final
    - categoria desconhecida no replay gera zeros; valor ausente gera NaN
    - colunas criadas recebem `role` do Step (padrão "predictor")
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Dict, List, Optional

from atlas_recipes.core.exceptions import StepEstimationError
from atlas_recipes.core.recipe.levels import get_levels
from atlas_recipes.core.recipe.terms import TermInfo
from atlas_recipes.core.recipe.types import ColumnType

from ..base import BaseStep


@dataclass
class StepDummy(BaseStep):
    one_hot: bool = False
    role: Optional[str] = "predictor"
    levels: Dict[str, List[Any]] = field(default_factory=dict)
    encoder: Optional[Any] = None

    type_tag: ClassVar[str] = "dummy"

    def _dummy_names(self) -> List[str]:
        names: List[str] = []
        for col in self.columns:
            kept = self.levels[col] if self.one_hot else self.levels[col][1:]
            names.extend(f"{col}_{lvl}" for lvl in kept)
        return names

    def estimate(self, table: Any, info: TermInfo) -> "StepDummy":
        from sklearn.preprocessing import OneHotEncoder  # type: ignore

        cols = self.resolve_columns(info)
        self.require_present(table, cols, estimating=True)

        types = {r.variable: r.type for r in info.first_records()}
        bad = [c for c in cols if types.get(c) != ColumnType.NOMINAL]
        if bad:
            raise StepEstimationError(
                "All columns selected for the step should be nominal",
                details={"columns": bad},
            )

        levels = {c: list(get_levels(table[c]) or []) for c in cols}
        empty = [c for c, lv in levels.items() if not lv]
        if empty:
            raise StepEstimationError(
                "Columns without observed categories cannot be encoded: " + ", ".join(empty),
                details={"columns": empty},
            )

        encoder = None
        if cols:
            encoder = OneHotEncoder(
                categories=[levels[c] for c in cols],
                handle_unknown="ignore",
                sparse_output=False,
            ).fit(table[cols].astype(object).to_numpy())

        trained = replace(self, columns=tuple(cols), levels=levels, encoder=encoder, trained=True)
        clashes = [n for n in trained._dummy_names() if n in table.columns and n not in cols]
        if clashes:
            raise StepEstimationError(
                "Dummy column names clash with existing columns: " + ", ".join(clashes),
                details={"columns": clashes},
            )
        return trained

    def apply(self, table: Any) -> Any:
        import numpy as np  # type: ignore
        import pandas as pd  # type: ignore

        if not self.columns:
            return table.copy()
        cols = list(self.columns)
        self.require_present(table, cols)

        full_names = [f"{col}_{lvl}" for col in cols for lvl in self.levels[col]]
        if len(table) == 0:
            encoded = np.empty((0, len(full_names)))
        else:
            encoded = self.encoder.transform(table[cols].astype(object).to_numpy())
        dummies = pd.DataFrame(encoded, columns=full_names, index=table.index, dtype=float)

        for col in cols:
            missing = table[col].isna()
            if missing.any():
                for lvl in self.levels[col]:
                    dummies.loc[missing, f"{col}_{lvl}"] = float("nan")

        out = table.drop(columns=cols)
        return pd.concat([out, dummies[self._dummy_names()]], axis=1)

    def describe(self) -> Any:
        if not self.trained:
            rows = [{"terms": t, "columns": None} for t in self.term_labels()]
        else:
            rows = [
                {"terms": col, "columns": f"{col}_{lvl}"}
                for col in self.columns
                for lvl in (self.levels[col] if self.one_hot else self.levels[col][1:])
            ]
        return self.describe_frame(rows, ["terms", "columns"])
