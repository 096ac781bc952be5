# src/atlas_recipes/steps/transform/impute.py
"""
Steps de imputação de valores ausentes.

Estratégias suportadas:
    - step_impute_mean / step_impute_median: colunas numéricas
      (`sklearn.impute.SimpleImputer`)
    - step_impute_mode: qualquer coluna (valor mais frequente do treino)

Princípios:
    - Nada implícito: só atua nas colunas resolvidas pelos `terms`
    - Coluna sem nenhum valor observado no treino é erro explícito
    - O valor de preenchimento é fixado no treino e reaplicado no replay
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Dict, List

from atlas_recipes.core.exceptions import StepEstimationError
from atlas_recipes.core.recipe.terms import TermInfo

from ..base import BaseStep


def _require_observed(table: Any, cols: List[str]) -> None:
    empty = [c for c in cols if int(table[c].notna().sum()) == 0]
    if empty:
        raise StepEstimationError(
            "Cannot impute columns without observed values: " + ", ".join(empty),
            details={"columns": empty},
        )


@dataclass
class _SimpleImputeStep(BaseStep):
    values: Dict[str, Any] = field(default_factory=dict)

    strategy: ClassVar[str] = ""

    def estimate(self, table: Any, info: TermInfo) -> Any:
        from sklearn.impute import SimpleImputer  # type: ignore

        cols = self.resolve_columns(info)
        self.require_present(table, cols, estimating=True)
        self.require_numeric(info, cols)
        _require_observed(table, cols)

        values: Dict[str, Any] = {}
        if cols:
            imputer = SimpleImputer(strategy=self.strategy).fit(table[cols].to_numpy(dtype=float))
            values = {c: float(v) for c, v in zip(cols, imputer.statistics_)}
        return replace(self, columns=tuple(cols), values=values, trained=True)

    def apply(self, table: Any) -> Any:
        self.require_present(table, self.values)
        out = table.copy()
        for col, value in self.values.items():
            out[col] = out[col].fillna(value)
        return out

    def describe(self) -> Any:
        if not self.trained:
            rows = [{"terms": t, "value": float("nan")} for t in self.term_labels()]
        else:
            rows = [{"terms": c, "value": v} for c, v in self.values.items()]
        return self.describe_frame(rows, ["terms", "value"])


@dataclass
class StepImputeMean(_SimpleImputeStep):
    type_tag: ClassVar[str] = "impute_mean"
    strategy: ClassVar[str] = "mean"


@dataclass
class StepImputeMedian(_SimpleImputeStep):
    type_tag: ClassVar[str] = "impute_median"
    strategy: ClassVar[str] = "median"


@dataclass
class StepImputeMode(BaseStep):
    """Preenche ausentes com o valor mais frequente do treino (empate: menor valor)."""

    modes: Dict[str, Any] = field(default_factory=dict)

    type_tag: ClassVar[str] = "impute_mode"

    def estimate(self, table: Any, info: TermInfo) -> "StepImputeMode":
        cols = self.resolve_columns(info)
        self.require_present(table, cols, estimating=True)
        _require_observed(table, cols)
        modes = {c: table[c].mode(dropna=True).iloc[0] for c in cols}
        return replace(self, columns=tuple(cols), modes=modes, trained=True)

    def apply(self, table: Any) -> Any:
        self.require_present(table, self.modes)
        out = table.copy()
        for col, mode in self.modes.items():
            out[col] = out[col].fillna(mode)
        return out

    def describe(self) -> Any:
        if not self.trained:
            rows = [{"terms": t, "value": None} for t in self.term_labels()]
        else:
            rows = [{"terms": c, "value": v} for c, v in self.modes.items()]
        return self.describe_frame(rows, ["terms", "value"])
