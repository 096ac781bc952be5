# src/atlas_recipes/steps/checks/cols.py
"""
Check canônico: check_cols.

Registra no treino as colunas selecionadas e, em toda aplicação, falha
quando alguma delas não está presente na tabela.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, ClassVar

from atlas_recipes.core.exceptions import StepApplicationError
from atlas_recipes.core.recipe.step import CheckStep
from atlas_recipes.core.recipe.terms import TermInfo

from ..base import BaseStep


@dataclass
class CheckCols(CheckStep, BaseStep):
    type_tag: ClassVar[str] = "cols"

    def estimate(self, table: Any, info: TermInfo) -> "CheckCols":
        cols = self.resolve_columns(info)
        return replace(self, columns=tuple(cols), trained=True)

    def verify(self, table: Any) -> None:
        missing = [c for c in self.columns if c not in table.columns]
        if missing:
            raise StepApplicationError(
                "The following required columns are missing from new data: " + ", ".join(missing),
                details={"columns": missing},
            )

    def describe(self) -> Any:
        terms = list(self.columns) if self.trained else self.term_labels()
        return self.describe_frame([{"terms": t} for t in terms], ["terms"])
