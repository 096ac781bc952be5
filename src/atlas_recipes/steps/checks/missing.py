# src/atlas_recipes/steps/checks/missing.py
"""Check canônico: check_missing (falha quando colunas selecionadas têm ausentes)."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, ClassVar

from atlas_recipes.core.exceptions import StepApplicationError
from atlas_recipes.core.recipe.step import CheckStep
from atlas_recipes.core.recipe.terms import TermInfo

from ..base import BaseStep


@dataclass
class CheckMissing(CheckStep, BaseStep):
    type_tag: ClassVar[str] = "missing"

    def estimate(self, table: Any, info: TermInfo) -> "CheckMissing":
        cols = self.resolve_columns(info)
        self.require_present(table, cols, estimating=True)
        return replace(self, columns=tuple(cols), trained=True)

    def verify(self, table: Any) -> None:
        cols = [c for c in self.columns if c in table.columns]
        with_missing = [c for c in cols if bool(table[c].isna().any())]
        if with_missing:
            raise StepApplicationError(
                "The following columns contain missing values: " + ", ".join(with_missing),
                details={"columns": with_missing},
            )

    def describe(self) -> Any:
        terms = list(self.columns) if self.trained else self.term_labels()
        return self.describe_frame([{"terms": t} for t in terms], ["terms"])
