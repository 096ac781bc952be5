# src/atlas_recipes/steps/base.py
"""
Base comum das variantes embutidas de Step.

Campos compartilhados por todas as variantes:
    - terms: seletores declarados (resolvidos no `estimate`)
    - role: papel atribuído às colunas criadas
    - trained / skip / id
    - columns: colunas resolvidas no treino (estado estimado)

Steps sem `terms` não selecionam nenhuma coluna.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Iterable, List, Optional, Tuple

from atlas_recipes.core.exceptions import ConfigurationError, StepApplicationError, StepEstimationError
from atlas_recipes.core.recipe.selectors import as_selector, select_terms
from atlas_recipes.core.recipe.step import Step, make_step_id
from atlas_recipes.core.recipe.terms import TermInfo
from atlas_recipes.core.recipe.types import ColumnType, StepOperation


@dataclass
class BaseStep(Step):
    """Campos e utilitários comuns das variantes embutidas."""

    terms: Tuple[Any, ...] = ()
    role: Optional[str] = None
    trained: bool = False
    skip: bool = False
    id: str = ""
    columns: Tuple[str, ...] = ()

    operation: ClassVar[StepOperation] = StepOperation.STEP
    type_tag: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self.terms = tuple(self.terms)
        self.columns = tuple(self.columns)
        for name in ("trained", "skip"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigurationError(f"`{name}` must be a boolean", details={"type_tag": self.type_tag})
        if self.role is not None and not isinstance(self.role, str):
            raise ConfigurationError("`role` must be a string or None", details={"type_tag": self.type_tag})
        if not self.id:
            self.id = make_step_id(self.type_tag)

    # ------------------------------------------------------------------
    # Resolução e validação
    # ------------------------------------------------------------------
    def resolve_columns(self, info: TermInfo) -> List[str]:
        if not self.terms:
            return []
        return select_terms(self.terms, info)

    def require_numeric(self, info: TermInfo, columns: Iterable[str]) -> None:
        types = {r.variable: r.type for r in info.first_records()}
        bad = [c for c in columns if types.get(c) != ColumnType.NUMERIC]
        if bad:
            raise StepEstimationError(
                "All columns selected for the step should be numeric",
                details={"columns": bad},
            )

    def require_present(self, table: Any, columns: Iterable[str], *, estimating: bool = False) -> None:
        missing = [c for c in columns if c not in table.columns]
        if missing:
            error_cls = StepEstimationError if estimating else StepApplicationError
            raise error_cls(
                "The following required columns are missing: " + ", ".join(missing),
                details={"columns": missing},
            )

    # ------------------------------------------------------------------
    # Introspecção
    # ------------------------------------------------------------------
    def term_labels(self) -> List[str]:
        return [as_selector(t).describe() for t in self.terms]

    def describe_frame(self, rows: List[Dict[str, Any]], columns: List[str]) -> Any:
        import pandas as pd  # type: ignore

        frame = pd.DataFrame(rows, columns=columns)
        frame["id"] = self.id
        return frame
