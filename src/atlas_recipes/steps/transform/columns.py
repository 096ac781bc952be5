# src/atlas_recipes/steps/transform/columns.py
"""
Steps estruturais: remoção (step_rm) e renomeação (step_rename) de colunas.

Estes Steps alteram o conjunto de colunas e por isso são os casos que
exercitam a visão historical de metadados quando marcados com `skip=True`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Dict, Optional

from atlas_recipes.core.exceptions import ConfigurationError, StepEstimationError
from atlas_recipes.core.recipe.terms import TermInfo

from ..base import BaseStep


@dataclass
class StepRm(BaseStep):
    """Remove as colunas selecionadas. Colunas já ausentes no replay são ignoradas."""

    type_tag: ClassVar[str] = "rm"

    def estimate(self, table: Any, info: TermInfo) -> "StepRm":
        cols = self.resolve_columns(info)
        return replace(self, columns=tuple(cols), trained=True)

    def apply(self, table: Any) -> Any:
        return table.drop(columns=[c for c in self.columns if c in table.columns])

    def describe(self) -> Any:
        terms = list(self.columns) if self.trained else self.term_labels()
        return self.describe_frame([{"terms": t} for t in terms], ["terms"])


@dataclass
class StepRename(BaseStep):
    """
    Renomeia colunas a partir de um mapeamento `{novo_nome: nome_atual}`.

    Colunas renomeadas são colunas novas para a tabela de metadados:
    recebem o `role` do Step (padrão "predictor") e origem "derived".
    """

    mapping: Dict[str, str] = field(default_factory=dict)
    role: Optional[str] = "predictor"

    type_tag: ClassVar[str] = "rename"

    def __post_init__(self) -> None:
        super().__post_init__()
        if not isinstance(self.mapping, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in self.mapping.items()
        ):
            raise ConfigurationError(
                "`mapping` must be a dict of {new_name: old_name} strings",
                details={"received": repr(self.mapping)},
            )
        olds = list(self.mapping.values())
        if len(set(olds)) != len(olds):
            raise ConfigurationError("A column can only be renamed once", details={"mapping": dict(self.mapping)})

    def estimate(self, table: Any, info: TermInfo) -> "StepRename":
        olds = list(self.mapping.values())
        self.require_present(table, olds, estimating=True)

        remaining = [c for c in table.columns if c not in olds]
        clashes = sorted(n for n in self.mapping if n in remaining)
        if clashes:
            raise StepEstimationError(
                "New names clash with existing columns: " + ", ".join(clashes),
                details={"columns": clashes},
            )
        return replace(self, columns=tuple(olds), trained=True)

    def apply(self, table: Any) -> Any:
        self.require_present(table, self.mapping.values())
        return table.rename(columns={old: new for new, old in self.mapping.items()})

    def describe(self) -> Any:
        rows = [{"terms": old, "value": new} for new, old in self.mapping.items()]
        return self.describe_frame(rows, ["terms", "value"])
