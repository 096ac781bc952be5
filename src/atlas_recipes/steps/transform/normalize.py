# src/atlas_recipes/steps/transform/normalize.py
"""
Steps de padronização numérica: center, scale e normalize.

    - step_center: subtrai a média de treino
    - step_scale: divide pelo desvio padrão de treino (multiplicado por `factor`)
    - step_normalize: centraliza e escala com `sklearn.preprocessing.StandardScaler`

Todos exigem colunas numéricas no `estimate` (StepEstimationError caso contrário).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Dict, Optional

from atlas_recipes.core.exceptions import ConfigurationError
from atlas_recipes.core.recipe.step import Tune
from atlas_recipes.core.recipe.terms import TermInfo

from ..base import BaseStep


@dataclass
class StepCenter(BaseStep):
    """Centraliza colunas numéricas (média zero no treino)."""

    means: Dict[str, float] = field(default_factory=dict)

    type_tag: ClassVar[str] = "center"

    def estimate(self, table: Any, info: TermInfo) -> "StepCenter":
        cols = self.resolve_columns(info)
        self.require_present(table, cols, estimating=True)
        self.require_numeric(info, cols)
        means = {c: float(table[c].mean()) for c in cols}
        return replace(self, columns=tuple(cols), means=means, trained=True)

    def apply(self, table: Any) -> Any:
        self.require_present(table, self.means)
        out = table.copy()
        for col, mean in self.means.items():
            out[col] = out[col] - mean
        return out

    def describe(self) -> Any:
        if not self.trained:
            rows = [{"terms": t, "value": float("nan")} for t in self.term_labels()]
        else:
            rows = [{"terms": c, "value": v} for c, v in self.means.items()]
        return self.describe_frame(rows, ["terms", "value"])


@dataclass
class StepScale(BaseStep):
    """Escala colunas numéricas pelo desvio padrão de treino; `factor=2` divide por dois desvios."""

    factor: Any = 1
    sds: Dict[str, float] = field(default_factory=dict)

    type_tag: ClassVar[str] = "scale"

    def __post_init__(self) -> None:
        super().__post_init__()
        if not isinstance(self.factor, Tune) and self.factor not in (1, 2):
            raise ConfigurationError("`factor` should be either 1 or 2", details={"factor": self.factor})

    def estimate(self, table: Any, info: TermInfo) -> "StepScale":
        cols = self.resolve_columns(info)
        self.require_present(table, cols, estimating=True)
        self.require_numeric(info, cols)
        sds = {c: float(table[c].std()) * self.factor for c in cols}
        return replace(self, columns=tuple(cols), sds=sds, trained=True)

    def apply(self, table: Any) -> Any:
        self.require_present(table, self.sds)
        out = table.copy()
        for col, sd in self.sds.items():
            out[col] = out[col] / sd
        return out

    def describe(self) -> Any:
        if not self.trained:
            rows = [{"terms": t, "value": float("nan")} for t in self.term_labels()]
        else:
            rows = [{"terms": c, "value": v} for c, v in self.sds.items()]
        return self.describe_frame(rows, ["terms", "value"])


@dataclass
class StepNormalize(BaseStep):
    """Centraliza e escala em um único Step (StandardScaler)."""

    scaler: Optional[Any] = None

    type_tag: ClassVar[str] = "normalize"

    def estimate(self, table: Any, info: TermInfo) -> "StepNormalize":
        from sklearn.preprocessing import StandardScaler  # type: ignore

        cols = self.resolve_columns(info)
        self.require_present(table, cols, estimating=True)
        self.require_numeric(info, cols)
        scaler = None
        if cols:
            scaler = StandardScaler().fit(table[cols].to_numpy(dtype=float))
        return replace(self, columns=tuple(cols), scaler=scaler, trained=True)

    def apply(self, table: Any) -> Any:
        out = table.copy()
        if not self.columns:
            return out
        cols = list(self.columns)
        self.require_present(table, cols)
        if len(table) == 0:
            return out.astype({c: float for c in cols})
        out[cols] = self.scaler.transform(table[cols].to_numpy(dtype=float))
        return out

    def describe(self) -> Any:
        if not self.trained:
            rows = [
                {"terms": t, "statistic": stat, "value": float("nan")}
                for t in self.term_labels()
                for stat in ("mean", "sd")
            ]
        else:
            rows = []
            for i, col in enumerate(self.columns):
                rows.append({"terms": col, "statistic": "mean", "value": float(self.scaler.mean_[i])})
                rows.append({"terms": col, "statistic": "sd", "value": float(self.scaler.scale_[i])})
        return self.describe_frame(rows, ["terms", "statistic", "value"])
