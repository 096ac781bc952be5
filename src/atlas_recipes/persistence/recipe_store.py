"""Persistência canônica de uma recipe (v1).

Uma recipe treinada deve ser persistida de forma **explícita** e
**rastreável**, garantindo:

- reprodutibilidade entre execuções
- consistência entre treino e aplicação (mesmos Steps, levels e metadados)
- round-trip load sem alteração de comportamento

Decisões (v1):
- Formato: joblib sobre `Recipe.to_state()` (dict com o estado persistível)
- Caminho determinístico (relativo ao run_dir): artifacts/recipe.joblib
- Metadata registrada no Event Log da recipe (evento `artifact_saved`)

Limites explícitos:
- Não retreina a recipe no load
- Não persiste os dados de declaração (apenas a tabela retida, se houver)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from atlas_recipes.core.config.hashing import compute_config_hash
from atlas_recipes.core.recipe.recipe import Recipe
from atlas_recipes.core.recipe.registry import StepRegistry

try:
    import joblib  # type: ignore
except Exception as e:  # pragma: no cover
    joblib = None  # type: ignore
    _JOBLIB_IMPORT_ERROR = e
else:
    _JOBLIB_IMPORT_ERROR = None


@dataclass(frozen=True)
class RecipeArtifactMeta:
    """Metadata mínima (v1) para rastrear uma recipe persistida."""

    recipe_id: str
    fully_trained: bool
    options_hash: str
    type: str = "recipe"
    format: str = "joblib"
    path: str = "artifacts/recipe.joblib"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "format": self.format,
            "path": self.path,
            "recipe_id": self.recipe_id,
            "fully_trained": self.fully_trained,
            "options_hash": self.options_hash,
        }


class RecipeStore:
    """Store canônica (v1) para persistência e load de recipes."""

    def __init__(self, *, run_dir: Union[str, Path]):
        self.run_dir = Path(run_dir)

    def artifact_path(self) -> Path:
        return self.run_dir / "artifacts" / "recipe.joblib"

    def artifact_rel_path(self) -> str:
        return "artifacts/recipe.joblib"

    def save(self, recipe: Recipe) -> Dict[str, Any]:
        """Salva o estado da recipe em joblib e registra `artifact_saved` no log.

        Returns:
            Dict[str, Any]: metadata do artefato (serializável).
        """
        if joblib is None:  # pragma: no cover
            raise RuntimeError("joblib is required for recipe persistence") from _JOBLIB_IMPORT_ERROR

        path = self.artifact_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        joblib.dump(recipe.to_state(), path)

        meta = RecipeArtifactMeta(
            recipe_id=recipe.recipe_id,
            fully_trained=recipe.fully_trained,
            options_hash=compute_config_hash(recipe.options.to_dict()),
            path=self.artifact_rel_path(),
        ).to_dict()

        recipe.log.log(
            step_id=None,
            level="info",
            message="artifact saved",
            event_type="artifact_saved",
            artifact=dict(meta),
        )
        return meta

    def load(self, registry: Optional[StepRegistry] = None) -> Recipe:
        """Carrega a recipe persistida sem retreinar."""
        if joblib is None:  # pragma: no cover
            raise RuntimeError("joblib is required for recipe persistence") from _JOBLIB_IMPORT_ERROR

        path = self.artifact_path()
        if not path.exists():
            raise FileNotFoundError(str(path))
        return Recipe.from_state(joblib.load(path), registry=registry)


__all__ = ["RecipeStore", "RecipeArtifactMeta"]
