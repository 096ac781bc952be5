"""
Opções de execução de uma recipe (RecipeOptions v1).

As opções controlam o comportamento do `prepare()` e do `apply()` que não
pertence a nenhum Step específico:

    - retain: guarda a tabela de treino processada para o atalho `juice()`
    - strings_as_factors: converte colunas textuais em categóricas com o
      conjunto de categorias observado no treino
    - unseen_categories: política para categorias novas na aplicação
        - "error"   → UnseenCategoryError
        - "missing" → valor vira o marcador de ausente (NaN)
    - log_changes: registra no Event Log as colunas adicionadas/removidas
      por cada Step
    - composition: formato de saída padrão do Materializer

A política de categorias é a mesma no treino e na aplicação: é definida
uma única vez na recipe e persistida junto com ela.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from atlas_recipes.core.exceptions import ConfigurationError

UNSEEN_POLICIES = ("error", "missing")


@dataclass(frozen=True)
class RecipeOptions:
    """Opções normalizadas (após validação)."""

    retain: bool = True
    strings_as_factors: bool = True
    unseen_categories: str = "error"
    log_changes: bool = False
    composition: str = "dataframe"

    def __post_init__(self) -> None:
        from atlas_recipes.core.recipe.materialize import check_composition

        for name in ("retain", "strings_as_factors", "log_changes"):
            _expect(isinstance(getattr(self, name), bool), f"Invalid options: {name} must be a boolean")
        _expect(
            self.unseen_categories in UNSEEN_POLICIES,
            f"Invalid options: unseen_categories must be one of {list(UNSEEN_POLICIES)}",
        )
        check_composition(self.composition)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _expect(cond: bool, msg: str) -> None:
    if not cond:
        raise ConfigurationError(msg, details={"section": "recipe.options"})


def options_from_config(config: Dict[str, Any]) -> RecipeOptions:
    """Lê `recipe.options` de uma configuração resolvida.

    Chaves ausentes assumem os defaults de `RecipeOptions`; chaves
    desconhecidas são rejeitadas.
    """
    recipe_cfg = config.get("recipe") if isinstance(config, dict) else None
    recipe_cfg = recipe_cfg if isinstance(recipe_cfg, dict) else {}
    raw = recipe_cfg.get("options", {})
    if raw is None:
        raw = {}
    _expect(isinstance(raw, dict), "Invalid config: recipe.options must be a mapping")

    known = set(RecipeOptions.__dataclass_fields__)
    unknown = sorted(set(raw) - known)
    _expect(not unknown, f"Invalid config: unknown recipe.options keys: {unknown}")

    return RecipeOptions(**raw)
