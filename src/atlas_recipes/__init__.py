# src/atlas_recipes/__init__.py
"""
Atlas Recipes — recipes declarativas de pré-processamento para dados tabulares.

Uma recipe é uma sequência ordenada de Steps nomeados com ciclo de vida em
duas fases: `prepare()` estima estatísticas a partir de uma tabela de treino
e `apply()` reaplica os Steps treinados, de forma determinística, a tabelas
novas.

Arquitetura em alto nível:
    - core.recipe       → metadados, seletores, contrato de Step, Recipe
    - core.config       → carregamento, merge, hashing e opções
    - core.traceability → Event Log estruturado
    - steps             → variantes embutidas (center, scale, dummy, checks...)
    - builders          → construção declarativa a partir de configuração
    - persistence       → persistência (joblib) de recipes treinadas

Limites explícitos:
    - Não ajusta modelos nem faz busca de hiperparâmetros
    - Não interpreta fórmulas
"""

from .core.config import RecipeOptions, load_config
from .core.recipe import (
    Recipe,
    StepRegistry,
    all_nominal,
    all_nominal_predictors,
    all_numeric,
    all_numeric_predictors,
    all_outcomes,
    all_predictors,
    contains,
    ends_with,
    everything,
    has_role,
    has_type,
    matches,
    minus,
    one_of,
    starts_with,
    tune,
)

__all__ = [
    "Recipe",
    "RecipeOptions",
    "StepRegistry",
    "all_nominal",
    "all_nominal_predictors",
    "all_numeric",
    "all_numeric_predictors",
    "all_outcomes",
    "all_predictors",
    "contains",
    "ends_with",
    "everything",
    "has_role",
    "has_type",
    "load_config",
    "matches",
    "minus",
    "one_of",
    "starts_with",
    "tune",
]
