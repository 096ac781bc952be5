# src/atlas_recipes/core/recipe/__init__.py
"""
Engine de recipes do Atlas Recipes.

Componentes (das folhas para a raiz):
    - types / terms → modelo de metadados de colunas e sua álgebra
    - selectors     → resolução de seletores simbólicos
    - step          → contrato de Step (estimate, apply, describe)
    - registry      → registro explícito de variantes de Step
    - levels        → controle de categorias entre treino e aplicação
    - materialize   → formatos de saída
    - recipe        → ciclo de vida prepare / apply
"""

from .levels import get_levels, levels_of, strings_to_factors, train_info
from .materialize import FORMATS, check_composition, materialize
from .recipe import Recipe
from .registry import StepRegistry
from .selectors import (
    Selector,
    all_nominal,
    all_nominal_predictors,
    all_numeric,
    all_numeric_predictors,
    all_outcomes,
    all_predictors,
    contains,
    ends_with,
    everything,
    final_columns,
    has_role,
    has_type,
    matches,
    minus,
    one_of,
    parse_selector,
    select_terms,
    starts_with,
)
from .step import CheckStep, Step, Tune, make_step_id, step_identity, step_type, tunable_parameters, tune
from .terms import HistoricalInfo, RunningLog, TermInfo, get_types
from .types import ColumnType, Source, StepOperation, TermRecord

__all__ = [
    "FORMATS",
    "CheckStep",
    "ColumnType",
    "HistoricalInfo",
    "Recipe",
    "RunningLog",
    "Selector",
    "Source",
    "Step",
    "StepOperation",
    "StepRegistry",
    "TermInfo",
    "TermRecord",
    "Tune",
    "all_nominal",
    "all_nominal_predictors",
    "all_numeric",
    "all_numeric_predictors",
    "all_outcomes",
    "all_predictors",
    "check_composition",
    "contains",
    "ends_with",
    "everything",
    "final_columns",
    "get_levels",
    "get_types",
    "has_role",
    "has_type",
    "levels_of",
    "make_step_id",
    "matches",
    "materialize",
    "minus",
    "one_of",
    "parse_selector",
    "select_terms",
    "starts_with",
    "step_identity",
    "step_type",
    "strings_to_factors",
    "train_info",
    "tunable_parameters",
    "tune",
]
