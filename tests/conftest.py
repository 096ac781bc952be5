# tests/conftest.py
"""
Fixtures compartilhados para testes do Atlas Recipes.

Este módulo define fixtures reutilizáveis que fornecem:
- configurações mínimas e determinísticas (YAML como string)
- tabelas de treino pequenas com colunas numéricas e nominais
- Steps dummy (duck typing) para testes estruturais do engine

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Dados retornados são determinísticos e isolados (nova cópia a cada teste)
    - Steps dummy não herdam de classes base concretas

Invariantes:
    - Nenhuma fixture executa `prepare()`
    - Nenhuma fixture realiza I/O

Limites explícitos:
    - Não substituir testes de integração
    - Não conter lógica condicional complexa
"""

from dataclasses import dataclass, replace
from typing import ClassVar, Optional

import pandas as pd
import pytest

from atlas_recipes.core.recipe.types import StepOperation


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def project_like_config_defaults_yaml() -> str:
    """
    YAML de defaults semelhante ao uso real do projeto.

    Representa o conteúdo típico de um `config.defaults.yaml`: opções da
    recipe, papéis e uma sequência curta de Steps.
    """
    return """
recipe:
  options:
    retain: true
    strings_as_factors: true
    unseen_categories: error
    log_changes: false
    composition: dataframe
  roles:
    y: outcome
    x1: predictor
    x2: predictor
    color: predictor
  steps:
    - type: step_impute_median
      terms: ["all_numeric_predictors()"]
    - type: step_center
      terms: ["all_numeric_predictors()"]
"""


@pytest.fixture
def project_like_config_local_yaml() -> str:
    """
    YAML local (override): troca a política de categorias e substitui a
    lista de Steps inteira (listas nunca são mescladas item a item).
    """
    return """
recipe:
  options:
    unseen_categories: missing
  steps:
    - type: step_scale
      terms: ["x1"]
"""


# =====================================================
# Tabelas
# =====================================================

@pytest.fixture
def train_df() -> pd.DataFrame:
    """Tabela de treino: duas numéricas, uma nominal e um outcome."""
    return pd.DataFrame(
        {
            "x1": [1.0, 2.0, 3.0, 4.0],
            "x2": [10.0, 20.0, 30.0, 40.0],
            "color": ["x", "y", "x", "y"],
            "y": [0, 1, 0, 1],
        }
    )


@pytest.fixture
def new_df() -> pd.DataFrame:
    """Tabela nova com o mesmo schema de `train_df`."""
    return pd.DataFrame(
        {
            "x1": [5.0, 6.0],
            "x2": [50.0, 60.0],
            "color": ["y", "x"],
            "y": [1, 0],
        }
    )


@pytest.fixture
def abc_df() -> pd.DataFrame:
    """Tabela mínima com colunas {a, b, c} (cenário de Step skip)."""
    return pd.DataFrame({"a": [1, 2, 3], "b": [4, 5, 6], "c": [7, 8, 9]})


# =====================================================
# Steps dummy
# =====================================================

@pytest.fixture
def DummyStep():
    """
    Classe de Step dummy (duck typing, sem herança).

    `estimate` devolve uma cópia treinada; `apply` adiciona a coluna
    `added` (quando configurada) e, opcionalmente, falha.
    """

    @dataclass
    class _DummyStep:
        id: str = "dummy_1"
        trained: bool = False
        skip: bool = False
        role: Optional[str] = None
        added: Optional[str] = None
        fail_on: Optional[str] = None

        operation: ClassVar[StepOperation] = StepOperation.STEP
        type_tag: ClassVar[str] = "dummy_stub"

        def estimate(self, table, info):
            if self.fail_on == "estimate":
                raise ValueError("boom in estimate")
            return replace(self, trained=True)

        def apply(self, table):
            if self.fail_on == "apply":
                raise ValueError("boom in apply")
            out = table.copy()
            if self.added:
                out[self.added] = 1.0
            return out

        def describe(self):
            return pd.DataFrame([{"terms": self.added, "id": self.id}])

    return _DummyStep
