"""
Atlas Recipes — Canonical Exceptions (v1)

Este módulo define as exceções tipadas do engine de recipes.

Objetivo:
- Permitir que Steps e Recipe levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para RecipeErrorPayload
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- Falhas de Step sempre carregam posição (`number`), `id` e `type` do Step.
- Nenhuma exceção é silenciada ou re-tentada pelo engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(eq=False)
class RecipeException(Exception):
    """Base class para exceções internas do Atlas Recipes.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Configuração / entrada
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class ConfigurationError(RecipeException):
    """Instruções conflitantes ou malformadas (ex.: `number` e `id` juntos)."""


@dataclass(eq=False)
class DuplicateStepIdError(ConfigurationError):
    """Dois Steps da mesma recipe com o mesmo `id`."""


@dataclass(eq=False)
class DuplicateStepTypeError(ConfigurationError):
    """Par `(operation, type_tag)` registrado duas vezes no StepRegistry."""


@dataclass(eq=False)
class NotFoundError(RecipeException):
    """Id, posição, coluna ou tipo de Step inexistente."""


# ---------------------------------------------------------------------------
# Ciclo de vida
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class UnpreparedPipelineError(RecipeException):
    """Aplicação solicitada antes de a recipe estar totalmente treinada."""


@dataclass(eq=False)
class UntrainableInputError(RecipeException):
    """Parâmetros `tune()` não resolvidos no momento do `prepare()`."""


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class StepEstimationError(RecipeException):
    """Falha na estimação de um Step (colunas ausentes, tipo incorreto...)."""


@dataclass(eq=False)
class StepApplicationError(RecipeException):
    """Falha na aplicação de um Step treinado (inclui checks violados)."""


@dataclass(eq=False)
class DescribeNotImplementedError(RecipeException):
    """Variante de Step sem implementação de `describe()`."""


# ---------------------------------------------------------------------------
# Materialização / categorias
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class NonNumericColumnError(RecipeException):
    """Saída matricial solicitada sobre colunas não numéricas."""


@dataclass(eq=False)
class UnseenCategoryError(RecipeException):
    """Categoria ausente no treino encontrada sob política estrita."""
