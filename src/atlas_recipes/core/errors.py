"""
Atlas Recipes — Canonical Error Structures (v1)

Este módulo define o formato serializável de erros do Atlas Recipes.

Erros registrados no Event Log de uma recipe devem ser:
- explícitos
- serializáveis
- rastreáveis (posição, id e tipo do Step)
- acionáveis

Nenhuma decisão implícita é permitida.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from .exceptions import RecipeException


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RecipeErrorPayload:
    """
    Payload canônico de erro do Atlas Recipes.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
NOT_FOUND_ERROR = "NOT_FOUND_ERROR"
UNPREPARED_PIPELINE_ERROR = "UNPREPARED_PIPELINE_ERROR"
UNTRAINABLE_INPUT_ERROR = "UNTRAINABLE_INPUT_ERROR"
STEP_ESTIMATION_ERROR = "STEP_ESTIMATION_ERROR"
STEP_APPLICATION_ERROR = "STEP_APPLICATION_ERROR"
NON_NUMERIC_COLUMN_ERROR = "NON_NUMERIC_COLUMN_ERROR"
UNSEEN_CATEGORY_ERROR = "UNSEEN_CATEGORY_ERROR"

# Fallback para exceções não tipadas
RECIPE_EXECUTION_ERROR = "RECIPE_EXECUTION_ERROR"

_CODES_BY_CLASS = {
    "ConfigurationError": CONFIGURATION_ERROR,
    "DuplicateStepIdError": CONFIGURATION_ERROR,
    "DuplicateStepTypeError": CONFIGURATION_ERROR,
    "NotFoundError": NOT_FOUND_ERROR,
    "UnpreparedPipelineError": UNPREPARED_PIPELINE_ERROR,
    "UntrainableInputError": UNTRAINABLE_INPUT_ERROR,
    "StepEstimationError": STEP_ESTIMATION_ERROR,
    "StepApplicationError": STEP_APPLICATION_ERROR,
    "NonNumericColumnError": NON_NUMERIC_COLUMN_ERROR,
    "UnseenCategoryError": UNSEEN_CATEGORY_ERROR,
}


def exception_to_payload(exc: BaseException) -> RecipeErrorPayload:
    """Converte exceções em RecipeErrorPayload (serializável, acionável).

    Regras:
    - RecipeException: já vem com message/details/hint.
    - Outras exceções: encapsular como RECIPE_EXECUTION_ERROR sem expor stack trace.
    """
    if isinstance(exc, RecipeException):
        name = exc.__class__.__name__
        return RecipeErrorPayload(
            type=_CODES_BY_CLASS.get(name, name),
            message=str(exc) or "Erro de execução",
            details=dict(exc.details or {}),
            hint=exc.hint,
        )

    return RecipeErrorPayload(
        type=RECIPE_EXECUTION_ERROR,
        message=str(exc) or "Erro inesperado durante execução",
        details={"exception_class": exc.__class__.__name__},
        hint="Verifique o log da recipe e a configuração dos Steps",
    )


def step_failure_hint(number: Optional[int], step_id: Optional[str]) -> str:
    return (
        f"Revise o Step #{number} (id={step_id}) e os dados de entrada. "
        "Nenhum fallback é aplicado automaticamente."
    )
