# src/atlas_recipes/core/recipe/step.py
"""
Contrato canônico de Step do Atlas Recipes.

Um Step é a menor unidade de transformação de uma recipe. Cada variante
implementa o conjunto de capacidades {estimate, apply, describe} e é
registrada sob um par estável `(operation, type_tag)`, por exemplo
`("step", "center")` ou `("check", "missing")`.

Ciclo de vida de um Step:
    - criado com `trained=False` (parâmetros declarados, nada estimado)
    - `estimate(table, info)` devolve uma NOVA cópia treinada
    - `apply(table)` transforma uma tabela usando apenas o estado treinado

Princípios fundamentais:
    - Steps não conhecem a Recipe nem outros Steps
    - `estimate` lê apenas a tabela e os metadados recebidos
    - `apply` é determinístico, preserva número e ordem de linhas
      e nunca muta a tabela recebida
    - `describe` é introspecção; a implementação padrão falha de forma
      explícita (negação padrão, nunca no-op silencioso)

Invariantes:
    - `id` é único dentro de uma recipe
    - `skip` é fixado na construção
    - a posição (`number`, 1-based) é derivada pela recipe, nunca armazenada

Limites explícitos:
    - Não registra eventos de rastreabilidade
    - Não decide políticas de execução (skip, retain)
    - Não resolve posição dentro da recipe
"""

from __future__ import annotations

import random
import string
from dataclasses import dataclass, fields, is_dataclass
from typing import Any, ClassVar, Dict, List, Optional, Protocol, runtime_checkable

from atlas_recipes.core.exceptions import DescribeNotImplementedError

from .terms import TermInfo
from .types import StepOperation


@dataclass(frozen=True)
class Tune:
    """Marcador de parâmetro adiado: precisa ser resolvido antes do `prepare()`."""
    id: str = ""


def tune(id: str = "") -> Tune:
    return Tune(id=id)


@runtime_checkable
class Step(Protocol):
    """
    Contrato canônico de um Step do Atlas Recipes.

    Atributos obrigatórios:
        - id: identificador único e estável do Step
        - trained: indica se o Step já foi estimado
        - skip: exclui o Step do replay sobre dados novos
        - role: papel atribuído às colunas criadas pelo Step (ou None)

    Atributos de classe:
        - operation: `StepOperation.STEP` ou `StepOperation.CHECK`
        - type_tag: identificador curto da variante (ex.: "center")

    Decisões arquiteturais:
        - `estimate` retorna uma cópia (`dataclasses.replace`), nunca muta `self`
        - o protocolo é verificado por duck typing (@runtime_checkable),
          mas variantes concretas o declaram explicitamente como base
        - `describe` padrão levanta `DescribeNotImplementedError`

    Limites explícitos:
        - Não define retry nem tratamento de exceções
        - Não conhece a posição do Step na recipe
    """
    id: str
    trained: bool
    skip: bool
    role: Optional[str]

    operation: ClassVar[StepOperation]
    type_tag: ClassVar[str]

    def estimate(self, table: Any, info: TermInfo) -> "Step":
        """Estima os parâmetros do Step e devolve uma cópia treinada."""
        ...

    def apply(self, table: Any) -> Any:
        """Aplica o Step treinado a uma tabela, sem mutá-la."""
        ...

    def describe(self) -> Any:
        raise DescribeNotImplementedError(
            f"No `describe` method for a step with type: {step_type(self)}",
            details={"id": getattr(self, "id", None), "type": step_type(self)},
        )


class CheckStep(Step):
    """
    Base para Steps de verificação.

    Um check nunca transforma colunas: `apply` é a identidade quando
    `verify(table)` passa e falha com `StepApplicationError` caso contrário.
    """

    operation: ClassVar[StepOperation] = StepOperation.CHECK

    def verify(self, table: Any) -> None:
        raise NotImplementedError

    def apply(self, table: Any) -> Any:
        self.verify(table)
        return table


def step_type(step: Any) -> str:
    """Tipo textual do Step: `"{operation}_{type_tag}"` (ex.: `step_center`)."""
    operation = getattr(step, "operation", None)
    op = operation.value if isinstance(operation, StepOperation) else str(operation)
    return f"{op}_{getattr(step, 'type_tag', 'unknown')}"


def make_step_id(type_tag: str) -> str:
    suffix = "".join(random.choices(string.ascii_letters + string.digits, k=5))
    return f"{type_tag}_{suffix}"


def step_identity(number: Optional[int], step: Any) -> Dict[str, Any]:
    """Metadados humanos de identificação de um Step (posição, id e tipo)."""
    return {"number": number, "id": getattr(step, "id", None), "type": step_type(step)}


def tunable_parameters(step: Any) -> List[str]:
    """Nomes dos campos do Step que ainda carregam um marcador `tune()`."""
    if not is_dataclass(step):
        return [k for k, v in vars(step).items() if isinstance(v, Tune)]
    return [f.name for f in fields(step) if isinstance(getattr(step, f.name), Tune)]
