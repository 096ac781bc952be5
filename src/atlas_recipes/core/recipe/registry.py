# src/atlas_recipes/core/recipe/registry.py
"""
Registro explícito de variantes de Step.

O `StepRegistry` associa cada classe de Step a um par estável
`(operation, type_tag)`. Ele é um objeto comum, passado para (ou criado
pela) Recipe; não existe registro global de processo.

Responsabilidades do módulo:
    - Validar o par `(operation, type_tag)` de cada classe registrada
    - Rejeitar pares duplicados
    - Criar Steps a partir do par ou do nome textual (`step_center`)

Invariantes:
    - Cada par `(operation, type_tag)` aparece no máximo uma vez
    - `list()` reflete exatamente a ordem de registro

Limites explícitos:
    - Não executa Steps
    - Não valida parâmetros além da assinatura do construtor
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, Type, Union

from atlas_recipes.core.exceptions import (
    ConfigurationError,
    DuplicateStepTypeError,
    NotFoundError,
)

from .types import StepOperation

_Key = Tuple[str, str]


def _normalize_operation(operation: Union[str, StepOperation]) -> str:
    try:
        return StepOperation(operation).value
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid step operation: {operation!r}",
            details={"accepted": [o.value for o in StepOperation]},
        ) from e


@dataclass
class StepRegistry:
    """Registro de classes de Step indexado por `(operation, type_tag)`."""

    _classes: Dict[_Key, Type[Any]] = field(default_factory=dict, init=False, repr=False)
    _order: List[_Key] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def default(cls) -> "StepRegistry":
        """Registry com as variantes embutidas do pacote."""
        from atlas_recipes.steps import BUILTIN_STEPS

        registry = cls()
        for step_cls in BUILTIN_STEPS:
            registry.register(step_cls)
        return registry

    def register(self, step_cls: Type[Any]) -> Type[Any]:
        """Registra uma classe de Step. Pode ser usado como decorator."""
        tag = getattr(step_cls, "type_tag", None)
        if not isinstance(tag, str) or not tag.strip():
            raise ConfigurationError(
                "step type_tag must be a non-empty string",
                details={"class": getattr(step_cls, "__name__", repr(step_cls))},
            )
        key = (_normalize_operation(getattr(step_cls, "operation", None)), tag)

        if key in self._classes:
            raise DuplicateStepTypeError(
                f"Duplicate step type: {key[0]}_{key[1]}",
                details={"operation": key[0], "type_tag": key[1]},
            )

        self._classes[key] = step_cls
        self._order.append(key)
        return step_cls

    def get(self, operation: Union[str, StepOperation], type_tag: str) -> Type[Any]:
        key = (_normalize_operation(operation), type_tag)
        if key not in self._classes:
            raise NotFoundError(
                f"Unknown step type: {key[0]}_{key[1]}",
                details={"operation": key[0], "type_tag": type_tag, "available": self.names()},
            )
        return self._classes[key]

    def resolve(self, name: str) -> Type[Any]:
        """Resolve o nome textual `"{operation}_{type_tag}"` (ex.: `step_impute_mean`)."""
        operation, sep, tag = str(name).partition("_")
        if not sep or not tag:
            raise ConfigurationError(
                f"Invalid step type name: {name!r}",
                details={"expected": "{operation}_{type_tag}", "available": self.names()},
            )
        return self.get(operation, tag)

    def create(self, operation: Union[str, StepOperation], type_tag: str, **params: Any) -> Any:
        step_cls = self.get(operation, type_tag)
        try:
            return step_cls(**params)
        except TypeError as e:
            raise ConfigurationError(
                f"Invalid parameters for {_normalize_operation(operation)}_{type_tag}: {e}",
                details={"params": sorted(params)},
            ) from e

    def list(self) -> List[Type[Any]]:
        return [self._classes[k] for k in self._order]

    def names(self) -> List[str]:
        return [f"{op}_{tag}" for op, tag in self._order]

    def __contains__(self, key: object) -> bool:
        return key in self._classes
