# src/atlas_recipes/core/traceability/event_log.py
"""
Event Log estruturado de uma recipe.

Este módulo define o `EventLog`, o registro canônico de observabilidade
do Atlas Recipes. Logs não são texto livre: cada chamada produz um evento
estruturado, associado a um Step (ou ao escopo da recipe) e com timestamp UTC.

O EventLog registra:
    - início e término do `prepare()`
    - Steps treinados, pré-treinados e falhas (com payload de erro)
    - mudanças de colunas por Step (quando `log_changes` está ativo)
    - artefatos persistidos (RecipeStore)

Warnings são sinais não fatais agrupados por `step_id`.

Invariantes:
    - Eventos sempre incluem `recipe_id`, `step_id`, `level`, `message`, `timestamp`
    - A ordem de `events` reflete a ordem de chamada
    - Campos extras são preservados sem filtragem

Limites explícitos:
    - Não persiste eventos automaticamente
    - Não decide políticas de execução
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

RECIPE_SCOPE = "recipe"


@dataclass
class EventLog:
    """Coleção ordenada de eventos e warnings de uma recipe."""

    recipe_id: str
    events: List[Dict[str, Any]] = field(default_factory=list)
    warnings: Dict[str, List[str]] = field(default_factory=dict)

    def log(self, *, step_id: Optional[str], level: str, message: str, **extra: Any) -> None:
        event = {
            "recipe_id": self.recipe_id,
            "step_id": step_id or RECIPE_SCOPE,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, step_id: Optional[str], message: str) -> None:
        self.warnings.setdefault(step_id or RECIPE_SCOPE, []).append(message)

    def of_type(self, event_type: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e.get("event_type") == event_type]

    def extend(self, other: "EventLog") -> None:
        """Incorpora eventos e warnings de outro log (commit do `prepare()`)."""
        self.events.extend(other.events)
        for sid, msgs in other.warnings.items():
            self.warnings.setdefault(sid, []).extend(msgs)
