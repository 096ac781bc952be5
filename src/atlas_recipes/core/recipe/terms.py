# src/atlas_recipes/core/recipe/terms.py
"""
Tabela de metadados de colunas (TermInfo) e sua álgebra de atualização.

Uma recipe mantém três visões da tabela de metadados:
    - original: snapshot no momento da declaração (imutável)
    - current: atualizada a cada Step preparado
    - historical: superconjunto de todas as colunas já vistas, cada uma
      com o último Step em que esteve presente

A visão historical é o resultado de um fold explícito sobre um log
append-only (RunningLog): para cada coluna, mantém-se o registro do
maior `number` de Step. Ela existe porque o efeito estrutural de um Step
com `skip=True` é invisível em `current` mas precisa continuar selecionável
quando a recipe é aplicada a dados novos.

Invariantes:
    - Registros são ordenados; uma coluna pode aparecer uma vez por papel
    - Toda coluna presente na tabela de trabalho possui ao menos um registro
    - Colunas que deixaram a tabela são podadas de `current` (nunca ambíguas)
    - Nenhuma operação muta a instância original (retornam novas instâncias)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .types import ColumnType, LoggedRecord, Source, TermRecord, infer_column_type


def get_types(table: Any) -> List[Tuple[str, ColumnType]]:
    """Tipo semântico de cada coluna da tabela, na ordem das colunas."""
    return [(str(col), infer_column_type(table[col])) for col in table.columns]


@dataclass(frozen=True)
class TermInfo:
    """Tabela de metadados ordenada e imutável."""

    records: Tuple[TermRecord, ...] = ()

    # ------------------------------------------------------------------
    # Construção
    # ------------------------------------------------------------------
    @classmethod
    def from_frame(
        cls,
        table: Any,
        roles: Optional[Sequence[Optional[str]]] = None,
        source: Optional[Source] = Source.ORIGINAL,
    ) -> "TermInfo":
        types = get_types(table)
        if roles is None:
            roles = [None] * len(types)
        return cls(
            tuple(
                TermRecord(variable=var, type=typ, role=role, source=source)
                for (var, typ), role in zip(types, roles)
            )
        )

    # ------------------------------------------------------------------
    # Consulta
    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[TermRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def variables(self) -> List[str]:
        """Colunas distintas na ordem da primeira ocorrência."""
        return [r.variable for r in self.first_records()]

    def first_records(self) -> List[TermRecord]:
        """Um registro por coluna (primeira ocorrência), para colunas com múltiplos papéis."""
        seen = set()
        out: List[TermRecord] = []
        for r in self.records:
            if r.variable not in seen:
                seen.add(r.variable)
                out.append(r)
        return out

    def records_for(self, variable: str) -> List[TermRecord]:
        return [r for r in self.records if r.variable == variable]

    def has_variable(self, variable: str) -> bool:
        return any(r.variable == variable for r in self.records)

    def roles_of(self, variable: str) -> List[Optional[str]]:
        return [r.role for r in self.records_for(variable)]

    def to_frame(self):
        import pandas as pd  # type: ignore

        return pd.DataFrame(
            [r.to_dict() for r in self.records],
            columns=["variable", "type", "role", "source"],
        )

    # ------------------------------------------------------------------
    # Álgebra de atualização
    # ------------------------------------------------------------------
    def merge_types(
        self,
        table: Any,
        *,
        step_role: Optional[str],
        history: Mapping[str, TermRecord],
    ) -> "TermInfo":
        """
        Funde os tipos da tabela resultante de um Step nesta tabela de metadados.

        Regras:
            - registros de colunas ainda presentes são mantidos no lugar
              (o tipo é atualizado quando mudou; papel e origem preservados)
            - registros de colunas que deixaram a tabela são podados
            - colunas novas são anexadas na ordem da tabela
            - coluna nunca vista no log corrido herda `step_role` e
              recebe `source="derived"`
            - coluna que reaparece retoma o último registro conhecido

        Args:
            table: Tabela produzida pelo `apply` do Step (pandas DataFrame).
            step_role: Papel configurado no Step para colunas criadas.
            history: Último registro conhecido de cada coluna já vista.

        Returns:
            TermInfo: Nova tabela de metadados.
        """
        new_types = dict(get_types(table))

        merged: List[TermRecord] = []
        for rec in self.records:
            typ = new_types.get(rec.variable)
            if typ is None:
                continue
            merged.append(rec if rec.type == typ else rec.with_type(typ))

        present = {r.variable for r in merged}
        for var, typ in new_types.items():
            if var in present:
                continue
            previous = history.get(var)
            if previous is None:
                merged.append(TermRecord(variable=var, type=typ, role=step_role, source=Source.DERIVED))
            else:
                merged.append(previous.with_type(typ))

        return TermInfo(tuple(merged))


@dataclass(frozen=True)
class HistoricalInfo(TermInfo):
    """Visão historical: um registro por coluna, com o último Step em que esteve presente."""

    last_numbers: Tuple[int, ...] = ()

    def number_of(self, variable: str) -> Optional[int]:
        for rec, number in zip(self.records, self.last_numbers):
            if rec.variable == variable:
                return number
        return None

    def to_frame(self):
        frame = super().to_frame()
        frame["number"] = list(self.last_numbers)
        return frame


@dataclass(frozen=True)
class RunningLog:
    """
    Log append-only de snapshots da tabela de metadados.

    O snapshot inicial é anotado com `number=0, skip=False`; após cada
    Step preparado, o snapshot de `current` é anexado com o número
    (1-based) e a flag `skip` do Step.
    """

    entries: Tuple[LoggedRecord, ...] = field(default_factory=tuple)

    def appended(self, info: TermInfo, *, number: int, skip: bool) -> "RunningLog":
        extra = tuple(LoggedRecord(record=r, number=number, skip=skip) for r in info)
        return RunningLog(self.entries + extra)

    def seen(self) -> Dict[str, TermRecord]:
        return {var: rec for var, (rec, _) in self._fold().items()}

    def reduce_last_seen(self) -> HistoricalInfo:
        """
        Fold explícito: agrupa por coluna mantendo o registro de maior `number`.

        Empates no mesmo `number` (colunas com múltiplos papéis) mantêm o
        primeiro registro. A ordem segue a primeira aparição no log.
        """
        folded = self._fold()
        return HistoricalInfo(
            records=tuple(rec for rec, _ in folded.values()),
            last_numbers=tuple(number for _, number in folded.values()),
        )

    def _fold(self) -> Dict[str, Tuple[TermRecord, int]]:
        best: Dict[str, Tuple[TermRecord, int]] = {}
        for entry in self.entries:
            var = entry.record.variable
            current = best.get(var)
            if current is None or entry.number > current[1]:
                best[var] = (entry.record, entry.number)
        return best

    def to_frame(self):
        import pandas as pd  # type: ignore

        return pd.DataFrame(
            [e.to_dict() for e in self.entries],
            columns=["variable", "type", "role", "source", "number", "skip"],
        )
