# src/atlas_recipes/core/recipe/types.py
"""
Tipos canônicos do modelo de metadados de colunas.

Os tipos aqui definidos representam:
    - o tipo semântico de uma coluna (ColumnType)
    - a proveniência de uma coluna (Source)
    - a operação de um Step (StepOperation)
    - um registro da tabela de metadados (TermRecord)

Princípios fundamentais:
    - Enums possuem valores textuais canônicos (serializáveis)
    - Registros são imutáveis
    - Nenhuma lógica de execução vive neste módulo

Limites explícitos:
    - Não mantém ordem nem unicidade de registros (ver `terms.TermInfo`)
    - Não resolve seletores
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional


class ColumnType(str, Enum):
    """
    Tipo semântico de uma coluna, independente do dtype físico.

    Tipos definidos:
        - NUMERIC: inteiros e pontos flutuantes (exceto booleanos)
        - NOMINAL: texto, categóricas e booleanos
        - DATE: datas e timestamps
        - OTHER: qualquer outro dtype
    """
    NUMERIC = "numeric"
    NOMINAL = "nominal"
    DATE = "date"
    OTHER = "other"


class Source(str, Enum):
    """Proveniência de uma coluna: presente nos dados originais ou criada por um Step."""
    ORIGINAL = "original"
    DERIVED = "derived"


class StepOperation(str, Enum):
    """
    Operação de um Step.

        - STEP: transforma a tabela
        - CHECK: valida um invariante e devolve a tabela inalterada
    """
    STEP = "step"
    CHECK = "check"


def infer_column_type(series: Any) -> ColumnType:
    """Mapeia o dtype de uma `pd.Series` para o tipo semântico da coluna."""
    import pandas as pd  # type: ignore
    from pandas.api.types import (  # type: ignore
        is_bool_dtype,
        is_datetime64_any_dtype,
        is_numeric_dtype,
        is_object_dtype,
        is_string_dtype,
    )

    dtype = series.dtype

    if is_datetime64_any_dtype(dtype):
        return ColumnType.DATE
    if is_bool_dtype(dtype):
        return ColumnType.NOMINAL
    if isinstance(dtype, pd.CategoricalDtype):
        return ColumnType.NOMINAL
    if is_numeric_dtype(dtype):
        return ColumnType.NUMERIC
    if is_object_dtype(dtype) or is_string_dtype(dtype):
        return ColumnType.NOMINAL
    return ColumnType.OTHER


@dataclass(frozen=True)
class TermRecord:
    """
    Registro da tabela de metadados: um par (coluna, papel).

    Campos:
        - variable: nome da coluna (não é único entre registros)
        - type: tipo semântico da coluna
        - role: papel livre (ex.: "predictor", "outcome") ou None
        - source: proveniência ou None quando desconhecida
    """
    variable: str
    type: ColumnType
    role: Optional[str] = None
    source: Optional[Source] = None

    def with_type(self, type: ColumnType) -> "TermRecord":
        return replace(self, type=type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "variable": self.variable,
            "type": self.type.value,
            "role": self.role,
            "source": self.source.value if self.source is not None else None,
        }


@dataclass(frozen=True)
class LoggedRecord:
    """Registro do log corrido do `prepare()`: snapshot anotado com o Step."""
    record: TermRecord
    number: int
    skip: bool

    def to_dict(self) -> Dict[str, Any]:
        out = self.record.to_dict()
        out.update({"number": self.number, "skip": self.skip})
        return out
