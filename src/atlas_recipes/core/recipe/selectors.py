# src/atlas_recipes/core/recipe/selectors.py
"""
Seletores simbólicos de colunas e sua resolução contra a tabela de metadados.

Seletores são predicados avaliados contra uma `TermInfo`:
    - nome literal (str simples)
    - por papel: has_role, all_predictors, all_outcomes
    - por tipo: has_type, all_numeric, all_nominal
    - por padrão textual: starts_with, ends_with, contains, matches
    - combinações: `a & b` (interseção) e `-a` / minus(a) (exclusão)

Política de resolução (`select_terms`):
    - conjuntos candidatos são unidos e ordenados pela ordem de linhas da
      tabela de metadados (não pela ordem dos seletores)
    - exclusões são aplicadas após a união; somente exclusões partem de
      todas as colunas
    - dentro de `&`, `-a` vale como o complemento de `a` (`all_numeric() & -"y"`)
    - seleção vazia usa o seletor `fallback` (padrão: everything())
    - coluna com múltiplos papéis é resolvida uma vez, na primeira ocorrência
    - nome literal inexistente é erro explícito (NotFoundError)

O módulo também resolve o problema das duas visões (`final_columns`):
a lista final de colunas depende de a saída ser a tabela retida do treino
ou a tabela produzida pelo replay sobre dados novos.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, Union

from atlas_recipes.core.exceptions import ConfigurationError, NotFoundError

from .terms import TermInfo
from .types import ColumnType


class Selector:
    """Predicado de seleção de colunas."""

    def candidates(self, info: TermInfo) -> List[str]:
        raise NotImplementedError

    def describe(self) -> str:
        return repr(self)

    def __neg__(self) -> "Selector":
        return Minus(self)

    def __and__(self, other: "SelectorLike") -> "Selector":
        return Both(self, as_selector(other))

    def __rand__(self, other: "SelectorLike") -> "Selector":
        return Both(as_selector(other), self)


SelectorLike = Union[str, Selector]


@dataclass(frozen=True)
class Name(Selector):
    name: str

    def candidates(self, info: TermInfo) -> List[str]:
        if not info.has_variable(self.name):
            raise NotFoundError(
                f"Column not found in recipe metadata: {self.name}",
                details={"column": self.name, "available": info.variables()},
                hint="Verifique o nome da coluna ou o Step que a removeu.",
            )
        return [self.name]

    def describe(self) -> str:
        return self.name


@dataclass(frozen=True)
class OneOf(Selector):
    names: Tuple[str, ...]

    def candidates(self, info: TermInfo) -> List[str]:
        wanted = set(self.names)
        return [v for v in info.variables() if v in wanted]

    def describe(self) -> str:
        return f"one_of({', '.join(self.names)})"


@dataclass(frozen=True)
class Everything(Selector):
    def candidates(self, info: TermInfo) -> List[str]:
        return info.variables()

    def describe(self) -> str:
        return "everything()"


@dataclass(frozen=True)
class HasRole(Selector):
    roles: Tuple[str, ...]

    def candidates(self, info: TermInfo) -> List[str]:
        wanted = set(self.roles)
        hits = {r.variable for r in info if r.role in wanted}
        return [v for v in info.variables() if v in hits]

    def describe(self) -> str:
        return f"has_role({', '.join(self.roles)})"


@dataclass(frozen=True)
class HasType(Selector):
    types: Tuple[ColumnType, ...]

    def candidates(self, info: TermInfo) -> List[str]:
        wanted = set(self.types)
        return [r.variable for r in info.first_records() if r.type in wanted]

    def describe(self) -> str:
        return f"has_type({', '.join(t.value for t in self.types)})"


@dataclass(frozen=True)
class NamePattern(Selector):
    kind: str
    pattern: str

    def candidates(self, info: TermInfo) -> List[str]:
        if self.kind == "starts_with":
            test = lambda v: v.startswith(self.pattern)  # noqa: E731
        elif self.kind == "ends_with":
            test = lambda v: v.endswith(self.pattern)  # noqa: E731
        elif self.kind == "contains":
            test = lambda v: self.pattern in v  # noqa: E731
        else:
            rx = re.compile(self.pattern)
            test = lambda v: rx.search(v) is not None  # noqa: E731
        return [v for v in info.variables() if test(v)]

    def describe(self) -> str:
        return f"{self.kind}({self.pattern})"


@dataclass(frozen=True)
class Both(Selector):
    left: Selector
    right: Selector

    def candidates(self, info: TermInfo) -> List[str]:
        right = set(self.right.candidates(info))
        return [v for v in self.left.candidates(info) if v in right]

    def describe(self) -> str:
        return f"{self.left.describe()} & {self.right.describe()}"


@dataclass(frozen=True)
class Minus(Selector):
    inner: Selector

    def candidates(self, info: TermInfo) -> List[str]:
        excluded = set(self.inner.candidates(info))
        return [v for v in info.variables() if v not in excluded]

    def describe(self) -> str:
        return f"-{self.inner.describe()}"

    def __neg__(self) -> Selector:
        return self.inner


# ---------------------------------------------------------------------------
# Construtores públicos
# ---------------------------------------------------------------------------

def everything() -> Selector:
    return Everything()


def has_role(*roles: str) -> Selector:
    return HasRole(tuple(roles))


def all_predictors() -> Selector:
    return HasRole(("predictor",))


def all_outcomes() -> Selector:
    return HasRole(("outcome",))


def has_type(*types: Union[str, ColumnType]) -> Selector:
    try:
        return HasType(tuple(ColumnType(t) for t in types))
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown column type in has_type(): {list(types)}",
            details={"accepted": [t.value for t in ColumnType]},
        ) from e


def all_numeric() -> Selector:
    return HasType((ColumnType.NUMERIC,))


def all_nominal() -> Selector:
    return HasType((ColumnType.NOMINAL,))


def all_numeric_predictors() -> Selector:
    return all_numeric() & all_predictors()


def all_nominal_predictors() -> Selector:
    return all_nominal() & all_predictors()


def starts_with(prefix: str) -> Selector:
    return NamePattern("starts_with", prefix)


def ends_with(suffix: str) -> Selector:
    return NamePattern("ends_with", suffix)


def contains(text: str) -> Selector:
    return NamePattern("contains", text)


def matches(regex: str) -> Selector:
    return NamePattern("matches", regex)


def one_of(*names: str) -> Selector:
    return OneOf(tuple(names))


def minus(selector: SelectorLike) -> Selector:
    return Minus(as_selector(selector))


def as_selector(value: Any) -> Selector:
    if isinstance(value, Selector):
        return value
    if isinstance(value, str) and value:
        return Name(value)
    raise ConfigurationError(
        f"Invalid selector: {value!r}",
        details={"received": type(value).__name__},
        hint="Use o nome de uma coluna (str) ou um seletor como all_numeric().",
    )


# ---------------------------------------------------------------------------
# Resolução
# ---------------------------------------------------------------------------

def select_terms(
    selectors: Iterable[SelectorLike],
    info: TermInfo,
    *,
    fallback: Optional[Selector] = None,
    on_empty: Optional[Callable[[Sequence[Selector]], List[str]]] = None,
) -> List[str]:
    """
    Resolve seletores contra a tabela de metadados.

    Args:
        selectors: Seletores (ou nomes literais).
        info: Tabela de metadados contra a qual resolver.
        fallback: Seletor usado quando `selectors` é vazio (padrão: everything()).
        on_empty: Chamado quando nenhuma coluna é selecionada; seu retorno é
            usado como resultado (pode levantar exceção).

    Returns:
        List[str]: Nomes de colunas ordenados e sem duplicatas.
    """
    sels = [as_selector(s) for s in selectors]
    if not sels:
        sels = [fallback if fallback is not None else everything()]

    positives = [s for s in sels if not isinstance(s, Minus)]
    negatives = [s for s in sels if isinstance(s, Minus)]

    if positives:
        chosen = set()
        for s in positives:
            chosen.update(s.candidates(info))
    else:
        chosen = set(info.variables())

    for s in negatives:
        chosen.difference_update(s.inner.candidates(info))

    resolved = [v for v in info.variables() if v in chosen]
    if not resolved and on_empty is not None:
        return list(on_empty(sels))
    return resolved


def final_columns(
    table_columns: Sequence[str],
    keepers: Sequence[str],
    info: TermInfo,
    *,
    is_replay: bool,
) -> List[str]:
    """
    Reconcilia colunas selecionadas com a tabela efetivamente produzida.

    - `is_replay=True` (aplicação a dados novos): candidatas são as colunas
      presentes na tabela pós-replay que estão em `keepers`.
    - `is_replay=False` (tabela retida): candidatas são as colunas de `info`
      que estão em `keepers`.

    Ordenação: ordem de linhas de `info`; colunas fora de `info` vão para o
    final, na ordem da tabela.
    """
    keep = set(keepers)
    if is_replay:
        possible = [c for c in table_columns if c in keep]
    else:
        possible = [v for v in info.variables() if v in keep]

    unique: List[str] = []
    for c in possible:
        if c not in unique:
            unique.append(c)

    rank = {v: i for i, v in enumerate(info.variables())}
    tail = len(rank)
    ordered = sorted(enumerate(unique), key=lambda p: (rank.get(p[1], tail), p[0]))
    return [c for _, c in ordered]


# ---------------------------------------------------------------------------
# Gramática textual (usada pelo builder declarativo)
# ---------------------------------------------------------------------------

_CALL_RX = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\((.*)\)$", re.DOTALL)

_NO_ARGS = {
    "everything": everything,
    "all_predictors": all_predictors,
    "all_outcomes": all_outcomes,
    "all_numeric": all_numeric,
    "all_nominal": all_nominal,
    "all_numeric_predictors": all_numeric_predictors,
    "all_nominal_predictors": all_nominal_predictors,
}
_ONE_ARG = {
    "starts_with": starts_with,
    "ends_with": ends_with,
    "contains": contains,
    "matches": matches,
}
_MANY_ARGS = {
    "has_role": has_role,
    "has_type": has_type,
    "one_of": one_of,
}


def _unquote(s: str) -> str:
    s = s.strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ("'", '"'):
        return s[1:-1]
    return s


def parse_selector(text: str) -> Selector:
    """
    Converte a forma textual de um seletor em um `Selector`.

    Exemplos: "age", "-age", "all_numeric()", "has_role(outcome)",
    "starts_with(x_)", "matches('^pc[0-9]+$')", "-has_type(date)".
    """
    if not isinstance(text, str) or not text.strip():
        raise ConfigurationError(
            f"Invalid selector text: {text!r}",
            details={"received": type(text).__name__},
        )

    raw = text.strip()
    negate = raw.startswith("-")
    if negate:
        raw = raw[1:].strip()

    m = _CALL_RX.match(raw)
    if m is None:
        sel: Selector = Name(_unquote(raw))
    else:
        fn, args = m.group(1), m.group(2).strip()
        if fn in _NO_ARGS:
            if args:
                raise ConfigurationError(f"Selector {fn}() takes no arguments", details={"selector": text})
            sel = _NO_ARGS[fn]()
        elif fn in _ONE_ARG:
            if not args:
                raise ConfigurationError(f"Selector {fn}() requires one argument", details={"selector": text})
            sel = _ONE_ARG[fn](_unquote(args))
        elif fn in _MANY_ARGS:
            parts = [_unquote(a) for a in args.split(",") if a.strip()]
            if not parts:
                raise ConfigurationError(f"Selector {fn}() requires arguments", details={"selector": text})
            sel = _MANY_ARGS[fn](*parts)
        else:
            known = sorted(list(_NO_ARGS) + list(_ONE_ARG) + list(_MANY_ARGS))
            raise ConfigurationError(
                f"Unknown selector function: {fn}()",
                details={"selector": text, "accepted": known},
            )

    return Minus(sel) if negate else sel
