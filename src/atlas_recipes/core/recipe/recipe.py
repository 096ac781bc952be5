# src/atlas_recipes/core/recipe/recipe.py
"""
Recipe: sequência ordenada de Steps com ciclo de vida em duas fases.

Fases:
    - prepare(): fold estrito da esquerda para a direita sobre os Steps.
      Cada Step não treinado é estimado sobre a tabela de trabalho, aplicado
      a ela e tem os tipos resultantes fundidos em `current_info`.
    - apply(): replay determinístico dos Steps treinados (exceto os marcados
      com `skip=True`) sobre uma tabela nova, ou devolução da tabela de treino
      retida (`apply(None)` / `juice()`), que sempre reflete todos os Steps.

Decisões arquiteturais:
    - `prepare()` é o único mutador; trabalha sobre cópias locais e só
      faz commit no estado da recipe ao final (falha não deixa estado parcial)
    - a visão historical é um fold explícito de um log append-only (RunningLog)
    - o registry de Steps pertence à recipe (nunca é global)
    - eventos são registrados no EventLog da recipe, nunca em texto livre

Invariantes:
    - `steps` só cresce por append; ids são únicos
    - `original_info` nunca muda após a construção
    - dados do chamador nunca são mutados nem compartilhados com a tabela retida

Limites explícitos:
    - Não ajusta modelos
    - Não resolve parâmetros `tune()`
    - Não persiste a si mesma (ver `atlas_recipes.persistence`)
"""

from __future__ import annotations

from numbers import Integral
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

from atlas_recipes.core.config.options import RecipeOptions
from atlas_recipes.core.errors import exception_to_payload, step_failure_hint
from atlas_recipes.core.exceptions import (
    ConfigurationError,
    DuplicateStepIdError,
    NotFoundError,
    RecipeException,
    StepApplicationError,
    StepEstimationError,
    UnpreparedPipelineError,
    UntrainableInputError,
)
from atlas_recipes.core.traceability.event_log import EventLog

from .levels import levels_of, strings_to_factors, train_info
from .materialize import check_composition, materialize
from .registry import StepRegistry
from .selectors import SelectorLike, final_columns, select_terms
from .step import Step, step_identity, step_type, tunable_parameters
from .terms import HistoricalInfo, RunningLog, TermInfo
from .types import StepOperation

_STATE_KEYS = (
    "recipe_id",
    "options",
    "original_info",
    "current_info",
    "historical_info",
    "running_log",
    "steps",
    "template",
    "levels",
    "orig_levels",
    "fully_trained",
    "retained",
    "training_summary",
)


def _as_frame(data: Any, *, what: str) -> Any:
    import pandas as pd  # type: ignore

    if isinstance(data, pd.DataFrame):
        return data
    if isinstance(data, list) and all(isinstance(r, dict) for r in data):
        return pd.DataFrame(data)
    raise ConfigurationError(
        f"{what} must be a pandas DataFrame or a list of dict rows",
        details={"received": type(data).__name__},
    )


def _expect_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"`{name}` must be a boolean", details={"received": repr(value)})
    return value


def _tag_step_failure(
    error_cls: type,
    phase: str,
    number: int,
    step: Any,
    exc: BaseException,
) -> RecipeException:
    """Converte uma falha de Step no erro tipado da fase, com posição, id e tipo."""
    ident = step_identity(number, step)
    if isinstance(exc, RecipeException):
        details = {**exc.details, **ident}
    else:
        details = {**ident, "exception_class": exc.__class__.__name__}

    if isinstance(exc, error_cls):
        message = exc.message
    else:
        message = f"Step #{number} ({ident['type']}, id={ident['id']}) failed during {phase}: {exc}"

    hint = getattr(exc, "hint", None) or step_failure_hint(number, ident["id"])
    return error_cls(message, details=details, hint=hint)


class Recipe:
    """
    Recipe de pré-processamento para dados tabulares.

    Args:
        data: Tabela de declaração (pandas DataFrame ou lista de dicts).
        vars: Colunas usadas pela recipe (padrão: todas, na ordem da tabela).
        roles: Papel de cada coluna em `vars` (mesmo tamanho) ou None.
        registry: Registry de Steps (padrão: `StepRegistry.default()`).
        options: Opções de execução (padrão: `RecipeOptions()`).
        recipe_id: Identificador da recipe (padrão: gerado).
    """

    def __init__(
        self,
        data: Any,
        vars: Optional[Sequence[str]] = None,
        roles: Optional[Sequence[Optional[str]]] = None,
        *,
        registry: Optional[StepRegistry] = None,
        options: Optional[RecipeOptions] = None,
        recipe_id: Optional[str] = None,
    ) -> None:
        table = _as_frame(data, what="data")
        columns = [str(c) for c in table.columns]

        if vars is None:
            vars = columns
        vars = list(vars)
        if not all(isinstance(v, str) and v for v in vars):
            raise ConfigurationError("`vars` must be a list of non-empty strings", details={"vars": vars})
        if len(set(vars)) != len(vars):
            dupes = sorted({v for v in vars if vars.count(v) > 1})
            raise ConfigurationError("`vars` must not contain duplicates", details={"duplicates": dupes})
        missing = [v for v in vars if v not in columns]
        if missing:
            raise ConfigurationError("`vars` not found in data", details={"missing": missing})

        if roles is not None:
            roles = list(roles)
            if len(roles) != len(vars):
                raise ConfigurationError(
                    "`roles` must have the same length as `vars`",
                    details={"vars": len(vars), "roles": len(roles)},
                )

        if options is not None and not isinstance(options, RecipeOptions):
            raise ConfigurationError("`options` must be a RecipeOptions", details={"received": type(options).__name__})

        self.recipe_id: str = recipe_id or f"recipe_{uuid4().hex[:8]}"
        self.options: RecipeOptions = options or RecipeOptions()
        self.registry: StepRegistry = registry or StepRegistry.default()

        self._declared: Optional[Any] = table.loc[:, vars].copy()
        self.original_info: TermInfo = TermInfo.from_frame(self._declared, roles)
        self.current_info: TermInfo = self.original_info
        self.historical_info: Optional[HistoricalInfo] = None
        self._running_log: Optional[RunningLog] = None

        self.steps: List[Step] = []
        self.template: Optional[Any] = None
        self.levels: Optional[Dict[str, Any]] = None
        self.orig_levels: Optional[Dict[str, Any]] = None
        self.retained: bool = False
        self.training_summary: Optional[Dict[str, int]] = None
        self.log: EventLog = EventLog(recipe_id=self.recipe_id)

    @classmethod
    def from_outcomes(
        cls,
        data: Any,
        outcomes: Sequence[str],
        predictors: Optional[Sequence[str]] = None,
        **kwargs: Any,
    ) -> "Recipe":
        """Atalho de papéis: `outcomes` recebem "outcome"; os demais (ou `predictors`) "predictor"."""
        table = _as_frame(data, what="data")
        outcomes = [outcomes] if isinstance(outcomes, str) else list(outcomes)
        if predictors is None:
            predictors = [str(c) for c in table.columns if str(c) not in outcomes]
        else:
            predictors = [predictors] if isinstance(predictors, str) else list(predictors)

        overlap = sorted(set(outcomes) & set(predictors))
        if overlap:
            raise ConfigurationError("Columns cannot be both outcome and predictor", details={"columns": overlap})

        wanted = set(outcomes) | set(predictors)
        vars = [str(c) for c in table.columns if str(c) in wanted]
        missing = sorted(wanted - set(vars))
        if missing:
            raise ConfigurationError("`vars` not found in data", details={"missing": missing})

        roles = ["outcome" if v in outcomes else "predictor" for v in vars]
        return cls(table, vars, roles, **kwargs)

    # ------------------------------------------------------------------
    # Declaração de Steps
    # ------------------------------------------------------------------
    @property
    def fully_trained(self) -> bool:
        return all(s.trained for s in self.steps)

    def add_step(self, step: Step) -> "Recipe":
        if not isinstance(step, Step):
            raise ConfigurationError(
                "step must implement the Step contract",
                details={"received": type(step).__name__},
            )
        if any(s.id == step.id for s in self.steps):
            raise DuplicateStepIdError(f"Duplicate step id: {step.id}", details={"id": step.id})
        self.steps.append(step)
        return self

    def add_check(self, check: Step) -> "Recipe":
        if getattr(check, "operation", None) != StepOperation.CHECK:
            raise ConfigurationError(
                "add_check() requires a check step",
                details={"type": step_type(check)},
            )
        return self.add_step(check)

    def step(self, type_tag: str, *terms: SelectorLike, **params: Any) -> "Recipe":
        return self.add_step(self.registry.create(StepOperation.STEP, type_tag, terms=tuple(terms), **params))

    def check(self, type_tag: str, *terms: SelectorLike, **params: Any) -> "Recipe":
        return self.add_check(self.registry.create(StepOperation.CHECK, type_tag, terms=tuple(terms), **params))

    # ------------------------------------------------------------------
    # Treino
    # ------------------------------------------------------------------
    def _raise_if_tunable(self) -> None:
        pending = []
        for number, step in enumerate(self.steps, start=1):
            names = tunable_parameters(step)
            if names:
                pending.append({**step_identity(number, step), "parameters": names})
        if pending:
            names = sorted({n for p in pending for n in p["parameters"]})
            raise UntrainableInputError(
                "You cannot `prepare()` a tunable recipe. Argument(s) with `tune()`: "
                + ", ".join(f"'{n}'" for n in names),
                details={"parameters": names, "steps": pending},
                hint="Substitua os marcadores tune() por valores concretos antes do prepare().",
            )

    def _training_table(self, training: Any) -> Any:
        if training is None:
            if self._declared is None:
                raise ConfigurationError(
                    "No training data available; pass `training` to prepare()",
                    details={"recipe_id": self.recipe_id},
                )
            return self._declared.copy()

        table = _as_frame(training, what="training")
        required = self.original_info.variables()
        missing = [v for v in required if v not in table.columns]
        if missing:
            raise ConfigurationError(
                "Not all variables in the recipe are present in the supplied training set",
                details={"missing": missing},
            )
        return table.loc[:, required].copy()

    def prepare(
        self,
        training: Any = None,
        retrain_all: bool = False,
        retain: Optional[bool] = None,
        strings_as_factors: Optional[bool] = None,
        log_changes: Optional[bool] = None,
    ) -> "Recipe":
        """
        Estima todos os Steps não treinados, em ordem.

        Args:
            training: Tabela de treino; None usa a tabela de declaração.
            retrain_all: Reestima todos os Steps a partir de `original_info`.
            retain: Guarda a tabela processada (padrão: `options.retain`).
            strings_as_factors: Converte texto em categóricas (padrão: opção).
            log_changes: Registra colunas adicionadas/removidas por Step.

        Returns:
            Recipe: a própria recipe (treinada).

        Raises:
            UntrainableInputError: há marcadores `tune()` (antes de qualquer Step).
            StepEstimationError / StepApplicationError: falha de um Step, com
                posição, id e tipo; nenhum estado é alterado.
        """
        retrain_all = _expect_bool(retrain_all, "retrain_all")
        retain = _expect_bool(self.options.retain if retain is None else retain, "retain")
        log_changes = _expect_bool(self.options.log_changes if log_changes is None else log_changes, "log_changes")
        sfactors = _expect_bool(
            self.options.strings_as_factors if strings_as_factors is None else strings_as_factors,
            "strings_as_factors",
        )

        self._raise_if_tunable()

        events = EventLog(recipe_id=self.recipe_id)
        steps = list(self.steps)
        pending = [s for s in steps if not s.trained]
        incremental = not retrain_all and len(pending) < len(steps)

        if incremental and not pending:
            events.log(step_id=None, level="info", message="all steps already trained", event_type="prepare_skipped")
            self.log.extend(events)
            return self

        if incremental:
            if not self.retained or self.template is None or self._running_log is None:
                raise ConfigurationError(
                    "Cannot continue training: the processed training table was not retained",
                    details={"trained_steps": len(steps) - len(pending)},
                    hint="Use prepare(retrain_all=True, training=...) ou prepare(retain=True).",
                )
            if training is not None:
                events.add_warning(
                    step_id=None,
                    message="`training` ignored: continuing from the retained training table",
                )
            table = self.template.copy()
            info = self.current_info
            running = self._running_log
            orig_levels = self.orig_levels
            sfactors = orig_levels is not None
            summary = self.training_summary
        else:
            table = self._training_table(training)
            info = self.original_info
            running = RunningLog().appended(info, number=0, skip=False)
            summary = train_info(table)
            orig_levels = None
            if sfactors:
                orig_levels = levels_of(table)
                table = strings_to_factors(table, orig_levels, "error")

        if any(s.skip for s in steps) and not retain:
            events.add_warning(
                step_id=None,
                message="Since some steps have `skip=True`, using `retain=True` keeps their results accessible",
            )

        events.log(
            step_id=None,
            level="info",
            message="prepare started",
            event_type="prepare_started",
            n_steps=len(steps),
            retrain_all=retrain_all,
            incremental=incremental,
        )

        for number, step in enumerate(steps, start=1):
            if step.trained and not retrain_all:
                events.log(
                    step_id=step.id,
                    level="info",
                    message="step already trained",
                    event_type="step_pretrained",
                    number=number,
                )
                continue

            before = info.variables()
            try:
                trained = step.estimate(table, info)
                if not getattr(trained, "trained", False):
                    raise StepEstimationError("estimate() must return a trained step")
            except Exception as e:
                err = _tag_step_failure(StepEstimationError, "estimation", number, step, e)
                self._record_failure(events, step, err)
                raise err from e

            try:
                result = trained.apply(table)
                _check_step_output(table, result)
            except Exception as e:
                err = _tag_step_failure(StepApplicationError, "training application", number, trained, e)
                self._record_failure(events, trained, err)
                raise err from e

            table = result
            info = info.merge_types(table, step_role=trained.role, history=running.seen())
            running = running.appended(info, number=number, skip=trained.skip)
            steps[number - 1] = trained

            events.log(
                step_id=trained.id,
                level="info",
                message="step trained",
                event_type="step_trained",
                number=number,
                type=step_type(trained),
                skip=trained.skip,
            )
            if log_changes:
                after = info.variables()
                events.log(
                    step_id=trained.id,
                    level="info",
                    message="columns changed",
                    event_type="columns_changed",
                    number=number,
                    added=[c for c in after if c not in before],
                    removed=[c for c in before if c not in after],
                )

        levels = None
        if sfactors:
            levels = levels_of(table)
            if all(v is None for v in levels.values()):
                levels = None

        # commit
        self.steps = steps
        self.current_info = info
        self._running_log = running
        self.historical_info = running.reduce_last_seen()
        self.orig_levels = orig_levels
        self.levels = levels
        self.training_summary = summary
        self.retained = retain
        self.template = table if retain else None

        events.log(
            step_id=None,
            level="info",
            message="prepare finished",
            event_type="prepare_finished",
            retained=retain,
            n_columns=len(info.variables()),
        )
        self.log.extend(events)
        return self

    def _record_failure(self, events: EventLog, step: Any, err: RecipeException) -> None:
        events.log(
            step_id=getattr(step, "id", None),
            level="error",
            message="step failed",
            event_type="step_failed",
            error=exception_to_payload(err).to_dict(),
        )
        self.log.extend(events)

    # ------------------------------------------------------------------
    # Aplicação
    # ------------------------------------------------------------------
    def apply(self, new_data: Any = None, *selectors: SelectorLike, composition: Optional[str] = None) -> Any:
        """
        Aplica a recipe treinada.

        - `new_data=None`: devolve a tabela de treino retida (inclui Steps skip).
        - caso contrário: replay dos Steps não-skip sobre uma cópia de `new_data`.

        Seletores vazios equivalem a `everything()`. Seleção vazia produz
        saída de zero colunas com o número de linhas da entrada.
        """
        composition = check_composition(self.options.composition if composition is None else composition)

        if not self.fully_trained:
            raise UnpreparedPipelineError(
                "At least one step has not been trained. Please run `prepare()`.",
                details={"untrained": [s.id for s in self.steps if not s.trained]},
            )

        if new_data is None:
            if not self.retained or self.template is None:
                raise UnpreparedPipelineError(
                    "The training data were not retained",
                    hint="Use `retain=True` em prepare() para acessar a tabela de treino processada.",
                )
            keepers = select_terms(selectors, self.current_info)
            columns = final_columns(list(self.template.columns), keepers, self.current_info, is_replay=False)
            return materialize(self._with_levels(self.template, columns), columns, composition)

        table = _as_frame(new_data, what="new_data").copy()
        policy = self.options.unseen_categories
        if self.orig_levels is not None:
            table = strings_to_factors(table, self.orig_levels, policy)

        has_skip = any(s.skip for s in self.steps)
        info = self.historical_info if has_skip and self.historical_info is not None else self.current_info
        keepers = select_terms(selectors, info)
        if not keepers:
            return materialize(table, [], composition)

        for number, step in enumerate(self.steps, start=1):
            if step.skip:
                continue
            try:
                result = step.apply(table)
                _check_step_output(table, result)
            except Exception as e:
                raise _tag_step_failure(StepApplicationError, "application", number, step, e) from e
            table = result

        columns = final_columns(list(table.columns), keepers, self.current_info, is_replay=True)
        return materialize(self._with_levels(table, columns), columns, composition)

    def _with_levels(self, table: Any, columns: Sequence[str]) -> Any:
        if self.levels is None:
            return table
        selected = {c: self.levels[c] for c in columns if self.levels.get(c) is not None}
        if not selected:
            return table
        return strings_to_factors(table, selected, self.options.unseen_categories)

    def juice(self, *selectors: SelectorLike, composition: Optional[str] = None) -> Any:
        return self.apply(None, *selectors, composition=composition)

    # ------------------------------------------------------------------
    # Introspecção
    # ------------------------------------------------------------------
    def describe(self, number: Optional[int] = None, id: Optional[str] = None) -> Any:
        import pandas as pd  # type: ignore

        n = len(self.steps)
        if n == 0:
            raise NotFoundError("No steps in recipe.")
        if number is not None and id is not None:
            raise ConfigurationError(
                "You may specify `number` or `id`, but not both.",
                details={"number": number, "id": id},
            )

        if number is None and id is None:
            return pd.DataFrame(
                [
                    {
                        "number": i,
                        "operation": s.operation.value,
                        "type": s.type_tag,
                        "trained": bool(s.trained),
                        "skip": bool(s.skip),
                        "id": s.id,
                    }
                    for i, s in enumerate(self.steps, start=1)
                ],
                columns=["number", "operation", "type", "trained", "skip", "id"],
            )

        if id is not None:
            ids = [s.id for s in self.steps]
            if id not in ids:
                raise NotFoundError("Supplied `id` not found in the recipe.", details={"id": id, "available": ids})
            number = ids.index(id) + 1

        if isinstance(number, bool) or not isinstance(number, Integral) or not 1 <= number <= n:
            raise NotFoundError(
                f"`number` should be a single value between 1 and {n}.",
                details={"number": number},
            )
        return self.steps[int(number) - 1].describe()

    def summary(self, original: bool = False) -> Any:
        info = self.original_info if original else self.current_info
        return info.to_frame()

    # ------------------------------------------------------------------
    # Estado persistível
    # ------------------------------------------------------------------
    def to_state(self) -> Dict[str, Any]:
        return {
            "recipe_id": self.recipe_id,
            "options": self.options.to_dict(),
            "original_info": self.original_info,
            "current_info": self.current_info,
            "historical_info": self.historical_info,
            "running_log": self._running_log,
            "steps": list(self.steps),
            "template": None if self.template is None else self.template.copy(),
            "levels": self.levels,
            "orig_levels": self.orig_levels,
            "fully_trained": self.fully_trained,
            "retained": self.retained,
            "training_summary": self.training_summary,
        }

    @classmethod
    def from_state(cls, state: Dict[str, Any], registry: Optional[StepRegistry] = None) -> "Recipe":
        if not isinstance(state, dict):
            raise ConfigurationError("Recipe state must be a dict", details={"received": type(state).__name__})
        missing = [k for k in _STATE_KEYS if k not in state]
        if missing:
            raise ConfigurationError("Invalid recipe state: missing keys", details={"missing": missing})

        registry = registry or StepRegistry.default()
        for number, step in enumerate(state["steps"], start=1):
            key = (getattr(step, "operation", None), getattr(step, "type_tag", None))
            if isinstance(key[0], StepOperation):
                key = (key[0].value, key[1])
            if key not in registry:
                raise NotFoundError(
                    f"Unknown step type in recipe state: {step_type(step)}",
                    details={**step_identity(number, step), "available": registry.names()},
                )

        recipe = cls.__new__(cls)
        recipe.recipe_id = state["recipe_id"]
        recipe.options = RecipeOptions(**state["options"])
        recipe.registry = registry
        recipe._declared = None
        recipe.original_info = state["original_info"]
        recipe.current_info = state["current_info"]
        recipe.historical_info = state["historical_info"]
        recipe._running_log = state["running_log"]
        recipe.steps = list(state["steps"])
        recipe.template = state["template"]
        recipe.levels = state["levels"]
        recipe.orig_levels = state["orig_levels"]
        recipe.retained = bool(state["retained"])
        recipe.training_summary = state["training_summary"]
        recipe.log = EventLog(recipe_id=recipe.recipe_id)

        if bool(state["fully_trained"]) != recipe.fully_trained:
            raise ConfigurationError(
                "Invalid recipe state: `fully_trained` does not match the steps",
                details={"fully_trained": state["fully_trained"]},
            )
        return recipe


def _check_step_output(before: Any, after: Any) -> None:
    import pandas as pd  # type: ignore

    if not isinstance(after, pd.DataFrame):
        raise StepApplicationError(
            "apply() must return a pandas DataFrame",
            details={"received": type(after).__name__},
        )
    if len(after) != len(before):
        raise StepApplicationError(
            "apply() must preserve the number of rows",
            details={"rows_before": int(len(before)), "rows_after": int(len(after))},
        )
