# tests/errors/test_error_payload.py
"""
Testes do mapeamento de exceções para RecipeErrorPayload.

Garantem que erros tipados preservam mensagem, details e hint, e que
exceções não tipadas viram RECIPE_EXECUTION_ERROR sem expor stack trace.
Erros tipados mantêm o tipo ao atravessar blocos `with`.
"""

from contextlib import contextmanager

import pytest

from atlas_recipes import Recipe
from atlas_recipes.core.errors import (
    CONFIGURATION_ERROR,
    RECIPE_EXECUTION_ERROR,
    STEP_ESTIMATION_ERROR,
    exception_to_payload,
)
from atlas_recipes.core.exceptions import DuplicateStepIdError, StepEstimationError, UnpreparedPipelineError


def test_typed_exception_maps_to_stable_code():
    exc = StepEstimationError(
        "All columns selected for the step should be numeric",
        details={"columns": ["color"], "number": 1},
        hint="fix it",
    )

    payload = exception_to_payload(exc).to_dict()

    assert payload == {
        "type": STEP_ESTIMATION_ERROR,
        "message": "All columns selected for the step should be numeric",
        "details": {"columns": ["color"], "number": 1},
        "hint": "fix it",
    }


def test_subclasses_share_parent_code():
    payload = exception_to_payload(DuplicateStepIdError("Duplicate step id: a", details={"id": "a"}))
    assert payload.type == CONFIGURATION_ERROR


def test_untyped_exception_is_wrapped():
    payload = exception_to_payload(ValueError("boom"))

    assert payload.type == RECIPE_EXECUTION_ERROR
    assert payload.message == "boom"
    assert payload.details == {"exception_class": "ValueError"}
    assert payload.hint


@contextmanager
def _scope():
    yield


def test_typed_exception_keeps_type_through_context_manager(train_df, new_df):
    rec = Recipe(train_df).step("center", "x1")

    with pytest.raises(UnpreparedPipelineError) as exc:
        with _scope():
            rec.apply(new_df)

    assert exc.value.details["untrained"] == [rec.steps[0].id]
    assert exc.value.__traceback__ is not None
