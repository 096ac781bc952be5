# tests/core/config/test_merge.py
"""
Testes do deep-merge de configuração.

Política validada:
    - dict    → merge recursivo
    - list    → sobrescrita total
    - escalar → sobrescrita direta
    - None em qualquer lado → sobrescrita
    - conflito de tipos → ConfigTypeConflictError
"""

import pytest

from atlas_recipes.core.config.errors import ConfigTypeConflictError
from atlas_recipes.core.config.merge import deep_merge


def test_merge_simple_override():
    base = {"recipe": {"options": {"retain": True, "log_changes": False}}}
    override = {"recipe": {"options": {"log_changes": True}}}

    out = deep_merge(base, override)

    assert out == {"recipe": {"options": {"retain": True, "log_changes": True}}}


def test_merge_does_not_mutate_inputs():
    base = {"recipe": {"roles": {"y": "outcome"}}}
    override = {"recipe": {"roles": {"x": "predictor"}}}

    out = deep_merge(base, override)
    out["recipe"]["roles"]["z"] = "id"

    assert base == {"recipe": {"roles": {"y": "outcome"}}}
    assert override == {"recipe": {"roles": {"x": "predictor"}}}


def test_merge_list_override_total():
    base = {"recipe": {"steps": [{"type": "step_center"}, {"type": "step_scale"}]}}
    override = {"recipe": {"steps": [{"type": "step_rm", "terms": ["id"]}]}}

    out = deep_merge(base, override)

    assert out["recipe"]["steps"] == [{"type": "step_rm", "terms": ["id"]}]


def test_merge_none_replaces():
    out = deep_merge({"recipe": {"roles": {"y": "outcome"}}}, {"recipe": {"roles": None}})
    assert out == {"recipe": {"roles": None}}


def test_merge_type_conflict_raises():
    base = {"recipe": {"options": {"retain": True}}}
    override = {"recipe": {"options": "fast"}}

    with pytest.raises(ConfigTypeConflictError) as exc:
        deep_merge(base, override)

    assert "recipe.options" in str(exc.value)
