"""Builder canônico: recipe declarativa (v1).

Constrói uma `Recipe` de forma **determinística** e **declarativa**, guiada
exclusivamente pela configuração resolvida (ver `core.config.load_config`).

Regras (v1):
- Não infere papéis: `recipe.roles` lista explicitamente `{coluna: papel}`;
  colunas ausentes do mapeamento ficam sem papel.
- Steps são criados pelo registry a partir do nome textual `type`
  (`step_center`, `check_missing`, ...).
- Seletores são textuais (`"all_numeric()"`, `"-id"`, `"starts_with(x_)"`).
- O Builder **não executa** `prepare()`.

Config esperada (exemplo):

recipe:
  roles:
    price: outcome
    sqft: predictor
  options:
    retain: true
    unseen_categories: missing
  steps:
    - type: step_impute_median
      terms: [all_numeric_predictors()]
    - type: step_rm
      terms: [id]
      skip: true
    - type: step_scale
      terms: [sqft]
      params:
        factor: 2

Limites explícitos:
- Fora de escopo: parsing de fórmulas, inferência de tipos.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from atlas_recipes.core.config.options import options_from_config
from atlas_recipes.core.exceptions import ConfigurationError
from atlas_recipes.core.recipe.recipe import Recipe
from atlas_recipes.core.recipe.registry import StepRegistry
from atlas_recipes.core.recipe.selectors import parse_selector

_STEP_KEYS = {"type", "terms", "id", "skip", "role", "params"}


def _is_non_empty_str(x: Any) -> bool:
    return isinstance(x, str) and bool(x.strip())


def _expect(cond: bool, msg: str, **details: Any) -> None:
    if not cond:
        raise ConfigurationError(msg, details=details)


def _get_recipe_cfg(config: Dict[str, Any]) -> Dict[str, Any]:
    _expect(isinstance(config, dict), "Invalid config: root must be a mapping")
    rec = config.get("recipe")
    _expect(isinstance(rec, dict), "Invalid config: recipe section is required and must be a mapping")
    return rec


def _normalize_roles(rec: Dict[str, Any], columns: List[str]) -> Optional[Dict[str, str]]:
    roles = rec.get("roles")
    if roles is None:
        return None
    _expect(isinstance(roles, dict), "Invalid config: recipe.roles must be a mapping")
    for col, role in roles.items():
        _expect(col in columns, f"Invalid config: recipe.roles column not found in data: {col}", column=col)
        _expect(_is_non_empty_str(role), f"Invalid config: recipe.roles.{col} must be a non-empty string", column=col)
    return {str(c): str(r).strip() for c, r in roles.items()}


def _normalize_steps(rec: Dict[str, Any]) -> List[Dict[str, Any]]:
    steps = rec.get("steps", [])
    if steps is None:
        steps = []
    _expect(isinstance(steps, list), "Invalid config: recipe.steps must be a list")

    out: List[Dict[str, Any]] = []
    for i, s in enumerate(steps):
        where = f"recipe.steps[{i}]"
        _expect(isinstance(s, dict), f"Invalid config: {where} must be a mapping", index=i)

        unknown = sorted(set(s) - _STEP_KEYS)
        _expect(not unknown, f"Invalid config: unknown keys in {where}: {unknown}", index=i)
        _expect(_is_non_empty_str(s.get("type")), f"Invalid config: {where}.type is required", index=i)

        terms = s.get("terms", [])
        if isinstance(terms, str):
            terms = [terms]
        _expect(isinstance(terms, list), f"Invalid config: {where}.terms must be a list", index=i)

        params = s.get("params", {})
        if params is None:
            params = {}
        _expect(isinstance(params, dict), f"Invalid config: {where}.params must be a mapping", index=i)

        kwargs: Dict[str, Any] = dict(params)
        clash = sorted(set(kwargs) & {"terms", "id", "skip", "role", "trained"})
        _expect(not clash, f"Invalid config: {where}.params cannot override {clash}", index=i)

        kwargs["terms"] = tuple(parse_selector(t) for t in terms)
        if "id" in s:
            _expect(_is_non_empty_str(s["id"]), f"Invalid config: {where}.id must be a non-empty string", index=i)
            kwargs["id"] = str(s["id"]).strip()
        if "skip" in s:
            _expect(isinstance(s["skip"], bool), f"Invalid config: {where}.skip must be boolean", index=i)
            kwargs["skip"] = s["skip"]
        if "role" in s:
            _expect(
                s["role"] is None or _is_non_empty_str(s["role"]),
                f"Invalid config: {where}.role must be a string or null",
                index=i,
            )
            kwargs["role"] = s["role"]

        out.append({"type": str(s["type"]).strip(), "kwargs": kwargs})
    return out


def build_recipe(data: Any, config: Dict[str, Any], registry: Optional[StepRegistry] = None) -> Recipe:
    """Constrói uma Recipe (não treinada) a partir da configuração.

    Args:
        data: Tabela de declaração (pandas DataFrame ou lista de dicts).
        config: Config efetiva (dict), contendo a seção `recipe`.
        registry: Registry de Steps (padrão: `StepRegistry.default()`).

    Returns:
        Recipe
    """
    import pandas as pd  # type: ignore

    rec = _get_recipe_cfg(config)
    options = options_from_config(config)
    registry = registry or StepRegistry.default()

    table = data if isinstance(data, pd.DataFrame) else pd.DataFrame(data)
    columns = [str(c) for c in table.columns]
    roles = _normalize_roles(rec, columns)

    recipe_id = rec.get("id")
    _expect(recipe_id is None or _is_non_empty_str(recipe_id), "Invalid config: recipe.id must be a non-empty string")

    recipe = Recipe(
        table,
        roles=None if roles is None else [roles.get(c) for c in columns],
        registry=registry,
        options=options,
        recipe_id=recipe_id,
    )

    for spec in _normalize_steps(rec):
        step_cls = registry.resolve(spec["type"])
        try:
            step = step_cls(**spec["kwargs"])
        except TypeError as e:
            raise ConfigurationError(
                f"Invalid parameters for {spec['type']}: {e}",
                details={"type": spec["type"], "params": sorted(spec["kwargs"])},
            ) from e
        recipe.add_step(step)

    return recipe


__all__ = ["build_recipe"]
