# tests/e2e/test_recipe_e2e.py
"""
Cenário ponta a ponta do Atlas Recipes.

Fluxo exercitado (somente APIs públicas):
    config (defaults + local) → build_recipe → prepare → RecipeStore.save
    → RecipeStore.load (novo processo lógico) → apply em dados novos

Garantias:
    - o apply do artefato carregado é idêntico ao da recipe original
    - execuções independentes com a mesma config produzem a mesma saída
    - o Event Log registra o ciclo completo (prepare + artefato)
"""

from pathlib import Path

import numpy as np
import pandas as pd

from atlas_recipes import load_config
from atlas_recipes.builders import build_recipe
from atlas_recipes.persistence import RecipeStore

DEFAULTS = """
recipe:
  id: houses
  options:
    retain: true
    unseen_categories: missing
    log_changes: true
  roles:
    price: outcome
    sqft: predictor
    rooms: predictor
    zone: predictor
    listing_id: id
  steps:
    - type: check_cols
      terms: ["all_predictors()"]
    - type: step_impute_median
      terms: ["all_numeric_predictors()"]
    - type: step_impute_mode
      terms: ["zone"]
    - type: step_normalize
      terms: ["all_numeric_predictors()"]
    - type: step_dummy
      terms: ["all_nominal_predictors()"]
    - type: step_rm
      terms: ["has_role(outcome)"]
      skip: true
"""

LOCAL = """
recipe:
  options:
    composition: dataframe
"""


def _houses(n: int, seed: int) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    sqft = rng.normal(120.0, 30.0, n)
    sqft[::7] = np.nan
    zone = rng.choice(["north", "south", "east"], n).astype(object)
    zone[::5] = None
    return pd.DataFrame(
        {
            "listing_id": np.arange(n),
            "sqft": sqft,
            "rooms": rng.integers(1, 6, n).astype(float),
            "zone": zone,
            "price": rng.normal(300.0, 50.0, n),
        }
    )


def _run(run_dir: Path, train: pd.DataFrame):
    run_dir.mkdir(parents=True, exist_ok=True)
    (run_dir / "config.defaults.yaml").write_text(DEFAULTS, encoding="utf-8")
    (run_dir / "config.local.yaml").write_text(LOCAL, encoding="utf-8")

    cfg = load_config(
        defaults_path=run_dir / "config.defaults.yaml",
        local_path=run_dir / "config.local.yaml",
    )
    recipe = build_recipe(train, cfg).prepare()
    RecipeStore(run_dir=run_dir).save(recipe)
    return recipe


def test_recipe_e2e(tmp_path: Path):
    train = _houses(40, seed=1)
    new = _houses(10, seed=2).assign(zone=["west"] + ["north"] * 9)

    recipe = _run(tmp_path / "run_a", train)
    loaded = RecipeStore(run_dir=tmp_path / "run_a").load()

    out = recipe.apply(new)
    pd.testing.assert_frame_equal(loaded.apply(new), out)

    # o outcome removido por Step skip continua presente no replay
    assert "price" in out.columns
    assert "price" not in recipe.juice().columns

    assert "zone" not in out.columns
    assert {"zone_north", "zone_south"} <= set(out.columns)
    # categoria nova vira ausente e é imputada pela moda do treino
    assert not out[["zone_north", "zone_south"]].isna().any().any()
    assert not out["sqft"].isna().any()

    again = _run(tmp_path / "run_b", train)
    pd.testing.assert_frame_equal(again.apply(new), out)

    types = [e.get("event_type") for e in recipe.log.events]
    assert types[0] == "prepare_started"
    assert "prepare_finished" in types
    assert types[-1] == "artifact_saved"
    assert len(recipe.log.of_type("columns_changed")) == 6
