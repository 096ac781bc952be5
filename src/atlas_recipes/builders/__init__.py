# src/atlas_recipes/builders/__init__.py
from .recipe_builder import build_recipe

__all__ = ["build_recipe"]
