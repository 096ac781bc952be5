# src/atlas_recipes/persistence/__init__.py
from .recipe_store import RecipeStore

__all__ = ["RecipeStore"]
