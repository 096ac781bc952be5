# src/atlas_recipes/core/traceability/__init__.py
"""
Rastreabilidade do Atlas Recipes.

API pública exposta:
    - EventLog → log estruturado de eventos e warnings de uma recipe
"""

from .event_log import EventLog

__all__ = ["EventLog"]
