# src/atlas_recipes/steps/checks/__init__.py
"""Checks embutidos: validam invariantes e devolvem a tabela inalterada."""

from .cols import CheckCols
from .missing import CheckMissing

__all__ = ["CheckCols", "CheckMissing"]
