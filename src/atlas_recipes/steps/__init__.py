# src/atlas_recipes/steps/__init__.py
"""
Variantes embutidas de Step.

`BUILTIN_STEPS` é a lista registrada por `StepRegistry.default()`, na
ordem em que aparece em `registry.names()`.
"""

from .base import BaseStep
from .checks import CheckCols, CheckMissing
from .transform import (
    StepCenter,
    StepDummy,
    StepImputeMean,
    StepImputeMedian,
    StepImputeMode,
    StepNormalize,
    StepRename,
    StepRm,
    StepScale,
)

BUILTIN_STEPS = (
    StepCenter,
    StepScale,
    StepNormalize,
    StepImputeMean,
    StepImputeMedian,
    StepImputeMode,
    StepRm,
    StepRename,
    StepDummy,
    CheckMissing,
    CheckCols,
)

__all__ = [
    "BUILTIN_STEPS",
    "BaseStep",
    "CheckCols",
    "CheckMissing",
    "StepCenter",
    "StepDummy",
    "StepImputeMean",
    "StepImputeMedian",
    "StepImputeMode",
    "StepNormalize",
    "StepRename",
    "StepRm",
    "StepScale",
]
