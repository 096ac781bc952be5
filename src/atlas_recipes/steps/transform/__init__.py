# src/atlas_recipes/steps/transform/__init__.py
"""Steps de transformação embutidos."""

from .columns import StepRename, StepRm
from .dummy import StepDummy
from .impute import StepImputeMean, StepImputeMedian, StepImputeMode
from .normalize import StepCenter, StepNormalize, StepScale

__all__ = [
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
