"""
Database models for Brewlog.

Import all models here so Alembic can detect them for migrations.
"""

from brewlog.database import Base
from brewlog.models.user import User
from brewlog.models.session import Session
from brewlog.models.experiment import Experiment
from brewlog.models.effect_mapping import (
    EffectMapping,
    Effect,
    InputVariable,
    OutputVariable,
    MappingDirection,
    EffectDirection,
    Confidence,
    CONFIDENCE_WEIGHTS,
)
from brewlog.models.dismissal import ExperimentMappingDismissal

__all__ = [
    "Base",
    "User",
    "Session",
    "Experiment",
    "EffectMapping",
    "Effect",
    "InputVariable",
    "OutputVariable",
    "MappingDirection",
    "EffectDirection",
    "Confidence",
    "CONFIDENCE_WEIGHTS",
    "ExperimentMappingDismissal",
]
