from .scores import (
    RiskCategory, ScoreResult, ScoreSummary, CalculationResults, DetailedResults,
    DataCompleteness, VitalScoresError, UnknownVitalSignError
)
from .vital_signs import VitalSigns, ConsciousnessLevel, FIELD_NAMES, FIELD_ALIASES

__all__ = [
    'RiskCategory',
    'ScoreResult',
    'ScoreSummary',
    'CalculationResults',
    'DetailedResults',
    'DataCompleteness',
    'VitalScoresError',
    'UnknownVitalSignError',
    'VitalSigns',
    'ConsciousnessLevel',
    'FIELD_NAMES',
    'FIELD_ALIASES'
]
