from .news2_calculator import NEWS2Calculator, calculate_news2, NEWS2_REQUIRED_FIELDS
from .qsofa_calculator import QSOFACalculator, calculate_qsofa, QSOFA_REQUIRED_FIELDS
from .calculation_service import UnifiedCalculationService
from .validation import (
    VitalSignsValidator, ValidationResult, FieldValidationConfig, ValidationSummary,
    get_validation_message, get_validation_severity, has_validation_errors,
    get_validation_errors, can_submit_with_validation, get_validation_summary
)
from .validation_tracker import ValidationTracker
from .metrics import ScoringMetrics

__all__ = [
    'NEWS2Calculator',
    'calculate_news2',
    'NEWS2_REQUIRED_FIELDS',
    'QSOFACalculator',
    'calculate_qsofa',
    'QSOFA_REQUIRED_FIELDS',
    'UnifiedCalculationService',
    'VitalSignsValidator',
    'ValidationResult',
    'FieldValidationConfig',
    'ValidationSummary',
    'get_validation_message',
    'get_validation_severity',
    'has_validation_errors',
    'get_validation_errors',
    'can_submit_with_validation',
    'get_validation_summary',
    'ValidationTracker',
    'ScoringMetrics'
]
