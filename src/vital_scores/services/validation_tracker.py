import logging
import threading
from typing import Any, Dict, Optional

from ..models.vital_signs import CONSCIOUSNESS_LEVEL, FIELD_ALIASES
from .validation import (
    VitalSignsValidator, ValidationResult, ValidationSummary,
    has_validation_errors, can_submit_with_validation, get_validation_summary
)


class ValidationTracker:
    """
    Keeps the latest validation result for each field an input form has touched.

    Independent of UnifiedCalculationService: recording a value here never
    changes what gets scored.
    """

    def __init__(self, validator: Optional[VitalSignsValidator] = None):
        self.validator = validator or VitalSignsValidator()
        self.logger = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._state: Dict[str, ValidationResult] = {}

    def validate_vital_sign(self, field_name: str, value: Any) -> ValidationResult:
        """Validate one field the way the input form does, without recording it."""
        if FIELD_ALIASES.get(field_name, field_name) == CONSCIOUSNESS_LEVEL:
            return self.validator.validate_consciousness_level(value)
        if isinstance(value, bool):
            return ValidationResult(is_valid=True)
        return self.validator.validate_with_physiological_context(field_name, value)

    def record(self, field_name: str, value: Any) -> ValidationResult:
        """Validate a field and keep the result."""
        validation = self.validate_vital_sign(field_name, value)
        self.update_validation(field_name, validation)
        return validation

    def update_validation(self, field_name: str, validation: ValidationResult):
        with self._lock:
            self._state[field_name] = validation
        if not validation.is_valid:
            self.logger.debug(f"Field {field_name} failed validation: {validation.error_message}")

    def clear_validation(self, field_name: Optional[str] = None):
        """Forget one field's result, or all of them when no field is given."""
        with self._lock:
            if field_name is None:
                self._state.clear()
            else:
                self._state.pop(field_name, None)

    def reset(self):
        self.clear_validation()

    def get(self, field_name: str) -> Optional[ValidationResult]:
        with self._lock:
            return self._state.get(field_name)

    @property
    def validation_state(self) -> Dict[str, ValidationResult]:
        with self._lock:
            return dict(self._state)

    def has_errors(self) -> bool:
        return has_validation_errors(self.validation_state)

    def can_submit(self) -> bool:
        return can_submit_with_validation(self.validation_state)

    def summary(self) -> ValidationSummary:
        return get_validation_summary(self.validation_state)
