import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from ..models.vital_signs import (
    VitalSigns, ConsciousnessLevel, resolve_field_name,
    RESPIRATORY_RATE, OXYGEN_SATURATION, SUPPLEMENTAL_OXYGEN, TEMPERATURE,
    SYSTOLIC_BP, HEART_RATE, CONSCIOUSNESS_LEVEL
)


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error_message: Optional[str] = None
    warning_message: Optional[str] = None

    def __post_init__(self):
        if self.error_message and self.warning_message:
            raise ValueError("A validation result carries either an error or a warning, not both")


@dataclass
class FieldValidationConfig:
    required: bool = False
    min_value: Optional[float] = None
    max_value: Optional[float] = None


@dataclass
class ValidationSummary:
    error_count: int
    warning_count: int
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


ValidationState = Mapping[str, ValidationResult]

VALID = ValidationResult(is_valid=True)

NUMERIC_FIELDS = (RESPIRATORY_RATE, HEART_RATE, SYSTOLIC_BP, TEMPERATURE, OXYGEN_SATURATION)

# Field names as typed by callers, lower-cased with spaces and underscores removed
_FIELD_KEYS = {
    'respiratoryrate': RESPIRATORY_RATE,
    'heartrate': HEART_RATE,
    'systolicbp': SYSTOLIC_BP,
    'bloodpressure': SYSTOLIC_BP,
    'temperature': TEMPERATURE,
    'oxygensaturation': OXYGEN_SATURATION,
    'spo2': OXYGEN_SATURATION,
}

_LEADING_NUMBER = re.compile(r'\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?Infinity)')


def parse_number(value: Any) -> float:
    """
    Read a number the way a lenient text input does.

    Strings use their longest leading numeric prefix ("12abc" reads as 12);
    anything unreadable gives NaN.
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if match:
            return float(match.group(1).replace('Infinity', 'inf'))
    return math.nan


def _field_key(field_name: str) -> Optional[str]:
    normalized = field_name.lower().replace(' ', '').replace('_', '')
    return _FIELD_KEYS.get(normalized)


def _is_empty(value: Any) -> bool:
    return value is None or value == ''


class VitalSignsValidator:
    """
    Advisory range checks for vital sign input.

    Results never block storage or scoring; they are for warning the person
    entering data. Hard ranges (validate_<field>):
    - Respiratory Rate: 0-60 breaths/min
    - Heart Rate: 0-300 bpm
    - Systolic BP: 50-300 mmHg
    - Temperature: 25-45°C
    - Oxygen Saturation: 70-100%
    """

    RESPIRATORY_RATE_RANGE = (0, 60)
    HEART_RATE_RANGE = (0, 300)
    SYSTOLIC_BP_RANGE = (50, 300)
    TEMPERATURE_RANGE = (25.0, 45.0)
    OXYGEN_SATURATION_RANGE = (70, 100)
    VALID_CONSCIOUSNESS_LEVELS = {level.value for level in ConsciousnessLevel}

    CONSCIOUSNESS_MESSAGE = (
        'Consciousness level must be A (Alert), C (Confusion), V (Voice), P (Pain), or U (Unresponsive)'
    )
    INCOMPLETE_NUMBER_MESSAGE = 'Enter a complete number'

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._range_checks = {
            RESPIRATORY_RATE: self.validate_respiratory_rate,
            HEART_RATE: self.validate_heart_rate,
            SYSTOLIC_BP: self.validate_systolic_bp,
            TEMPERATURE: self.validate_temperature,
            OXYGEN_SATURATION: self.validate_oxygen_saturation,
        }
        self._context_checks = {
            RESPIRATORY_RATE: self._respiratory_rate_in_context,
            HEART_RATE: self._heart_rate_in_context,
            SYSTOLIC_BP: self._systolic_bp_in_context,
            TEMPERATURE: self._temperature_in_context,
            OXYGEN_SATURATION: self._oxygen_saturation_in_context,
        }

    def validate_respiratory_rate(self, value: float) -> ValidationResult:
        low, high = self.RESPIRATORY_RATE_RANGE
        if value < low or value > high:
            return ValidationResult(
                is_valid=False,
                error_message=f'Respiratory rate must be between {low} and {high} breaths/min'
            )
        return VALID

    def validate_heart_rate(self, value: float) -> ValidationResult:
        low, high = self.HEART_RATE_RANGE
        if value < low or value > high:
            return ValidationResult(is_valid=False, error_message=f'Heart rate must be between {low} and {high} bpm')
        return VALID

    def validate_systolic_bp(self, value: float) -> ValidationResult:
        low, high = self.SYSTOLIC_BP_RANGE
        if value < low or value > high:
            return ValidationResult(
                is_valid=False,
                error_message=f'Systolic blood pressure must be between {low} and {high} mmHg'
            )
        return VALID

    def validate_temperature(self, value: float) -> ValidationResult:
        low, high = self.TEMPERATURE_RANGE
        if value < low or value > high:
            return ValidationResult(
                is_valid=False,
                error_message=f'Temperature must be between {low:g} and {high:g}°C'
            )
        return VALID

    def validate_oxygen_saturation(self, value: float) -> ValidationResult:
        low, high = self.OXYGEN_SATURATION_RANGE
        if value < low or value > high:
            return ValidationResult(
                is_valid=False,
                error_message=f'Oxygen saturation must be between {low} and {high}%'
            )
        return VALID

    def validate_consciousness_level(self, value: Union[str, ConsciousnessLevel, None]) -> ValidationResult:
        if _is_empty(value) or isinstance(value, ConsciousnessLevel):
            return VALID
        if isinstance(value, str) and value.upper() in self.VALID_CONSCIOUSNESS_LEVELS:
            return VALID
        return ValidationResult(is_valid=False, error_message=self.CONSCIOUSNESS_MESSAGE)

    def validate_field(
        self,
        field_name: str,
        value: Union[float, str, None],
        config: Optional[FieldValidationConfig] = None
    ) -> ValidationResult:
        """
        Validate a single field against its hard physiological range.

        Empty values are valid unless the config marks the field required.
        Fields without a built-in range fall back to the config's min/max.
        """
        config = config or FieldValidationConfig()

        if _is_empty(value):
            if config.required:
                return ValidationResult(is_valid=False, error_message=f'{field_name} is required')
            return VALID

        number = parse_number(value)
        if math.isnan(number):
            return ValidationResult(is_valid=False, error_message=f'{field_name} must be a valid number')

        key = _field_key(field_name)
        if key is not None:
            return self._range_checks[key](number)
        return self._validate_generic_range(field_name, number, config)

    def validate_input_change(self, field_name: str, value: str) -> ValidationResult:
        """
        Validate text while it is being typed.

        A lone "-" or "." or a trailing decimal point is treated as unfinished
        input and only warned about.
        """
        if value == '':
            return VALID

        if value in ('.', '-') or value.endswith('.'):
            return ValidationResult(is_valid=True, warning_message=self.INCOMPLETE_NUMBER_MESSAGE)

        if _field_key(field_name) is not None and math.isnan(parse_number(value)):
            return ValidationResult(is_valid=False, error_message='Please enter a valid number')

        return self.validate_field(field_name, value)

    def validate_with_physiological_context(
        self,
        field_name: str,
        value: Union[float, str, None],
        config: Optional[FieldValidationConfig] = None
    ) -> ValidationResult:
        """
        Validate a field with clinical context.

        Only values that cannot occur in a living patient are errors;
        unusual but possible values stay valid and carry a warning.
        """
        config = config or FieldValidationConfig()

        if _is_empty(value):
            if config.required:
                return ValidationResult(
                    is_valid=False,
                    error_message=f'{field_name} is required for accurate calculation'
                )
            return VALID

        number = parse_number(value)
        if math.isnan(number):
            return ValidationResult(is_valid=False, error_message=f'{field_name} must be a valid number')

        key = _field_key(field_name)
        if key is not None:
            return self._context_checks[key](number)
        return self._validate_generic_range(field_name, number, config)

    def _respiratory_rate_in_context(self, value: float) -> ValidationResult:
        if value < 0:
            return ValidationResult(is_valid=False, error_message='Respiratory rate cannot be negative')
        if value > 60:
            return ValidationResult(
                is_valid=False,
                error_message='Respiratory rate above 60 breaths/min is extremely high - please verify'
            )
        if 0 < value < 8:
            return ValidationResult(is_valid=True, warning_message='Very low respiratory rate - please verify')
        if value > 30:
            return ValidationResult(is_valid=True, warning_message='High respiratory rate - please verify')
        return VALID

    def _heart_rate_in_context(self, value: float) -> ValidationResult:
        if value < 0:
            return ValidationResult(is_valid=False, error_message='Heart rate cannot be negative')
        if value > 300:
            return ValidationResult(
                is_valid=False,
                error_message='Heart rate above 300 bpm is not physiologically possible'
            )
        if 0 < value < 30:
            return ValidationResult(is_valid=True, warning_message='Very low heart rate - please verify')
        if value > 150:
            return ValidationResult(is_valid=True, warning_message='High heart rate - please verify')
        return VALID

    def _systolic_bp_in_context(self, value: float) -> ValidationResult:
        if value < 50:
            return ValidationResult(
                is_valid=False,
                error_message='Systolic blood pressure below 50 mmHg is critically low'
            )
        if value > 300:
            return ValidationResult(
                is_valid=False,
                error_message='Systolic blood pressure above 300 mmHg is not physiologically possible'
            )
        if value < 90:
            return ValidationResult(is_valid=True, warning_message='Low blood pressure - please verify')
        if value > 180:
            return ValidationResult(is_valid=True, warning_message='High blood pressure - please verify')
        return VALID

    def _temperature_in_context(self, value: float) -> ValidationResult:
        if value < 25:
            return ValidationResult(is_valid=False, error_message='Temperature below 25°C is not compatible with life')
        if value > 45:
            return ValidationResult(is_valid=False, error_message='Temperature above 45°C is not compatible with life')
        if value < 35:
            return ValidationResult(
                is_valid=True,
                warning_message='Low body temperature (hypothermia) - please verify'
            )
        if value > 40:
            return ValidationResult(is_valid=True, warning_message='High fever - please verify')
        return VALID

    def _oxygen_saturation_in_context(self, value: float) -> ValidationResult:
        if value < 70:
            return ValidationResult(is_valid=False, error_message='Oxygen saturation below 70% is critically low')
        if value > 100:
            return ValidationResult(is_valid=False, error_message='Oxygen saturation cannot exceed 100%')
        if value < 90:
            return ValidationResult(is_valid=True, warning_message='Low oxygen saturation - please verify')
        return VALID

    def _validate_generic_range(self, field_name: str, value: float, config: FieldValidationConfig) -> ValidationResult:
        if config.min_value is not None and value < config.min_value:
            return ValidationResult(is_valid=False, error_message=f'{field_name} must be at least {config.min_value}')
        if config.max_value is not None and value > config.max_value:
            return ValidationResult(
                is_valid=False,
                error_message=f'{field_name} must be no more than {config.max_value}'
            )
        return VALID

    def validate_vital_signs(self, vital_signs: Union[VitalSigns, Mapping[str, Any]]) -> Dict[str, ValidationResult]:
        """Hard-range check of every numeric field that is present."""
        values = self._present_values(vital_signs)
        return {
            name: self.validate_field(name, values[name])
            for name in NUMERIC_FIELDS if name in values
        }

    def validate_all_vital_signs(
        self, vital_signs: Union[VitalSigns, Mapping[str, Any]]
    ) -> Dict[str, ValidationResult]:
        """Physiological-context check of every field that is present."""
        values = self._present_values(vital_signs)
        results = {
            name: self.validate_with_physiological_context(name, values[name])
            for name in NUMERIC_FIELDS if name in values
        }
        if CONSCIOUSNESS_LEVEL in values:
            results[CONSCIOUSNESS_LEVEL] = self.validate_consciousness_level(values[CONSCIOUSNESS_LEVEL])
        if SUPPLEMENTAL_OXYGEN in values:
            results[SUPPLEMENTAL_OXYGEN] = VALID

        failures = sum(1 for result in results.values() if not result.is_valid)
        if failures:
            self.logger.debug(f"Vital signs validation found {failures} invalid field(s)")
        return results

    def validate_qsofa_inputs(self, vital_signs: Union[VitalSigns, Mapping[str, Any]]) -> Dict[str, ValidationResult]:
        """Hard-range check of the three q-SOFA inputs that are present."""
        values = self._present_values(vital_signs)
        results = {}
        if RESPIRATORY_RATE in values:
            results[RESPIRATORY_RATE] = self.validate_field(RESPIRATORY_RATE, values[RESPIRATORY_RATE])
        if SYSTOLIC_BP in values:
            results[SYSTOLIC_BP] = self.validate_field(SYSTOLIC_BP, values[SYSTOLIC_BP])
        if CONSCIOUSNESS_LEVEL in values:
            results[CONSCIOUSNESS_LEVEL] = self.validate_consciousness_level(values[CONSCIOUSNESS_LEVEL])
        return results

    def is_qsofa_complete(self, vital_signs: Union[VitalSigns, Mapping[str, Any]]) -> bool:
        values = self._present_values(vital_signs)
        return all(name in values for name in (RESPIRATORY_RATE, SYSTOLIC_BP, CONSCIOUSNESS_LEVEL))

    def _present_values(self, vital_signs: Union[VitalSigns, Mapping[str, Any]]) -> Dict[str, Any]:
        if isinstance(vital_signs, VitalSigns):
            items = vital_signs.to_dict().items()
        else:
            items = ((resolve_field_name(name), value) for name, value in vital_signs.items())
        return {name: value for name, value in items if value is not None}


def get_validation_message(field_name: str, validation: ValidationResult) -> str:
    if validation.is_valid:
        return validation.warning_message or ''
    return validation.error_message or f'Invalid {field_name}'


def get_validation_severity(validation: Optional[ValidationResult]) -> str:
    """Severity for styling a field: 'none', 'warning' or 'error'."""
    if validation is None:
        return 'none'
    if not validation.is_valid:
        return 'error'
    if validation.warning_message:
        return 'warning'
    return 'none'


def has_validation_errors(validation_state: ValidationState) -> bool:
    return any(not result.is_valid for result in validation_state.values())


def get_validation_errors(validation_state: ValidationState) -> List[str]:
    return [
        result.error_message for result in validation_state.values()
        if not result.is_valid and result.error_message
    ]


def can_submit_with_validation(validation_state: ValidationState) -> bool:
    return not has_validation_errors(validation_state)


def get_validation_summary(validation_state: ValidationState) -> ValidationSummary:
    errors = []
    warnings = []
    for result in validation_state.values():
        if not result.is_valid and result.error_message:
            errors.append(result.error_message)
        elif result.is_valid and result.warning_message:
            warnings.append(result.warning_message)

    return ValidationSummary(
        error_count=len(errors),
        warning_count=len(warnings),
        errors=errors,
        warnings=warnings
    )
