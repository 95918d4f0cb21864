"""
Unit tests for vital signs input validation.
"""

import pytest

from vital_scores.models.scores import UnknownVitalSignError
from vital_scores.models.vital_signs import VitalSigns, ConsciousnessLevel
from vital_scores.services.validation import (
    VitalSignsValidator, ValidationResult, FieldValidationConfig, parse_number,
    get_validation_message, get_validation_severity, has_validation_errors,
    get_validation_errors, can_submit_with_validation, get_validation_summary
)


@pytest.fixture
def validator():
    return VitalSignsValidator()


class TestHardRanges:
    """Hard physiological range checks per field."""

    @pytest.mark.parametrize("field_name, value, expected_valid", [
        ("respiratory_rate", 0, True),
        ("respiratory_rate", 60, True),
        ("respiratory_rate", 61, False),
        ("respiratory_rate", -1, False),
        ("heart_rate", 300, True),
        ("heart_rate", 301, False),
        ("systolic_bp", 50, True),
        ("systolic_bp", 49, False),
        ("systolic_bp", 301, False),
        ("temperature", 25.0, True),
        ("temperature", 45.0, True),
        ("temperature", 24.9, False),
        ("temperature", 45.1, False),
        ("oxygen_saturation", 70, True),
        ("oxygen_saturation", 100, True),
        ("oxygen_saturation", 69, False),
        ("oxygen_saturation", 101, False),
    ])
    def test_range_boundaries(self, validator, field_name, value, expected_valid):
        result = validator.validate_field(field_name, value)
        assert result.is_valid == expected_valid, f"{field_name}={value}: expected valid={expected_valid}"

    @pytest.mark.parametrize("field_name, value, expected_message", [
        ("respiratory_rate", 70, 'Respiratory rate must be between 0 and 60 breaths/min'),
        ("heart_rate", 320, 'Heart rate must be between 0 and 300 bpm'),
        ("systolic_bp", 30, 'Systolic blood pressure must be between 50 and 300 mmHg'),
        ("temperature", 50, 'Temperature must be between 25 and 45°C'),
        ("oxygen_saturation", 60, 'Oxygen saturation must be between 70 and 100%'),
    ])
    def test_range_error_messages(self, validator, field_name, value, expected_message):
        result = validator.validate_field(field_name, value)
        assert result.error_message == expected_message

    @pytest.mark.parametrize("field_name", [
        "respiratoryRate", "Respiratory Rate", "heart rate", "systolicBP", "blood pressure", "SpO2",
    ])
    def test_field_names_are_matched_loosely(self, validator, field_name):
        assert validator.validate_field(field_name, 999).is_valid is False

    def test_empty_value_is_valid_unless_required(self, validator):
        assert validator.validate_field("heart_rate", "").is_valid is True
        assert validator.validate_field("heart_rate", None).is_valid is True

        result = validator.validate_field("Heart rate", "", FieldValidationConfig(required=True))
        assert result.is_valid is False
        assert result.error_message == 'Heart rate is required'

    def test_unreadable_number(self, validator):
        result = validator.validate_field("heart_rate", "abc")
        assert result.is_valid is False
        assert result.error_message == 'heart_rate must be a valid number'

    def test_leading_number_is_used(self, validator):
        assert validator.validate_field("heart_rate", "72bpm").is_valid is True
        assert validator.validate_field("heart_rate", "350bpm").is_valid is False

    def test_unknown_field_uses_config_limits(self, validator):
        config = FieldValidationConfig(min_value=10, max_value=200)

        assert validator.validate_field("weight", 80, config).is_valid is True
        assert validator.validate_field("weight", 5, config).error_message == 'weight must be at least 10'
        assert validator.validate_field("weight", 250, config).error_message == 'weight must be no more than 200'
        assert validator.validate_field("weight", 5).is_valid is True


class TestConsciousnessValidation:

    @pytest.mark.parametrize("value", ["A", "C", "V", "P", "U", "a", "v", ConsciousnessLevel.PAIN, "", None])
    def test_accepted_values(self, validator, value):
        assert validator.validate_consciousness_level(value).is_valid is True

    @pytest.mark.parametrize("value", ["X", "Alert", 1])
    def test_rejected_values(self, validator, value):
        result = validator.validate_consciousness_level(value)
        assert result.is_valid is False
        assert result.error_message == VitalSignsValidator.CONSCIOUSNESS_MESSAGE


class TestInputChange:
    """Validation while a value is still being typed."""

    @pytest.mark.parametrize("partial", ["-", ".", "12."])
    def test_incomplete_number_warns(self, validator, partial):
        result = validator.validate_input_change("heart_rate", partial)

        assert result.is_valid is True
        assert result.warning_message == 'Enter a complete number'

    def test_empty_input_is_valid(self, validator):
        assert validator.validate_input_change("heart_rate", "") == ValidationResult(is_valid=True)

    def test_letters_in_numeric_field(self, validator):
        result = validator.validate_input_change("heart_rate", "abc")
        assert result.is_valid is False
        assert result.error_message == 'Please enter a valid number'

    def test_complete_input_gets_range_check(self, validator):
        assert validator.validate_input_change("heart_rate", "72").is_valid is True
        assert validator.validate_input_change("heart_rate", "350").is_valid is False


class TestPhysiologicalContext:
    """Errors for impossible values, warnings for unusual ones."""

    @pytest.mark.parametrize("field_name, value, expected_valid, expected_warning", [
        ("respiratory_rate", 16, True, None),
        ("respiratory_rate", 0, True, None),
        ("respiratory_rate", 5, True, 'Very low respiratory rate - please verify'),
        ("respiratory_rate", 35, True, 'High respiratory rate - please verify'),
        ("heart_rate", 25, True, 'Very low heart rate - please verify'),
        ("heart_rate", 160, True, 'High heart rate - please verify'),
        ("systolic_bp", 85, True, 'Low blood pressure - please verify'),
        ("systolic_bp", 190, True, 'High blood pressure - please verify'),
        ("temperature", 34.0, True, 'Low body temperature (hypothermia) - please verify'),
        ("temperature", 41.0, True, 'High fever - please verify'),
        ("oxygen_saturation", 85, True, 'Low oxygen saturation - please verify'),
        ("oxygen_saturation", 95, True, None),
    ])
    def test_warnings(self, validator, field_name, value, expected_valid, expected_warning):
        result = validator.validate_with_physiological_context(field_name, value)

        assert result.is_valid == expected_valid
        assert result.warning_message == expected_warning
        assert result.error_message is None

    @pytest.mark.parametrize("field_name, value, expected_error", [
        ("respiratory_rate", -1, 'Respiratory rate cannot be negative'),
        ("respiratory_rate", 61, 'Respiratory rate above 60 breaths/min is extremely high - please verify'),
        ("heart_rate", -5, 'Heart rate cannot be negative'),
        ("heart_rate", 301, 'Heart rate above 300 bpm is not physiologically possible'),
        ("systolic_bp", 45, 'Systolic blood pressure below 50 mmHg is critically low'),
        ("systolic_bp", 310, 'Systolic blood pressure above 300 mmHg is not physiologically possible'),
        ("temperature", 24, 'Temperature below 25°C is not compatible with life'),
        ("temperature", 46, 'Temperature above 45°C is not compatible with life'),
        ("oxygen_saturation", 65, 'Oxygen saturation below 70% is critically low'),
        ("oxygen_saturation", 101, 'Oxygen saturation cannot exceed 100%'),
    ])
    def test_errors(self, validator, field_name, value, expected_error):
        result = validator.validate_with_physiological_context(field_name, value)

        assert result.is_valid is False
        assert result.error_message == expected_error

    def test_required_empty_value(self, validator):
        result = validator.validate_with_physiological_context(
            "Heart rate", None, FieldValidationConfig(required=True)
        )
        assert result.error_message == 'Heart rate is required for accurate calculation'


class TestBatchValidation:

    def test_validate_vital_signs_only_checks_present_numeric_fields(self, validator):
        results = validator.validate_vital_signs(VitalSigns(heart_rate=350, temperature=37.0))

        assert set(results) == {'heart_rate', 'temperature'}
        assert results['heart_rate'].is_valid is False
        assert results['temperature'].is_valid is True

    def test_validate_all_vital_signs(self, validator, normal_vitals):
        results = validator.validate_all_vital_signs(normal_vitals)

        assert len(results) == 7
        assert all(result.is_valid for result in results.values())

    def test_validate_all_accepts_mapping_with_aliases(self, validator):
        results = validator.validate_all_vital_signs({"heartRate": 20, "consciousnessLevel": "Q"})

        assert results['heart_rate'].warning_message == 'Very low heart rate - please verify'
        assert results['consciousness_level'].is_valid is False

    def test_mapping_with_unknown_field_raises(self, validator):
        with pytest.raises(UnknownVitalSignError):
            validator.validate_all_vital_signs({"weight": 70})

    def test_qsofa_inputs(self, validator):
        vitals = VitalSigns(respiratory_rate=22, systolic_bp=40, heart_rate=500)
        results = validator.validate_qsofa_inputs(vitals)

        assert set(results) == {'respiratory_rate', 'systolic_bp'}
        assert results['respiratory_rate'].is_valid is True
        assert results['systolic_bp'].is_valid is False

    def test_is_qsofa_complete(self, validator):
        assert validator.is_qsofa_complete(VitalSigns(respiratory_rate=22, systolic_bp=100)) is False
        assert validator.is_qsofa_complete(
            VitalSigns(respiratory_rate=22, systolic_bp=100, consciousness_level="A")
        ) is True


class TestValidationReductions:

    @pytest.fixture
    def validation_state(self):
        return {
            'heart_rate': ValidationResult(is_valid=False, error_message='Heart rate cannot be negative'),
            'temperature': ValidationResult(is_valid=True, warning_message='High fever - please verify'),
            'respiratory_rate': ValidationResult(is_valid=True),
            'systolic_bp': ValidationResult(is_valid=False),
        }

    def test_error_and_warning_are_exclusive(self):
        with pytest.raises(ValueError):
            ValidationResult(is_valid=False, error_message='bad', warning_message='odd')

    def test_message(self, validation_state):
        assert get_validation_message('heart_rate', validation_state['heart_rate']) == 'Heart rate cannot be negative'
        assert get_validation_message('temperature', validation_state['temperature']) == 'High fever - please verify'
        assert get_validation_message('respiratory_rate', validation_state['respiratory_rate']) == ''
        assert get_validation_message('systolic_bp', validation_state['systolic_bp']) == 'Invalid systolic_bp'

    def test_severity(self, validation_state):
        assert get_validation_severity(validation_state['heart_rate']) == 'error'
        assert get_validation_severity(validation_state['temperature']) == 'warning'
        assert get_validation_severity(validation_state['respiratory_rate']) == 'none'
        assert get_validation_severity(None) == 'none'

    def test_errors_block_submission(self, validation_state):
        assert has_validation_errors(validation_state) is True
        assert can_submit_with_validation(validation_state) is False
        assert get_validation_errors(validation_state) == ['Heart rate cannot be negative']

    def test_warnings_do_not_block_submission(self, validation_state):
        del validation_state['heart_rate']
        del validation_state['systolic_bp']

        assert has_validation_errors(validation_state) is False
        assert can_submit_with_validation(validation_state) is True

    def test_empty_state_can_submit(self):
        assert can_submit_with_validation({}) is True

    def test_summary(self, validation_state):
        summary = get_validation_summary(validation_state)

        assert summary.error_count == 1
        assert summary.warning_count == 1
        assert summary.errors == ['Heart rate cannot be negative']
        assert summary.warnings == ['High fever - please verify']


class TestParseNumber:

    @pytest.mark.parametrize("value, expected", [
        (42, 42.0),
        ("36.6", 36.6),
        ("  98%", 98.0),
        ("12abc", 12.0),
        (".5", 0.5),
        ("-3", -3.0),
        ("1e2", 100.0),
    ])
    def test_readable_values(self, value, expected):
        assert parse_number(value) == expected

    @pytest.mark.parametrize("value", ["abc", "", "-", ".", None, True])
    def test_unreadable_values_give_nan(self, value):
        result = parse_number(value)
        assert result != result
