import logging
import math
from typing import Any, Optional

from ..models.scores import ScoreResult, RiskCategory
from ..models.vital_signs import (
    VitalSigns, ConsciousnessLevel,
    RESPIRATORY_RATE, OXYGEN_SATURATION, SUPPLEMENTAL_OXYGEN, TEMPERATURE,
    SYSTOLIC_BP, HEART_RATE, CONSCIOUSNESS_LEVEL
)

NEWS2_REQUIRED_FIELDS = (
    RESPIRATORY_RATE,
    OXYGEN_SATURATION,
    TEMPERATURE,
    SYSTOLIC_BP,
    HEART_RATE,
    CONSCIOUSNESS_LEVEL,
)


def as_number(value: Any) -> float:
    """
    Convert a stored observation to a float for bucket comparisons.

    Anything that is not a number (or a numeric string) becomes NaN, which
    fails every comparison and so drops through to the 0-point fallback.
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return math.nan
    return math.nan


class NEWS2Calculator:
    """
    NEWS2 (National Early Warning Score 2) calculator implementing RCP guidelines.

    Scores are only produced once every required observation is present;
    until then the result is incomplete rather than a zero score.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def calculate_news2(self, vital_signs: VitalSigns) -> ScoreResult:
        """
        Calculate NEWS2 score for the given vital signs snapshot.

        Args:
            vital_signs: Current observations; any of them may be missing

        Returns:
            ScoreResult with total score, risk category and per-parameter
            breakdown, or an incomplete result if a required field is missing
        """
        if vital_signs.get_missing_parameters(NEWS2_REQUIRED_FIELDS):
            return ScoreResult.incomplete()

        individual_scores = {
            RESPIRATORY_RATE: self._score_respiratory_rate(vital_signs.respiratory_rate),
            OXYGEN_SATURATION: self._score_oxygen_saturation(vital_signs.oxygen_saturation),
            SUPPLEMENTAL_OXYGEN: self._score_oxygen(vital_signs.supplemental_oxygen),
            TEMPERATURE: self._score_temperature(vital_signs.temperature),
            SYSTOLIC_BP: self._score_systolic_bp(vital_signs.systolic_bp),
            HEART_RATE: self._score_heart_rate(vital_signs.heart_rate),
            CONSCIOUSNESS_LEVEL: self._score_consciousness(vital_signs.consciousness_level),
        }

        total_score = sum(individual_scores.values())
        risk_category = self._assess_risk_category(total_score)

        self.logger.debug(f"NEWS2 calculation - Score: {total_score}, Risk: {risk_category.value}")

        return ScoreResult(
            score=total_score,
            risk_level=risk_category,
            is_complete=True,
            breakdown=individual_scores
        )

    def _score_respiratory_rate(self, value: Any) -> int:
        """Score respiratory rate according to NEWS2 guidelines."""
        respiratory_rate = as_number(value)
        if respiratory_rate <= 8:
            return 3
        elif 9 <= respiratory_rate <= 11:
            return 1
        elif 12 <= respiratory_rate <= 20:
            return 0
        elif 21 <= respiratory_rate <= 24:
            return 2
        elif respiratory_rate >= 25:
            return 3
        return 0

    def _score_oxygen_saturation(self, value: Any) -> int:
        """Score SpO2 according to NEWS2 Scale 1."""
        spo2 = as_number(value)
        if spo2 <= 91:
            return 3
        elif 92 <= spo2 <= 93:
            return 2
        elif 94 <= spo2 <= 95:
            return 1
        elif spo2 >= 96:
            return 0
        return 0

    def _score_oxygen(self, on_oxygen: Any) -> int:
        """Score supplemental oxygen usage."""
        return 2 if on_oxygen else 0

    def _score_temperature(self, value: Any) -> int:
        """Score temperature according to NEWS2 guidelines."""
        temperature = as_number(value)
        if temperature <= 35.0:
            return 3
        elif 35.1 <= temperature <= 36.0:
            return 1
        elif 36.1 <= temperature <= 38.0:
            return 0
        elif 38.1 <= temperature <= 39.0:
            return 1
        elif temperature >= 39.1:
            return 2
        return 0

    def _score_systolic_bp(self, value: Any) -> int:
        """Score systolic blood pressure according to NEWS2 guidelines."""
        systolic_bp = as_number(value)
        if systolic_bp <= 90:
            return 3
        elif 91 <= systolic_bp <= 100:
            return 2
        elif 101 <= systolic_bp <= 110:
            return 1
        elif 111 <= systolic_bp <= 219:
            return 0
        elif systolic_bp >= 220:
            return 3
        return 0

    def _score_heart_rate(self, value: Any) -> int:
        """Score heart rate according to NEWS2 guidelines."""
        heart_rate = as_number(value)
        if heart_rate <= 40:
            return 3
        elif 41 <= heart_rate <= 50:
            return 1
        elif 51 <= heart_rate <= 90:
            return 0
        elif 91 <= heart_rate <= 110:
            return 1
        elif 111 <= heart_rate <= 130:
            return 2
        elif heart_rate >= 131:
            return 3
        return 0

    def _score_consciousness(self, consciousness: Any) -> int:
        """Score consciousness level according to NEWS2 guidelines."""
        if consciousness == ConsciousnessLevel.ALERT:
            return 0
        else:  # CONFUSION, VOICE, PAIN, UNRESPONSIVE
            return 3

    def _assess_risk_category(self, total_score: int) -> RiskCategory:
        if total_score >= 7:
            return RiskCategory.HIGH
        elif total_score >= 5:
            return RiskCategory.MEDIUM
        return RiskCategory.LOW


def calculate_news2(vital_signs: VitalSigns, calculator: Optional[NEWS2Calculator] = None) -> ScoreResult:
    """Score a snapshot with NEWS2; see NEWS2Calculator.calculate_news2."""
    return (calculator or NEWS2Calculator()).calculate_news2(vital_signs)
