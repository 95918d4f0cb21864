import logging
from typing import Any, Optional

from ..models.scores import ScoreResult, RiskCategory
from ..models.vital_signs import (
    VitalSigns, ConsciousnessLevel, RESPIRATORY_RATE, SYSTOLIC_BP, CONSCIOUSNESS_LEVEL
)
from .news2_calculator import as_number

QSOFA_REQUIRED_FIELDS = (
    RESPIRATORY_RATE,
    SYSTOLIC_BP,
    CONSCIOUSNESS_LEVEL,
)


class QSOFACalculator:
    """
    q-SOFA (quick Sequential Organ Failure Assessment) calculator.

    Criteria, one point each:
    - Respiratory rate >= 22 breaths/min
    - Systolic blood pressure <= 100 mmHg
    - Altered consciousness (anything other than Alert)

    A score of 2 or more indicates high risk of sepsis-related complications.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def calculate_qsofa(self, vital_signs: VitalSigns) -> ScoreResult:
        """
        Calculate q-SOFA score for the given vital signs snapshot.

        Only respiratory rate, systolic BP and consciousness level are read;
        other observations neither affect the score nor its completeness.
        """
        if vital_signs.get_missing_parameters(QSOFA_REQUIRED_FIELDS):
            return ScoreResult.incomplete()

        individual_scores = {
            RESPIRATORY_RATE: self._score_respiratory_rate(vital_signs.respiratory_rate),
            SYSTOLIC_BP: self._score_systolic_bp(vital_signs.systolic_bp),
            CONSCIOUSNESS_LEVEL: self._score_consciousness(vital_signs.consciousness_level),
        }

        total_score = sum(individual_scores.values())
        risk_category = RiskCategory.HIGH if total_score >= 2 else RiskCategory.LOW

        self.logger.debug(f"q-SOFA calculation - Score: {total_score}, Risk: {risk_category.value}")

        return ScoreResult(
            score=total_score,
            risk_level=risk_category,
            is_complete=True,
            breakdown=individual_scores
        )

    def _score_respiratory_rate(self, value: Any) -> int:
        return 1 if as_number(value) >= 22 else 0

    def _score_systolic_bp(self, value: Any) -> int:
        return 1 if as_number(value) <= 100 else 0

    def _score_consciousness(self, consciousness: Any) -> int:
        return 0 if consciousness == ConsciousnessLevel.ALERT else 1


def calculate_qsofa(vital_signs: VitalSigns, calculator: Optional[QSOFACalculator] = None) -> ScoreResult:
    """Score a snapshot with q-SOFA; see QSOFACalculator.calculate_qsofa."""
    return (calculator or QSOFACalculator()).calculate_qsofa(vital_signs)
