#!/usr/bin/env python3
"""
Vital Scores Demo - Console Walkthrough
=======================================

Feeds a bedside round of observations into the calculation service one
field at a time and shows:
1. NEWS2 and q-SOFA updating as each observation arrives
2. Input validation warnings and errors
3. Data completeness per scoring system
4. Collected metrics

Usage: python simple_demo.py [config.yaml]
"""

import sys
import logging
from collections import Counter

from vital_scores.config import load_config, configure_logging, ConfigurationError
from vital_scores.models.scores import CalculationResults, ScoreSummary
from vital_scores.services.calculation_service import UnifiedCalculationService
from vital_scores.services.validation_tracker import ValidationTracker

logger = logging.getLogger(__name__)


class VitalScoresDemo:
    """Console demonstration of live NEWS2 and q-SOFA scoring."""

    def __init__(self, service: UnifiedCalculationService, tracker: ValidationTracker):
        self.service = service
        self.tracker = tracker
        self.notifications = []

        # Observation rounds, entered one field at a time
        self.scenarios = {
            'Normal': [
                ('respiratory_rate', 16), ('systolic_bp', 124), ('consciousness_level', 'A'),
                ('oxygen_saturation', 97), ('temperature', 36.8), ('heart_rate', 72),
            ],
            'Sepsis': [
                ('respiratory_rate', 24), ('systolic_bp', 96), ('consciousness_level', 'C'),
                ('oxygen_saturation', 93), ('temperature', 39.2), ('heart_rate', 118),
                ('supplemental_oxygen', True),
            ],
            'Critical': [
                ('respiratory_rate', 8), ('oxygen_saturation', 90), ('supplemental_oxygen', True),
                ('temperature', 35.0), ('systolic_bp', 85), ('heart_rate', 130), ('consciousness_level', 'V'),
            ],
            'Entry errors': [
                ('heart_rate', 'abc'), ('temperature', 41.5), ('systolic_bp', 320),
                ('respiratory_rate', 20), ('consciousness_level', 'A'),
            ],
        }

    def on_results(self, results: CalculationResults):
        self.notifications.append(results)

    def run_scenario(self, name: str, observations):
        print(f"\n{'='*72}")
        print(f"SCENARIO: {name}")
        print(f"{'='*72}")
        print(f"{'Field':<22} {'Value':<8} {'NEWS2':<14} {'q-SOFA':<14} {'Check'}")
        print("-" * 72)

        self.service.reset()
        self.tracker.reset()

        for field_name, value in observations:
            validation = self.tracker.record(field_name, value)
            self.service.update_vital_signs({field_name: value})

            latest = self.notifications[-1]
            check = validation.error_message or validation.warning_message or 'ok'
            print(f"{field_name:<22} {str(value):<8} "
                  f"{self._format(latest.news2):<14} {self._format(latest.qsofa):<14} {check}")

        self.print_completeness()
        summary = self.tracker.summary()
        print(f"Validation:   {summary.error_count} error(s), {summary.warning_count} warning(s), "
              f"can submit: {self.tracker.can_submit()}")

    def print_completeness(self):
        for system, completeness in self.service.get_data_completeness().items():
            missing = ', '.join(completeness.missing_fields) or 'none'
            print(f"{system.upper():<6} data: {completeness.completion_percentage:>3}% (missing: {missing})")

    def print_summary_stats(self):
        """Print summary statistics."""
        final = [r for r in self.notifications if r.news2.is_complete]
        risk_counts = Counter(r.news2.risk_level.value.upper() for r in final)

        print(f"\n{'='*72}")
        print(f"SUMMARY ({len(self.notifications)} notifications)")
        print(f"{'='*72}")
        print(f"Complete NEWS2 results: {len(final)}")
        print(f"NEWS2 risk distribution: {dict(risk_counts)}")
        print(f"Subscribers: {self.service.subscriber_count}")

        if self.service.metrics:
            print("\nMETRICS:")
            for line in self.service.metrics.export().decode().splitlines():
                if line.startswith('vital_scores_') and not line.startswith('vital_scores_score_bucket'):
                    print(f"  {line}")

    def run_demo(self):
        print("Vital Scores Demo - NEWS2 and q-SOFA")

        unsubscribe = self.service.subscribe(self.on_results)
        try:
            for name, observations in self.scenarios.items():
                self.run_scenario(name, observations)
        finally:
            unsubscribe()

        self.print_summary_stats()

    @staticmethod
    def _format(summary: ScoreSummary) -> str:
        if not summary.is_complete:
            return 'incomplete'
        return f"{summary.score} ({summary.risk_level.value})"


def main():
    config_path = sys.argv[1] if len(sys.argv) > 1 else None
    config = load_config(config_path)
    configure_logging(config)
    logger.info(f"Starting demo in {config.environment} environment")

    demo = VitalScoresDemo(UnifiedCalculationService(config=config), ValidationTracker())
    demo.run_demo()


if __name__ == "__main__":
    try:
        main()
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n\nDemo interrupted.")
