"""
Prometheus metrics for score calculation and snapshot updates.
"""

import logging
from typing import Optional

from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry, generate_latest

from ..models.scores import ScoreResult

logger = logging.getLogger(__name__)


class ScoringMetrics:
    """Collects calculation and notification metrics for the aggregator."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self._setup_prometheus_metrics()

    def _setup_prometheus_metrics(self):
        """Initialize Prometheus metrics."""
        self.calculations = Counter(
            'vital_scores_calculations_total',
            'Total number of score calculations',
            ['system', 'outcome'],
            registry=self.registry
        )

        self.scores = Histogram(
            'vital_scores_score',
            'Distribution of complete scores',
            ['system'],
            buckets=[0, 1, 2, 3, 4, 5, 6, 7, 10, 15, 20],
            registry=self.registry
        )

        self.mutations = Counter(
            'vital_scores_snapshot_mutations_total',
            'Snapshot mutations by operation',
            ['operation'],
            registry=self.registry
        )

        self.notifications = Counter(
            'vital_scores_notifications_total',
            'Subscriber callbacks invoked',
            ['result'],
            registry=self.registry
        )

        self.subscribers = Gauge(
            'vital_scores_subscribers',
            'Currently registered subscribers',
            registry=self.registry
        )

    def record_calculation(self, system: str, result: ScoreResult):
        outcome = 'complete' if result.is_complete else 'incomplete'
        self.calculations.labels(system=system, outcome=outcome).inc()
        if result.is_complete:
            self.scores.labels(system=system).observe(result.score)

    def record_mutation(self, operation: str):
        self.mutations.labels(operation=operation).inc()

    def record_notification(self, success: bool = True):
        self.notifications.labels(result='success' if success else 'error').inc()

    def set_subscriber_count(self, count: int):
        self.subscribers.set(count)

    def export(self) -> bytes:
        """Render all metrics in the Prometheus text format."""
        return generate_latest(self.registry)
