import logging
import threading
from contextlib import nullcontext
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..config import ScoringConfig
from ..models.scores import CalculationResults, DataCompleteness, DetailedResults
from ..models.vital_signs import (
    VitalSigns, RESPIRATORY_RATE, OXYGEN_SATURATION, SUPPLEMENTAL_OXYGEN, TEMPERATURE,
    SYSTOLIC_BP, HEART_RATE, CONSCIOUSNESS_LEVEL
)
from .metrics import ScoringMetrics
from .news2_calculator import NEWS2Calculator, NEWS2_REQUIRED_FIELDS
from .qsofa_calculator import QSOFACalculator, QSOFA_REQUIRED_FIELDS

ResultsCallback = Callable[[CalculationResults], None]


class _Subscription:
    """One registration of a callback; removed by its own unsubscribe handle."""

    __slots__ = ('callback',)

    def __init__(self, callback: ResultsCallback):
        self.callback = callback


class UnifiedCalculationService:
    """
    Holds the current vital signs snapshot and keeps NEWS2 and q-SOFA in sync with it.

    Every update or reset merges into the snapshot, recomputes both scores
    once from that same snapshot, and calls every subscriber synchronously
    in the order they subscribed before returning.
    """

    def __init__(
        self,
        news2_calculator: Optional[NEWS2Calculator] = None,
        qsofa_calculator: Optional[QSOFACalculator] = None,
        config: Optional[ScoringConfig] = None,
        metrics: Optional[ScoringMetrics] = None
    ):
        self.config = config or ScoringConfig()
        self.news2_calculator = news2_calculator or NEWS2Calculator()
        self.qsofa_calculator = qsofa_calculator or QSOFACalculator()
        if metrics is None and self.config.metrics_enabled:
            metrics = ScoringMetrics()
        self.metrics = metrics
        self.logger = logging.getLogger(__name__)

        self._lock = threading.RLock() if self.config.thread_safe else nullcontext()
        self._vital_signs = VitalSigns()
        self._subscriptions: List[_Subscription] = []

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def subscribe(self, callback: ResultsCallback) -> Callable[[], None]:
        """
        Subscribe to calculation updates.

        The callback is invoked once straight away with the current results.

        Args:
            callback: Function to call with CalculationResults on every change

        Returns:
            Function that removes this subscription; calling it again is a no-op
        """
        if not callable(callback):
            raise TypeError("Subscriber callback must be callable")

        subscription = _Subscription(callback)
        with self._lock:
            self._subscriptions.append(subscription)
            self._record_subscriber_count()
            self.logger.debug(f"Subscriber added, {len(self._subscriptions)} registered")
            self._deliver(subscription, self.calculate_both_scores())

        def unsubscribe():
            with self._lock:
                if subscription in self._subscriptions:
                    self._subscriptions.remove(subscription)
                    self._record_subscriber_count()
                    self.logger.debug(f"Subscriber removed, {len(self._subscriptions)} registered")

        return unsubscribe

    def update_vital_signs(self, updates: Optional[Mapping[str, Any]] = None, **fields: Any):
        """
        Merge vital sign updates into the snapshot and notify subscribers.

        Fields may be given as a mapping, as keyword arguments, or both.
        A field set to None is cleared; fields not mentioned keep their value.

        Raises:
            UnknownVitalSignError: If an update names an unknown field
        """
        changes = dict(updates or {})
        changes.update(fields)

        with self._lock:
            self._vital_signs = self._vital_signs.with_updates(changes)
            self.logger.debug(f"Vital signs updated: {', '.join(sorted(changes)) or 'no fields'}")
            if self.metrics:
                self.metrics.record_mutation('update')
            self._notify_subscribers()

    def get_current_vital_signs(self) -> VitalSigns:
        """Return a copy of the snapshot; changing it does not affect the service."""
        with self._lock:
            return self._vital_signs.copy()

    def reset(self):
        """Reset all vital signs to the empty snapshot and notify subscribers."""
        with self._lock:
            self._vital_signs = VitalSigns()
            self.logger.debug("Vital signs reset")
            if self.metrics:
                self.metrics.record_mutation('reset')
            self._notify_subscribers()

    def calculate_both_scores(self) -> CalculationResults:
        """Calculate NEWS2 and q-SOFA from the current snapshot without notifying anyone."""
        detailed = self.get_detailed_results()
        return CalculationResults(news2=detailed.news2.summary(), qsofa=detailed.qsofa.summary())

    def get_detailed_results(self) -> DetailedResults:
        """Calculation results including the per-parameter breakdowns."""
        with self._lock:
            snapshot = self._vital_signs.copy()

        news2 = self.news2_calculator.calculate_news2(snapshot)
        qsofa = self.qsofa_calculator.calculate_qsofa(snapshot)
        if self.metrics:
            self.metrics.record_calculation('news2', news2)
            self.metrics.record_calculation('qsofa', qsofa)
        return DetailedResults(news2=news2, qsofa=qsofa)

    def get_data_completeness(self) -> Dict[str, DataCompleteness]:
        """Missing fields and completion percentage for each scoring system."""
        with self._lock:
            snapshot = self._vital_signs.copy()

        return {
            'news2': self._check_completeness(snapshot, NEWS2_REQUIRED_FIELDS),
            'qsofa': self._check_completeness(snapshot, QSOFA_REQUIRED_FIELDS),
        }

    def get_field_requirements(self) -> Dict[str, List[str]]:
        """Fields each scoring system reads, and the ones they share."""
        # includes supplemental oxygen, which NEWS2 scores but never waits for
        news2_fields = [
            RESPIRATORY_RATE,
            OXYGEN_SATURATION,
            SUPPLEMENTAL_OXYGEN,
            TEMPERATURE,
            SYSTOLIC_BP,
            HEART_RATE,
            CONSCIOUSNESS_LEVEL,
        ]
        qsofa_fields = list(QSOFA_REQUIRED_FIELDS)
        shared_fields = [name for name in news2_fields if name in qsofa_fields]

        return {
            'news2': news2_fields,
            'qsofa': qsofa_fields,
            'shared': shared_fields,
        }

    def get_minimum_data_requirements(self) -> Dict[str, List[str]]:
        """Fields that must be entered before each score can be produced."""
        for_either = [name for name in NEWS2_REQUIRED_FIELDS if name in QSOFA_REQUIRED_FIELDS]
        return {
            'for_news2': list(NEWS2_REQUIRED_FIELDS),
            'for_qsofa': list(QSOFA_REQUIRED_FIELDS),
            'for_either': for_either,
        }

    def has_any_calculable_data(self) -> bool:
        results = self.calculate_both_scores()
        return results.news2.is_complete or results.qsofa.is_complete

    def _check_completeness(self, snapshot: VitalSigns, required_fields) -> DataCompleteness:
        missing_fields = snapshot.get_missing_parameters(required_fields)
        completed = len(required_fields) - len(missing_fields)
        completion_percentage = round(completed / len(required_fields) * 100)

        return DataCompleteness(
            is_complete=not missing_fields,
            missing_fields=missing_fields,
            completion_percentage=completion_percentage
        )

    def _notify_subscribers(self):
        """Must be called with the lock held."""
        results = self.calculate_both_scores()
        for subscription in list(self._subscriptions):
            self._deliver(subscription, results)

    def _deliver(self, subscription: _Subscription, results: CalculationResults):
        try:
            subscription.callback(results)
        except Exception:
            if self.metrics:
                self.metrics.record_notification(success=False)
            if not self.config.isolate_subscriber_errors:
                raise
            self.logger.exception("Subscriber callback failed, continuing with remaining subscribers")
        else:
            if self.metrics:
                self.metrics.record_notification()

    def _record_subscriber_count(self):
        if self.metrics:
            self.metrics.set_subscriber_count(len(self._subscriptions))
