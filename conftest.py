"""
Global pytest configuration for the vital scores engine.

Registers markers and provides the shared fixtures used across the
unit and integration suites.
"""

import pytest
import sys
import os

from prometheus_client import CollectorRegistry

# Add src directory to Python path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from vital_scores.config import ScoringConfig
from vital_scores.models.vital_signs import VitalSigns, ConsciousnessLevel
from vital_scores.services.calculation_service import UnifiedCalculationService
from vital_scores.services.metrics import ScoringMetrics


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "critical_safety: Clinical scoring tests that must NEVER fail"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring multiple components"
    )
    config.addinivalue_line(
        "markers", "unit: Unit tests for individual components"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add automatic markers."""
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)

        if "unit" in item.nodeid:
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def metrics():
    """Metrics on a private registry so tests do not share counters."""
    return ScoringMetrics(registry=CollectorRegistry())


@pytest.fixture
def service(metrics):
    """Fresh calculation service for each test."""
    return UnifiedCalculationService(config=ScoringConfig(environment="testing"), metrics=metrics)


@pytest.fixture
def normal_vitals():
    """Complete vital signs scoring 0 on both systems."""
    return VitalSigns(
        respiratory_rate=16,
        oxygen_saturation=98,
        supplemental_oxygen=False,
        temperature=37.0,
        systolic_bp=120,
        heart_rate=70,
        consciousness_level=ConsciousnessLevel.ALERT
    )
