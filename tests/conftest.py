"""
Pytest configuration and fixtures for labflow tests

This module provides shared fixtures for unit and integration tests.
"""
from datetime import datetime, timezone
from pathlib import Path

import pytest

from labflow.core.rules import QualityGate, build_gate_rules
from labflow.pipeline import Pipeline

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Validation time used by every deterministic test
FIXED_NOW = datetime(2026, 2, 1, tzinfo=timezone.utc)
FIXED_ISO = "2026-02-01T00:00:00.000Z"


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that run the full pipeline or CLI"
    )


# =======================
# CLOCK FIXTURES
# =======================

@pytest.fixture
def fixed_now() -> datetime:
    """Validation time for deterministic gate tests"""
    return FIXED_NOW


@pytest.fixture
def fixed_clock():
    """Clock returning FIXED_NOW"""
    return lambda: FIXED_NOW


@pytest.fixture
def fixed_timestamp_clock():
    """ISO timestamp clock for audit entries and processedAt"""
    return lambda: FIXED_ISO


# =======================
# PIPELINE FIXTURES
# =======================

@pytest.fixture
def gate(fixed_clock) -> QualityGate:
    """Quality gate with default reference data and a fixed clock"""
    return QualityGate(build_gate_rules(), clock=fixed_clock)


@pytest.fixture
def pipeline(fixed_clock, fixed_timestamp_clock) -> Pipeline:
    """Pipeline with fixed clocks"""
    return Pipeline(clock=fixed_clock, timestamp_clock=fixed_timestamp_clock)


@pytest.fixture
def valid_record() -> dict:
    """A raw record that passes every rule at FIXED_NOW"""
    return {
        "id": "SMP-0001",
        "patientId": "PAT-001",
        "specimenType": "BLOOD",
        "status": "RECEIVED",
        "value": 85.2,
        "unit": "MG/DL",
        "collectedAt": "2026-01-15T09:00:00Z",
        "accession": "ACC-2026-0001",
    }


# =======================
# FILE FIXTURES
# =======================

@pytest.fixture(scope="session")
def test_data_dir() -> Path:
    """
    Get path to test data fixtures directory

    Returns:
        Path to tests/fixtures directory
    """
    return FIXTURES_DIR


@pytest.fixture(scope="session")
def sample_json_text() -> str:
    """12-record JSON example batch (10 valid, 2 quarantined)"""
    return (FIXTURES_DIR / "samples.json").read_text(encoding="utf-8")


@pytest.fixture(scope="session")
def sample_xml_text() -> str:
    """12-record XML example batch (10 valid, 2 quarantined)"""
    return (FIXTURES_DIR / "samples.xml").read_text(encoding="utf-8")


# =======================
# CONFIGURATION FIXTURES
# =======================

@pytest.fixture
def clean_env(monkeypatch):
    """
    Remove labflow variables from the environment

    Tests pass an explicit env_file so a developer .env is never read.
    """
    for name in ("LABFLOW_SLA_MS", "LABFLOW_RULES_PATH", "LOG_LEVEL", "LOG_FORMAT"):
        # setenv first so the variable is restored or removed afterwards
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield monkeypatch
