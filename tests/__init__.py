"""
MedTracker Test Suite
=====================

This package contains all tests for the MedTracker backend.

Test Structure:
- test_engine/: Scheduling, adherence, trend and validation unit tests
- test_services/: Service-layer tests against an in-memory database
- test_api/: API endpoint tests for FastAPI routes
- conftest.py: Shared pytest fixtures

Running Tests:
    # Run all tests
    pytest

    # Run specific test module
    pytest tests/test_engine/

    # Run only marked tests
    pytest -m "unit"
    pytest -m "api"
"""

# Test configuration
TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_USER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_USER_ID = "22222222-2222-2222-2222-222222222222"
TEST_USER_EMAIL = "test.user@example.com"
TEST_TOKEN = "test-access-token"

# Common test data
SAMPLE_MEDICINES = [
    {"name": "Metformin", "dose": "500mg", "schedule_type": "interval", "interval_minutes": 720},
    {"name": "Lisinopril", "dose": "10mg", "schedule_type": "interval", "interval_minutes": 1440},
    {"name": "Omeprazole", "dose": "20mg", "schedule_type": "meal_based", "meal_timing": ["before_meal"]},
]

__all__ = [
    "TEST_DATABASE_URL",
    "TEST_USER_ID",
    "OTHER_USER_ID",
    "TEST_USER_EMAIL",
    "TEST_TOKEN",
    "SAMPLE_MEDICINES",
]
