"""
Tests for root endpoints and error envelopes
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient


class TestRootEndpoints:

    @pytest.mark.api
    def test_root(self, client: TestClient):
        data = client.get("/").json()

        assert data["name"] == "MedTracker"
        assert data["endpoints"]["medicines"] == "/api/medicines"

    @pytest.mark.api
    def test_health(self, client: TestClient):
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["database"] == "connected"

    @pytest.mark.api
    def test_not_found_envelope(self, client: TestClient):
        data = client.get("/api/weights/does-not-exist").json()

        assert data["error"] is True
        assert data["status_code"] == 404
        assert "timestamp" in data
