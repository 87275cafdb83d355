"""Unit test configuration - isolated environment, no external services"""

import os

import pytest

# CRITICAL: Set env vars BEFORE importing sprint_lab.main
# main.py loads .env files and builds services from the environment
os.environ.setdefault("SESSION_SECRET", "unit-test-session-secret-with-enough-bytes")
os.environ.setdefault("ADMIN_API_KEY", "unit-test-admin-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

# Remote services must never be reached from unit tests
for _name in ("DATABASE_URL", "GEMINI_API_KEY", "PARTNER_CLIENT_ID", "PARTNER_CLIENT_SECRET", "LOCAL_STORE_PATH"):
    os.environ.pop(_name, None)

ADMIN_KEY = os.environ["ADMIN_API_KEY"]


@pytest.fixture
def admin_headers():
    """Headers for admin-only routes"""
    return {"X-Admin-Key": ADMIN_KEY}


@pytest.fixture
def users():
    return [
        {"id": "u1", "name": "Ana", "role": "distributor"},
        {"id": "u2", "name": "Bruno", "role": "distributor"},
        {"id": "u3", "name": "Carla", "role": "distributor"},
        {"id": "adm", "name": "Admin", "role": "admin"},
    ]
