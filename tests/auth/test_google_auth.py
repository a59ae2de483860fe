"""
Unit tests for service account credential loading.
"""

import pytest
from unittest.mock import Mock
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))

from auth import google_auth
from core.utils import UserInputError


def test_rejects_invalid_json():
    with pytest.raises(UserInputError, match="not valid JSON"):
        google_auth.load_credentials("{not json")


def test_rejects_non_object():
    with pytest.raises(UserInputError, match="JSON object"):
        google_auth.load_credentials("[]")


def test_rejects_incomplete_service_account():
    with pytest.raises(UserInputError, match="Invalid service account"):
        google_auth.load_credentials("{}")


def test_build_services_builds_three_clients(monkeypatch):
    credentials = Mock(service_account_email="bot@example.iam.gserviceaccount.com")
    monkeypatch.setattr(google_auth, "load_credentials", lambda _: credentials)
    built = []

    def fake_build(name, version, credentials=None, cache_discovery=True):
        built.append((name, version, cache_discovery))
        return f"{name}-client"

    monkeypatch.setattr(google_auth, "build", fake_build)

    services = google_auth.build_services("{}")

    assert services.sheets == "sheets-client"
    assert services.drive == "drive-client"
    assert services.gmail == "gmail-client"
    assert built == [("sheets", "v4", False), ("drive", "v3", False), ("gmail", "v1", False)]
