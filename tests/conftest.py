"""
Shared fixtures and sample API documents for the test suite.
"""

import json

import pytest
from unittest.mock import Mock, patch

from appstore_review import AppStoreConnectAPI

BASE_URL = "https://api.appstoreconnect.apple.com/v1"
APP_ID = "1234567890"


def make_response(status_code=200, payload=None, text=None):
    """Build a mock requests.Response."""
    response = Mock()
    response.status_code = status_code
    if payload is None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
        response.content = b""
        response.text = text or ""
    else:
        response.json.return_value = payload
        response.content = json.dumps(payload).encode("utf-8")
        response.text = text or json.dumps(payload)
    return response


def submission_record(submission_id="sub-1", state="READY_FOR_REVIEW", submitted_date=None):
    """A reviewSubmissions resource as the API returns it."""
    return {
        "type": "reviewSubmissions",
        "id": submission_id,
        "attributes": {
            "platform": "IOS",
            "state": state,
            "submittedDate": submitted_date,
        },
        "relationships": {
            "app": {"data": {"type": "apps", "id": APP_ID}},
            "items": {
                "data": [{"type": "reviewSubmissionItems", "id": "item-1"}],
                "meta": {"paging": {"total": 1, "limit": 10}},
            },
        },
        "links": {"self": f"{BASE_URL}/reviewSubmissions/{submission_id}"},
    }


def item_record(item_id="item-1", state="READY_FOR_REVIEW"):
    """A reviewSubmissionItems resource as the API returns it."""
    return {
        "type": "reviewSubmissionItems",
        "id": item_id,
        "attributes": {"state": state},
        "relationships": {
            "appStoreVersion": {"data": {"type": "appStoreVersions", "id": "ver-1"}}
        },
        "links": {"self": f"{BASE_URL}/reviewSubmissionItems/{item_id}"},
    }


APP_RECORD = {
    "type": "apps",
    "id": APP_ID,
    "attributes": {
        "name": "Test App",
        "bundleId": "com.test.app",
        "sku": "APP123",
        "primaryLocale": "en-US",
    },
    "links": {"self": f"{BASE_URL}/apps/{APP_ID}"},
}

VERSION_RECORD = {
    "type": "appStoreVersions",
    "id": "ver-1",
    "attributes": {
        "platform": "IOS",
        "versionString": "2.1.0",
        "appStoreState": "PREPARE_FOR_SUBMISSION",
        "createdDate": "2024-05-01T10:00:00-07:00",
    },
    "links": {"self": f"{BASE_URL}/appStoreVersions/ver-1"},
}


@pytest.fixture
def api_client():
    """Create a test API client instance."""
    with patch("pathlib.Path.exists", return_value=True):
        return AppStoreConnectAPI(
            key_id="test_key",
            issuer_id="test_issuer",
            private_key_path="/tmp/test_key.p8",
        )


@pytest.fixture
def mock_request(api_client):
    """Patch the HTTP layer and token generation; yields the requests.request mock."""
    with patch.object(AppStoreConnectAPI, "_generate_token", return_value="test_token"):
        with patch("requests.request") as mock:
            yield mock
