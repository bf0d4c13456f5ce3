import json

import pytest

from spo.client import SpoClient
from spo.telemetry import MemoryTelemetry

WEB_URL = "https://contoso.sharepoint.com"
ADMIN_URL = "https://contoso-admin.sharepoint.com"
PROCESS_QUERY = "/_vti_bin/client.svc/ProcessQuery"
CONTEXT_INFO = "/_api/contextinfo"
DIGEST = "0x1234,18 Sep 2018 11:00:00 -0000"


def header(error_info=None) -> dict:
    return {
        "SchemaVersion": "15.0.0.0",
        "LibraryVersion": "16.0.7911.1206",
        "ErrorInfo": error_info,
        "TraceCorrelationId": "b33c489e-009b-5000-8240-a8c28e5fd8b4",
    }


def error_response(message: str) -> str:
    return json.dumps([
        header({
            "ErrorMessage": message,
            "ErrorValue": None,
            "TraceCorrelationId": "b33c489e-009b-5000-8240-a8c28e5fd8b4",
            "ErrorCode": -2146233088,
            "ErrorTypeName": "System.InvalidOperationException",
        })
    ])


@pytest.fixture(autouse=True)
def spo_env(monkeypatch):
    monkeypatch.setenv("SPO_URL", WEB_URL)
    monkeypatch.setenv("SPO_ACCESS_TOKEN", "test-token")
    monkeypatch.setenv("SPO_APPLICATION_NAME", "spo-test")
    monkeypatch.delenv("SPO_DISABLE_TELEMETRY", raising=False)


@pytest.fixture
def client():
    return SpoClient(access_token="test-token", spo_url=WEB_URL, application_name="spo-test")


@pytest.fixture
def telemetry():
    return MemoryTelemetry()


@pytest.fixture
def digest(requests_mock):
    requests_mock.post(f"{WEB_URL}{CONTEXT_INFO}", json={"FormDigestValue": DIGEST})
    requests_mock.post(f"{ADMIN_URL}{CONTEXT_INFO}", json={"FormDigestValue": DIGEST})
    return DIGEST
