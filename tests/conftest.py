"""Global test fixtures and configuration."""

import os
import sys

import pytest

# Make sure the package is importable without installing it
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from dexcom_share_client import DexcomShareClient

BASE_URL = "https://share.test/ShareWebServices/Services"

INVALID_JSON = object()


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, body, status_code=200):
        self._body = body
        self.status_code = status_code

    def json(self):
        if self._body is INVALID_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._body


class FakeSession:
    """Call-counting transport returning queued responses in order."""

    def __init__(self, *responses):
        self.headers = {}
        self.calls = []
        self.closed = False
        self._responses = list(responses)

    def queue(self, *responses):
        self._responses.extend(responses)

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        self.closed = True

    def endpoints(self):
        return [call["url"][len(BASE_URL) + 1:] for call in self.calls]


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def client(fake_session):
    return DexcomShareClient("alice", "s3cret", base_url=BASE_URL, session=fake_session)


@pytest.fixture
def sample_records():
    return [
        {"WT": "Date(1609459500000)", "ST": "Date(1609459500000)", "Trend": "FortyFiveUp", "Value": 132},
        {"WT": "Date(1609459200000)", "ST": "Date(1609459200000)", "Trend": "Flat", "Value": 120},
    ]
