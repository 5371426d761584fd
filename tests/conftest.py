"""Shared fixtures for email plugin tests."""

import json

import httpx
import pytest

from email_plugin.actions.send_email import SendEmailPlugin


class RecordingTransport(httpx.MockTransport):
    """Mock SendGrid transport that records every request it receives."""

    def __init__(self, status_code: int = 202, body: str = ""):
        self.requests = []
        self.status_code = status_code
        self.body = body
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(
            self.status_code,
            text=self.body,
            headers={"X-Message-Id": "msg-123"},
        )

    @property
    def payloads(self):
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def plugin(transport):
    return SendEmailPlugin(transport=transport)


@pytest.fixture
def datasource():
    return {"authentication": {"custom": {"apiKey": {"value": "SG.test-key"}}}}


@pytest.fixture
def action():
    return {
        "emailFrom": "ops@example.com",
        "emailTo": "a@x.com, b@y.com",
        "emailCc": "",
        "emailBcc": "audit@z.com",
        "emailSubject": "Weekly report",
        "emailBody": "<p>Hello</p>",
    }


@pytest.fixture
def make_transport():
    return RecordingTransport
