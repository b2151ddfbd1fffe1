import threading
import time

import pytest
import requests

from sketchcalc.board.judgment.client import AnalysisClient
from sketchcalc.board.session import BoardSession
from sketchcalc.board.surface import ContainerBox

BASE_URL = "http://calc.test"


class FakeResponse:
    def __init__(self, payload=None, status_code=200, invalid_json=False, gate=None):
        self.payload = payload
        self.status_code = status_code
        self.invalid_json = invalid_json
        self.gate = gate  # threading.Event the reply waits on

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


class FakeHttp:
    """Stands in for requests.Session; replies are handed out in call order."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []
        self._lock = threading.Lock()

    def post(self, url, json=None, timeout=None):
        with self._lock:
            self.calls.append({"url": url, "json": json, "timeout": timeout})
            idx = min(len(self.calls), len(self.replies)) - 1
        reply = self.replies[idx]
        if isinstance(reply, Exception):
            raise reply
        if not isinstance(reply, FakeResponse):
            reply = FakeResponse(reply)
        if reply.gate is not None:
            assert reply.gate.wait(5), "gate never released"
        return reply


def wait_until(predicate, timeout=5.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


@pytest.fixture
def fake_http():
    return lambda *replies: FakeHttp(replies)


@pytest.fixture
def reply():
    return FakeResponse


@pytest.fixture
def waiter():
    return wait_until


@pytest.fixture
def make_session():
    def build(*replies, width=200, height=100, scale=1.0):
        http = FakeHttp(replies or [{"data": []}])
        client = AnalysisClient(BASE_URL, timeout=5, http=http)
        session = BoardSession(client, ContainerBox(client_width=width, client_height=height), device_scale=scale)
        return session, http
    return build
