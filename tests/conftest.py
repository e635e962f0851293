"""
Shared fixtures: a fake requests.Session factory and a clean BRANCH_* env.
"""

import pytest

from branch_remote import Preferences, RemoteInterface

BRANCH_VARS = (
    "BRANCH_KEY",
    "BRANCH_APP_KEY",
    "BRANCH_TIMEOUT_MS",
    "BRANCH_RETRY_COUNT",
    "BRANCH_RETRY_INTERVAL_MS",
    "BRANCH_DEBUG",
    "BRANCH_WARN_MAIN_THREAD",
)


class FakeResponse:
    """Serves its body through iter_content in small chunks, so line
    assembly across chunk boundaries gets exercised."""

    chunk = 4

    def __init__(self, status_code, body="", headers=None, fail_with=None):
        self.status_code = status_code
        self.body = body
        self.headers = headers or {}
        self.encoding = None
        self.closed = False
        self.consumed = 0
        self.fail_with = fail_with

    def iter_content(self, chunk_size=1, decode_unicode=False):
        for i in range(0, len(self.body), self.chunk):
            piece = self.body[i:i + self.chunk]
            self.consumed = i + len(piece)
            yield piece if decode_unicode else piece.encode("utf-8")
            if self.fail_with is not None:
                raise self.fail_with

    def close(self):
        self.closed = True


class FakeSession:
    def __init__(self, factory):
        self.factory = factory
        self.closed = False

    def request(self, method, url, **kwargs):
        self.factory.calls.append({"method": method, "url": url, **kwargs})
        outcome = self.factory.next_outcome()
        if isinstance(outcome, BaseException):
            raise outcome
        response = outcome if isinstance(outcome, FakeResponse) else FakeResponse(*outcome)
        self.factory.responses.append(response)
        return response

    def close(self):
        self.closed = True


class FakeSessionFactory:
    """Hands out FakeSessions that answer from a script of outcomes.

    Each outcome is (status, body), a FakeResponse, or an exception to
    raise. The last outcome repeats once the script runs out.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes) or [(200, "{}")]
        self.sessions = []
        self.calls = []
        self.responses = []

    def next_outcome(self):
        if len(self.outcomes) > 1:
            return self.outcomes.pop(0)
        return self.outcomes[0]

    def __call__(self):
        session = FakeSession(self)
        self.sessions.append(session)
        return session


class SleepRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # set-then-delete registers each var with monkeypatch, so anything a
    # .env file loads during a test is removed again afterwards
    for name in BRANCH_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def prefs():
    return Preferences(branch_key="key_test_abc", retry_count=3, retry_interval=1000, timeout=5500)


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def make_client(prefs, sleeper):
    def _make(*outcomes, preferences=None):
        factory = FakeSessionFactory(*outcomes)
        client = RemoteInterface(preferences or prefs, sleep=sleeper, session_factory=factory)
        return client, factory
    return _make
