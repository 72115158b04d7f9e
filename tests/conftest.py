import time

import pytest


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    """Retry backoff and the commit-detail courtesy delay never actually wait in tests."""
    sleeps = []
    monkeypatch.setattr(time, "sleep", lambda seconds: sleeps.append(seconds))
    return sleeps
