import pytest

import settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    """Every test starts from default settings, whatever the shell exported."""
    for key in list(settings._ENV_KEYS.values()):
        monkeypatch.delenv(key, raising=False)
    settings.reset_settings()
    yield
    settings.reset_settings()


class RecordingTranscript:
    """Transcript stand-in that records every call in order."""

    def __init__(self):
        self.events = []

    def append_message(self, label, data):
        self.events.append(("append", label, bytes(data)))

    def challenge_bytes(self, label, n):
        self.events.append(("challenge", label, n))
        return bytes([len(self.events) % 256]) * n


@pytest.fixture
def recorder():
    return RecordingTranscript()
