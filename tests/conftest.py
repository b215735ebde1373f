import json
from dataclasses import dataclass

import pytest

from opencloud import TransportResponse

BASE_URL = "https://apis.roblox.com"


@dataclass
class Call:
    url: str
    method: str
    headers: dict
    body: str | None


class FakeTransport:
    """Replays scripted responses and records every call.

    `sequence` is a list of response specs (the last one repeats) or a function
    taking the 0-based call index. A spec is a dict with `status`, optional
    `headers`, and optional `body` (str sent as-is, anything else JSON-encoded).
    """

    def __init__(self, sequence):
        self.sequence = sequence
        self.calls: list[Call] = []

    async def __call__(self, url, method, headers, body):
        self.calls.append(Call(url, method, dict(headers), body))
        idx = len(self.calls) - 1
        if callable(self.sequence):
            spec = self.sequence(idx)
        else:
            spec = self.sequence[min(idx, len(self.sequence) - 1)]
        raw = spec.get("body")
        if raw is None:
            text = ""
        elif isinstance(raw, str):
            text = raw
        else:
            text = json.dumps(raw)
        return TransportResponse(
            spec["status"], spec.get("headers", {"content-type": "application/json"}), text
        )


class SleepRecorder:
    def __init__(self):
        self.waits: list[float] = []

    async def __call__(self, seconds: float):
        self.waits.append(seconds)


@pytest.fixture
def make_transport():
    return FakeTransport


@pytest.fixture
def sleeper():
    return SleepRecorder()
