from __future__ import annotations

import json

import pytest


class FakeConnection:
    """Collects every message sent to it, decoded from JSON."""

    def __init__(self, name: str = "client") -> None:
        self.name = name
        self.messages: list[dict] = []

    async def send_text(self, data: str) -> None:
        self.messages.append(json.loads(data))

    @property
    def types(self) -> list[str]:
        return [m["type"] for m in self.messages]

    def __repr__(self) -> str:
        return f"FakeConnection({self.name!r})"


class BrokenConnection(FakeConnection):
    """Fails every send after the first *ok_sends*."""

    def __init__(self, name: str = "broken", ok_sends: int = 0) -> None:
        super().__init__(name)
        self.ok_sends = ok_sends

    async def send_text(self, data: str) -> None:
        if self.ok_sends <= 0:
            raise ConnectionResetError("socket closed")
        self.ok_sends -= 1
        await super().send_text(data)


@pytest.fixture
def fake_connection():
    return FakeConnection


@pytest.fixture
def broken_connection():
    return BrokenConnection
