"""
Pytest configuration and fixtures for baud tests.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

import pytest

from baud.config import reset_settings
from baud.exceptions import NotConnectedError
from baud.terminal.editor import END_OF_INPUT


class FakeTransport:
    """In-memory transport: queued inbound chunks, recorded outbound bytes."""

    def __init__(self, chunks: Iterable[bytes] = (), *, hold_open: bool = True) -> None:
        self.inbound: asyncio.Queue[bytes | Exception] = asyncio.Queue()
        for chunk in chunks:
            self.inbound.put_nowait(chunk)
        if not hold_open:
            self.inbound.put_nowait(b"")
        self.sent: list[bytes] = []
        self.connected = True
        self.closed = False
        self.write_error: Exception | None = None

    @property
    def is_connected(self) -> bool:
        return self.connected

    @property
    def sent_bytes(self) -> bytes:
        return b"".join(self.sent)

    def feed(self, chunk: bytes | Exception) -> None:
        self.inbound.put_nowait(chunk)

    async def read_chunk(self, size: int = 4096) -> bytes:
        item = await self.inbound.get()
        if isinstance(item, Exception):
            raise item
        if not item:
            self.connected = False
        return item

    async def write(self, data: bytes) -> None:
        if not self.connected:
            raise NotConnectedError()
        if self.write_error is not None:
            raise self.write_error
        self.sent.append(data)

    def close(self) -> None:
        self.closed = True
        self.connected = False


class FakeTerminal:
    """In-memory terminal: scripted keyboard units, recorded display output."""

    def __init__(self, units: Iterable[str] = (), *, eof: bool = True) -> None:
        self.units: asyncio.Queue[str] = asyncio.Queue()
        for unit in units:
            self.units.put_nowait(unit)
        self.eof = eof
        self.output: list[str] = []
        self.write_error: Exception | None = None

    @property
    def text(self) -> str:
        return "".join(self.output)

    def type(self, text: str) -> None:
        for unit in text:
            self.units.put_nowait(unit)

    async def read(self, timeout: float | None = None) -> str | None:
        if self.units.empty():
            if self.eof:
                return END_OF_INPUT
            await asyncio.sleep(timeout or 0)
            return None
        return self.units.get_nowait()

    def write(self, text: str) -> None:
        if self.write_error is not None:
            raise self.write_error
        self.output.append(text)


class RecordingDisplay:
    """Display sink for the line editor."""

    def __init__(self) -> None:
        self.writes: list[str] = []

    @property
    def text(self) -> str:
        return "".join(self.writes)

    def write(self, text: str) -> None:
        self.writes.append(text)

    def clear(self) -> None:
        self.writes.clear()


@pytest.fixture(autouse=True)
def clean_settings():
    """Every test starts from default settings."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def display() -> RecordingDisplay:
    return RecordingDisplay()


@pytest.fixture
def make_transport():
    """Factory for FakeTransport instances."""
    return FakeTransport


@pytest.fixture
def make_terminal():
    """Factory for FakeTerminal instances."""
    return FakeTerminal
