"""Shared test fixtures and fakes."""

from __future__ import annotations

import asyncio
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path

import httpx
import pytest
from returns.future import FutureResult, future_safe
from returns.result import Result


class SpyStream(io.BytesIO):
    def __init__(self, payload: bytes) -> None:
        super().__init__(payload)
        self.close_calls = 0

    def close(self) -> None:
        self.close_calls += 1
        super().close()


class FakeFileSystem:
    """Serves scripted waitfile reads; the last one repeats once the script runs out."""

    def __init__(self, reads: list[Result[str, Exception]], files: dict[str, bytes] | None = None):
        self.reads = list(reads)
        self.files = files or {}
        self.read_calls = 0
        self.opened: list[SpyStream] = []

    def read_waitfile(self, waitfile: Path) -> Result[str, Exception]:
        self.read_calls += 1
        if len(self.reads) > 1:
            return self.reads.pop(0)
        return self.reads[0]

    def open_result(self, result_file: Path) -> SpyStream:
        key = str(result_file)
        if key not in self.files:
            raise FileNotFoundError(key)
        stream = SpyStream(self.files[key])
        self.opened.append(stream)
        return stream


@dataclass
class TransmitCall:
    url: str
    content_type: str | None
    payload: bytes


@dataclass
class RecordingTransmitter:
    error: Exception | None = None
    calls: list[TransmitCall] = field(default_factory=list)

    def __call__(self, url, client, body_factory) -> FutureResult[None, Exception]:
        @future_safe
        async def _() -> None:
            stream, content_type = body_factory()
            self.calls.append(TransmitCall(url, content_type, stream.read()))
            if self.error is not None:
                raise self.error

        return _()


@dataclass
class FakeShutdown:
    """Sets its event `fire_after` seconds after listen(), never when None."""

    fire_after: float | None = None
    event: asyncio.Event = field(default_factory=asyncio.Event)
    close_calls: int = 0

    def listen(self) -> asyncio.Event:
        if self.fire_after is not None:
            asyncio.get_running_loop().call_later(self.fire_after, self.event.set)
        return self.event

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture()
def logger() -> logging.Logger:
    return logging.getLogger("tests.worker")


@pytest.fixture()
def transmitter() -> RecordingTransmitter:
    return RecordingTransmitter()


@pytest.fixture()
def http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
