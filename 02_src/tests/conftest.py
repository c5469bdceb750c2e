"""Pytest configuration and fixtures."""

import asyncio
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import AsyncIterator

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tracemind.config import Settings  # noqa: E402
from tracemind.errors import ProviderError  # noqa: E402
from tracemind.models import Span, SpanStatus, Trace  # noqa: E402

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_span(
    span_id: str,
    name: str,
    latency_ms: float,
    status: str = "OK",
    message: str = "",
    parent: str | None = None,
    trace_id: str = "trace-1",
) -> Span:
    """Build a span with an exact latency."""
    return Span(
        span_id=span_id,
        trace_id=trace_id,
        name=name,
        start_time=BASE_TIME,
        end_time=BASE_TIME + timedelta(milliseconds=latency_ms),
        status=SpanStatus(code=status, message=message),
        parent_span_id=parent,
    )


def make_trace(*spans: Span, trace_id: str = "trace-1") -> Trace:
    return Trace(trace_id=trace_id, spans=tuple(spans))


def span_dict(
    span_id: str,
    name: str,
    latency_ms: int,
    status: str = "OK",
    message: str = "",
    parent: str | None = None,
) -> dict:
    """JSON form of a span, as a client would send it."""
    end = BASE_TIME + timedelta(milliseconds=latency_ms)
    data = {
        "span_id": span_id,
        "name": name,
        "start_time": BASE_TIME.isoformat().replace("+00:00", "Z"),
        "end_time": end.isoformat().replace("+00:00", "Z"),
        "status": {"code": status, "message": message},
    }
    if parent:
        data["parent_span_id"] = parent
    return data


class FakeProvider:
    """Scripted generation backend.

    `fail_after` raises `failure` (a ProviderError by default) after that
    many chunks. `block` makes the stream hang after its chunks until it is
    cancelled.
    """

    name = "fake"
    model = "fake-model"

    def __init__(
        self,
        tokens: list[str] | None = None,
        response: str = "full response",
        fail_after: int | None = None,
        block: bool = False,
        failure: Exception | None = None,
    ):
        self.tokens = tokens if tokens is not None else ["Hello", " ", "world"]
        self.response = response
        self.fail_after = fail_after
        self.block = block
        self.failure = failure
        self.prompts: list[str] = []
        self.stream_closed = False
        self.closed = False

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail_after is not None:
            raise self.failure or ProviderError("backend unavailable")
        return self.response

    async def generate_stream(self, prompt: str) -> AsyncIterator[str]:
        self.prompts.append(prompt)
        try:
            for i, token in enumerate(self.tokens):
                if self.fail_after is not None and i >= self.fail_after:
                    raise self.failure or ProviderError("stream broke")
                yield token
            if self.block:
                await asyncio.Event().wait()
        finally:
            self.stream_closed = True

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def settings(tmp_path):
    """Settings that never touch a real backend."""
    return Settings(
        log_file=str(tmp_path / "app.log"),
        memory_capacity=5,
        llm_provider="ollama",
    )


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def memory():
    from tracemind.memory import HealthMemory

    return HealthMemory(capacity=5)


@pytest.fixture
def pipeline(memory, fake_provider):
    from tracemind.pipeline import ExplanationPipeline

    return ExplanationPipeline(memory, fake_provider)


@pytest.fixture
def connections():
    """Connection store that builds fake providers."""
    from tracemind.connections import ConnectionStore

    return ConnectionStore(provider_factory=lambda config: FakeProvider())


@pytest_asyncio.fixture
async def application(settings, fake_provider):
    """Started application with a fake default provider."""
    from tracemind.app import Application

    app = Application(
        settings=settings,
        provider=fake_provider,
        provider_factory=lambda config: FakeProvider(),
    )
    await app.start()
    yield app
    await app.stop()
