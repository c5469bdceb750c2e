"""Tests for infrastructure design generation."""

import asyncio
import json
import logging

import pytest

from tracemind.connections import ConnectionStore
from tracemind.design import DesignGenerator, parse_design_response, validate_design
from tracemind.errors import InputError, InternalError, NotFoundError
from tracemind.models import Component, ConnectionRequest, InfrastructureDesign

from conftest import FakeProvider

DESIGN_JSON = json.dumps(
    {
        "name": "web-stack",
        "description": "nginx behind a service",
        "components": [
            {"id": "web", "name": "web", "type": "Kubernetes", "apiVersion": "apps/v1", "kind": "Deployment"},
            {"name": "web-svc", "type": "Kubernetes", "apiVersion": "v1", "kind": "Service"},
        ],
    }
)


@pytest.fixture
def connection():
    return ConnectionRequest(
        name="local",
        provider="ollama",
        config={"endpoint": "http://localhost:11434", "model": "llama3"},
    ).to_connection("conn-1")


def store_with(connection, provider):
    store = ConnectionStore(provider_factory=lambda config: provider)
    store.add(connection)
    return store


async def collect(events):
    return [event async for event in events]


class TestParseDesignResponse:
    """Tests for parse_design_response()."""

    def test_fills_defaults_and_metadata(self, connection):
        design = parse_design_response(DESIGN_JSON, "an nginx app", connection)

        assert design.name == "web-stack"
        assert design.version == "1.0.0"
        assert design.components[0].id == "web"
        assert design.components[1].id
        assert design.metadata.generated_by == "TraceMind AI Adapter"
        assert design.metadata.prompt == "an nginx app"
        assert design.metadata.provider == "ollama"
        assert design.metadata.model == "llama3"

    def test_strips_code_fence(self, connection):
        design = parse_design_response(f"```json\n{DESIGN_JSON}\n```", "p", connection)
        assert design.name == "web-stack"

    def test_default_name(self, connection):
        design = parse_design_response('{"components": []}', "p", connection)
        assert design.name.startswith("design-")

    def test_invalid_json(self, connection):
        with pytest.raises(InternalError, match="failed to parse JSON response"):
            parse_design_response("Sure! Here is your design.", "p", connection)

    def test_non_object(self, connection):
        with pytest.raises(InternalError):
            parse_design_response("[1, 2]", "p", connection)


class TestValidateDesign:
    """Tests for validate_design()."""

    def test_valid(self):
        validate_design(
            InfrastructureDesign(
                name="d",
                components=[Component(name="web", api_version="apps/v1", kind="Deployment")],
            )
        )

    def test_requires_components(self):
        with pytest.raises(InputError, match="at least one component"):
            validate_design(InfrastructureDesign(name="d"))

    def test_requires_kind(self):
        design = InfrastructureDesign(name="d", components=[Component(name="web", api_version="v1")])
        with pytest.raises(InputError, match="component web: kind is required"):
            validate_design(design)


class TestDesignGenerator:
    """Tests for DesignGenerator."""

    @pytest.mark.asyncio
    async def test_generate(self, connection):
        provider = FakeProvider(response=DESIGN_JSON)
        generator = DesignGenerator(store_with(connection, provider))

        design = await generator.generate("an nginx app", "conn-1")

        assert len(design.components) == 2
        assert "User Request: an nginx app" in provider.prompts[0]

    @pytest.mark.asyncio
    async def test_generate_requires_prompt(self, connection):
        generator = DesignGenerator(store_with(connection, FakeProvider()))
        with pytest.raises(InputError, match="prompt is required"):
            await generator.generate("", "conn-1")

    def test_check_request_unknown_connection(self, connection):
        generator = DesignGenerator(store_with(connection, FakeProvider()))
        with pytest.raises(NotFoundError):
            generator.check_request("p", "missing")
        with pytest.raises(InputError, match="connection_id is required"):
            generator.check_request("p", "")

    @pytest.mark.asyncio
    async def test_stream(self, connection):
        half = len(DESIGN_JSON) // 2
        provider = FakeProvider(tokens=[DESIGN_JSON[:half], DESIGN_JSON[half:]])
        generator = DesignGenerator(store_with(connection, provider))

        events = await collect(generator.stream("an nginx app", "conn-1"))

        assert [e.name for e in events] == ["token", "token", "design", "done"]
        assert json.loads(events[2].data)["name"] == "web-stack"

    @pytest.mark.asyncio
    async def test_stream_unparseable_output(self, connection):
        generator = DesignGenerator(store_with(connection, FakeProvider(tokens=["not ", "json"])))

        events = await collect(generator.stream("p", "conn-1"))

        assert [e.name for e in events] == ["token", "token", "error"]
        assert events[-1].data.startswith("Failed to parse design: ")

    @pytest.mark.asyncio
    async def test_stream_provider_failure(self, connection):
        provider = FakeProvider(tokens=["{", "}"], fail_after=1)
        generator = DesignGenerator(store_with(connection, provider))

        events = await collect(generator.stream("p", "conn-1"))

        assert [e.name for e in events] == ["token", "error"]
        assert events[-1].data == "stream broke"

    @pytest.mark.asyncio
    async def test_stream_cancelled(self, connection):
        provider = FakeProvider(tokens=[], block=True)
        generator = DesignGenerator(store_with(connection, provider))
        cancel = asyncio.Event()
        asyncio.get_running_loop().call_later(0.05, cancel.set)

        events = await asyncio.wait_for(collect(generator.stream("p", "conn-1", cancel)), timeout=2.0)

        assert [e.name for e in events] == ["error"]
        assert events[0].data == "request cancelled"

    @pytest.mark.asyncio
    async def test_stream_unexpected_failure(self, connection, caplog):
        """Test a non-provider exception still ends the stream with one error event."""
        provider = FakeProvider(tokens=["{", "}"], fail_after=1, failure=RuntimeError("socket reset"))
        generator = DesignGenerator(store_with(connection, provider))

        with caplog.at_level(logging.ERROR, logger="tracemind.design.generator"):
            events = await collect(generator.stream("p", "conn-1"))

        assert [e.name for e in events] == ["token", "error"]
        assert events[-1].data == "internal error: socket reset"
        assert provider.stream_closed
        assert any(r.exc_info for r in caplog.records)
