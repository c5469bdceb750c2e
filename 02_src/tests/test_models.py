"""Tests for data models."""

from dataclasses import replace
from datetime import datetime, timezone

import pytest

from tracemind.errors import ProviderConfigError
from tracemind.models import (
    AIConnection,
    AnthropicConfig,
    Attribute,
    Component,
    FactType,
    InfrastructureDesign,
    OllamaConfig,
    OpenAIConfig,
    ProviderKind,
    Severity,
    SymbolicFact,
    SystemHealth,
)

from conftest import make_span


class TestSpan:
    """Tests for Span model."""

    def test_latency_ms(self):
        """Test latency is end minus start in milliseconds."""
        span = make_span("s1", "api", 812.5)
        assert span.latency_ms == pytest.approx(812.5)

    def test_negative_latency_is_kept(self):
        """Test clock skew produces a negative latency rather than an error."""
        span = make_span("s1", "api", -20)
        assert span.latency_ms == pytest.approx(-20)

    def test_is_error(self):
        assert make_span("s1", "db", 10, status="ERROR").is_error
        assert not make_span("s1", "db", 10, status="OK").is_error

    def test_attributes(self):
        span = replace(make_span("s1", "checkout", 10), attributes=(Attribute("http.method", "GET"),))

        assert span.attributes[0].key == "http.method"
        assert span.to_dict()["attributes"] == [{"key": "http.method", "value": "GET"}]


class TestSymbolicFact:
    """Tests for SymbolicFact model."""

    def test_to_dict(self):
        fact = SymbolicFact(
            type=FactType.ERROR_ORIGIN,
            service="db",
            description="Error originated in service 'db': timeout",
            severity=Severity.CRITICAL,
        )
        assert fact.to_dict() == {
            "type": "ERROR_ORIGIN",
            "service": "db",
            "description": "Error originated in service 'db': timeout",
            "severity": "critical",
        }


class TestSystemHealth:
    """Tests for SystemHealth model."""

    def test_defaults(self):
        health = SystemHealth()
        assert health.recent_error_rate == 0.0
        assert health.slowest_services == ()
        assert health.last_update.tzinfo is not None

    def test_to_dict(self):
        ts = datetime(2024, 1, 1, tzinfo=timezone.utc)
        health = SystemHealth(0.25, ("db",), ts)
        assert health.to_dict() == {
            "recent_error_rate": 0.25,
            "slowest_services": ["db"],
            "last_update": ts.isoformat(),
        }


class TestProviderConfigs:
    """Tests for per-provider configuration validation."""

    def test_openai_requires_api_key(self):
        with pytest.raises(ProviderConfigError, match="openai api_key is required"):
            OpenAIConfig(model="gpt-4o", api_key="").validate()

    def test_anthropic_requires_model(self):
        with pytest.raises(ProviderConfigError, match="anthropic model is required"):
            AnthropicConfig(model="", api_key="key").validate()

    def test_ollama_requires_endpoint(self):
        with pytest.raises(ProviderConfigError, match="ollama endpoint is required"):
            OllamaConfig(endpoint="", model="mistral").validate()

    def test_valid_configs(self):
        OpenAIConfig(model="gpt-4o", api_key="key").validate()
        AnthropicConfig(model="claude", api_key="key").validate()
        OllamaConfig(endpoint="http://localhost:11434", model="mistral").validate()



class TestAIConnection:
    """Tests for AIConnection model."""

    def test_provider_config_reads_credentials(self):
        conn = AIConnection(
            id="c1",
            name="hosted",
            provider=ProviderKind.OPENAI,
            config={"model": "gpt-4o"},
            credentials={"api_key": "sk-test"},
        )
        config = conn.provider_config()
        assert isinstance(config, OpenAIConfig)
        assert config.api_key == "sk-test"
        assert config.api_endpoint == "https://api.openai.com/v1"

    def test_provider_config_validates(self):
        conn = AIConnection(id="c1", name="hosted", provider=ProviderKind.ANTHROPIC, config={"model": "claude"})
        with pytest.raises(ProviderConfigError, match="api_key is required"):
            conn.provider_config()

    def test_to_dict_hides_credentials(self):
        conn = AIConnection(id="c1", name="n", provider=ProviderKind.OPENAI, credentials={"api_key": "secret"})
        assert "credentials" not in conn.to_dict()
        assert conn.to_dict(include_credentials=True)["credentials"] == {"api_key": "secret"}

    def test_model_unknown(self):
        conn = AIConnection(id="c1", name="n", provider=ProviderKind.OLLAMA)
        assert conn.model == "unknown"


class TestInfrastructureDesign:
    """Tests for design models."""

    def test_component_api_version_key(self):
        component = Component(name="web", api_version="apps/v1", kind="Deployment")
        assert component.to_dict()["apiVersion"] == "apps/v1"

    def test_design_without_metadata(self):
        design = InfrastructureDesign(name="shop", components=[Component(name="web")])
        assert design.to_dict()["metadata"] is None
        assert design.to_dict()["components"][0]["name"] == "web"
