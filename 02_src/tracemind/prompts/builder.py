"""Prompt construction for explanation, evaluation and design generation."""

from typing import Iterable

from ..models import Span, SymbolicFact, SystemHealth, Trace

RAW_HEADER = "Analyze this OTel trace and explain what happened:\n\n"

STRUCTURED_INTRO = (
    "You are an expert SRE Agent. Analyze this OTel trace using both current "
    "telemetry and historical system context.\n\n"
)

STRUCTURED_TASK = (
    "\n### Task:\n"
    "1. Determine if this is an isolated incident or part of a systemic trend based on the global context.\n"
    "2. Explain the root cause and propagation.\n"
    "3. Provide high-priority remediation steps.\n"
    "\nBe technical, concise, and definitive."
)

EVALUATION_PROMPT = '''
You are a Senior SRE Auditor. Evaluate the following AI-generated incident explanation based on technical correctness and causal logic.

Trace Data (Simplified):
{trace}

Computed Symbolic Facts:
{facts}

AI Explanation to Evaluate:
"""
{explanation}
"""

Task:
Score the explanation from 1-10 on 'Causal Correctness'.
Explain why you gave that score.
Check if the explanation identified the root cause mentioned in the symbolic facts.

Response format:
Score: [1-10]
Rationale: [Brief explanation]
Root Cause Found: [Yes/No]
'''

INFRASTRUCTURE_PROMPT = """You are an expert infrastructure architect specializing in Kubernetes and cloud-native systems. Generate a complete infrastructure design in JSON format based on the user's requirements.

User Request: {user_prompt}

Output Format (JSON):
{{
  "name": "design-name",
  "description": "brief description of the infrastructure",
  "version": "1.0.0",
  "components": [
    {{
      "id": "unique-id",
      "name": "component-name",
      "type": "Kubernetes",
      "apiVersion": "apps/v1",
      "kind": "Deployment",
      "spec": {{
        "replicas": 3,
        "selector": {{...}},
        "template": {{...}}
      }},
      "metadata": {{
        "namespace": "default",
        "labels": {{...}}
      }}
    }}
  ]
}}

Rules:
1. Include ALL necessary components (Deployments, Services, ConfigMaps, PersistentVolumeClaims, etc.)
2. Use valid Kubernetes API versions (apps/v1, v1, networking.k8s.io/v1, etc.)
3. Follow best practices:
   - High availability (multiple replicas)
   - Resource limits and requests
   - Health checks (liveness/readiness probes)
   - Security (non-root users, read-only filesystems where appropriate)
4. For monitoring: Include Prometheus ServiceMonitor if requested
5. For databases: Include StatefulSets with persistent storage
6. Return ONLY valid JSON, no markdown code blocks, no explanations

Generate the complete infrastructure design now:"""


def _span_line(span: Span, with_message: bool) -> str:
    status = span.status.code
    if with_message and span.status.message:
        status += f" ({span.status.message})"
    return f"- {span.name}: {status} [{span.latency_ms:.2f}ms]\n"


def _fact_lines(facts: Iterable[SymbolicFact]) -> str:
    return "".join(
        f"- [{fact.severity.value}] {fact.type.value}: {fact.description}\n" for fact in facts
    )


def build_raw_prompt(trace: Trace) -> str:
    """Spans only, no symbolic context."""
    return RAW_HEADER + "".join(_span_line(span, with_message=False) for span in trace.spans)


def build_structured_prompt(
    trace: Trace, facts: Iterable[SymbolicFact], health: SystemHealth
) -> str:
    """Global context, symbolic facts, spans and the task block, in that order."""
    parts = [STRUCTURED_INTRO, "### Global System Context (Symbolic Memory):\n"]
    parts.append(f"- Overall Error Rate: {health.recent_error_rate * 100:.2f}%\n")
    if health.slowest_services:
        services = ", ".join(health.slowest_services)
        parts.append(f"- Recent Latency Trends: Services {services} have been slow recently.\n")

    parts.append("\n### Symbolic Facts for This Trace:\n")
    parts.append(_fact_lines(facts))

    parts.append("\n### OTel Spans:\n")
    parts.extend(_span_line(span, with_message=True) for span in trace.spans)

    parts.append(STRUCTURED_TASK)
    return "".join(parts)


def build_prompt(
    trace: Trace,
    facts: Iterable[SymbolicFact],
    health: SystemHealth,
    use_structured: bool = True,
) -> str:
    """Select the structured or raw prompt variant."""
    if use_structured:
        return build_structured_prompt(trace, facts, health)
    return build_raw_prompt(trace)


def build_evaluation_prompt(
    trace: Trace, facts: Iterable[SymbolicFact], explanation: str
) -> str:
    """LLM-as-a-judge prompt grading causal correctness of an explanation."""
    trace_text = f"trace_id={trace.trace_id}\n" + "".join(
        _span_line(span, with_message=True) for span in trace.spans
    )
    fact_text = _fact_lines(facts) or "(none)\n"
    return EVALUATION_PROMPT.format(
        trace=trace_text.rstrip("\n"),
        facts=fact_text.rstrip("\n"),
        explanation=explanation,
    )


def build_infrastructure_prompt(user_prompt: str) -> str:
    return INFRASTRUCTURE_PROMPT.format(user_prompt=user_prompt)
