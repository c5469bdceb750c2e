"""Rule-based symbolic reasoning over a single trace."""

from ..models import FactType, Severity, Span, SymbolicFact, Trace

BOTTLENECK_THRESHOLD_MS = 800.0
WARNING_THRESHOLD_MS = 400.0


def analyze_trace(trace: Trace) -> list[SymbolicFact]:
    """Extract latency and error-origin facts from a trace.

    At most one latency fact is produced, for the slowest span (ties keep the
    earliest). Each error span whose direct parent is not itself in error is
    reported as an error origin, in span order.
    """
    facts: list[SymbolicFact] = []
    if not trace.spans:
        return facts

    latency_fact = _latency_fact(trace.spans)
    if latency_fact:
        facts.append(latency_fact)

    facts.extend(_error_origin_facts(trace.spans))
    return facts


def _latency_fact(spans: tuple[Span, ...]) -> SymbolicFact | None:
    slowest = spans[0]
    for span in spans[1:]:
        if span.latency_ms > slowest.latency_ms:
            slowest = span

    latency = slowest.latency_ms
    if latency > BOTTLENECK_THRESHOLD_MS:
        return SymbolicFact(
            type=FactType.LATENCY_BOTTLENECK,
            service=slowest.name,
            description=f"Service '{slowest.name}' is a bottleneck with {latency:.2f}ms latency.",
            severity=Severity.CRITICAL,
        )
    if latency > WARNING_THRESHOLD_MS:
        return SymbolicFact(
            type=FactType.LATENCY_WARNING,
            service=slowest.name,
            description=f"Service '{slowest.name}' has elevated latency: {latency:.2f}ms.",
            severity=Severity.WARNING,
        )
    return None


def _error_origin_facts(spans: tuple[Span, ...]) -> list[SymbolicFact]:
    # Span ids that belong to an error span; only the direct parent is checked.
    error_ids = {span.span_id for span in spans if span.is_error}

    facts = []
    for span in spans:
        if not span.is_error:
            continue
        if span.parent_span_id and span.parent_span_id in error_ids:
            continue
        facts.append(
            SymbolicFact(
                type=FactType.ERROR_ORIGIN,
                service=span.name,
                description=f"Error originated in service '{span.name}': {span.status.message}",
                severity=Severity.CRITICAL,
            )
        )
    return facts
