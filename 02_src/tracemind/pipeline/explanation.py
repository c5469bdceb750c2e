"""Per-request explanation pipeline: analyze, contextualize, prompt, stream."""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterator, Iterable

from ..analyzer import analyze_trace
from ..errors import InputError, InternalError, ProviderConfigError, ProviderError
from ..llm import ILLMProvider
from ..logging_config import get_logger
from ..memory import IHealthMemory
from ..models import SymbolicFact, SystemHealth, Trace, TraceAnalysis
from ..prompts import build_evaluation_prompt, build_prompt
from .events import StreamEvent
from .relay import CANCELLED_MESSAGE, ChunkRelay, StreamCancelled

logger = get_logger(__name__)


class PipelineState(str, Enum):
    """Lifecycle of one explanation request."""

    RECEIVED = "received"
    ANALYZED = "analyzed"
    CONTEXTED = "contexted"
    PROMPTED = "prompted"
    STREAMING = "streaming"
    DONE = "done"
    FAILED = "failed"


_NEXT_STATES: dict[PipelineState, set[PipelineState]] = {
    PipelineState.RECEIVED: {PipelineState.ANALYZED, PipelineState.FAILED},
    PipelineState.ANALYZED: {PipelineState.CONTEXTED, PipelineState.FAILED},
    PipelineState.CONTEXTED: {PipelineState.PROMPTED, PipelineState.FAILED},
    PipelineState.PROMPTED: {PipelineState.STREAMING, PipelineState.FAILED},
    PipelineState.STREAMING: {PipelineState.DONE, PipelineState.FAILED},
    PipelineState.DONE: set(),
    PipelineState.FAILED: set(),
}


@dataclass
class ExplanationRun:
    """State of a single explanation request."""

    trace: Trace
    provider: ILLMProvider
    use_structured: bool = True
    state: PipelineState = PipelineState.RECEIVED
    facts: list[SymbolicFact] = field(default_factory=list)
    health: SystemHealth | None = None
    prompt: str = ""
    tokens: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def text(self) -> str:
        """Everything relayed so far, including a prefix left by a failure."""
        return "".join(self.tokens)

    @property
    def finished(self) -> bool:
        return self.state in (PipelineState.DONE, PipelineState.FAILED)

    def log_context(self) -> dict:
        return {"trace_id": self.trace.trace_id, "state": self.state.value, "tokens": len(self.tokens)}

    def advance(self, state: PipelineState) -> None:
        if state not in _NEXT_STATES[self.state]:
            raise InternalError(f"invalid pipeline transition {self.state.value} -> {state.value}")
        previous = self.state
        self.state = state
        logger.debug(
            "Trace %s: %s -> %s",
            self.trace.trace_id,
            previous.value,
            state.value,
            extra={"context": self.log_context()},
        )

    def fail(self, message: str) -> None:
        if self.finished:
            return
        self.error = message
        self.advance(PipelineState.FAILED)


class ExplanationPipeline:
    """Orchestrates analyzer, health memory, prompt builder and provider."""

    def __init__(self, memory: IHealthMemory, provider: ILLMProvider | None = None):
        self._memory = memory
        self._provider = provider

    @property
    def provider(self) -> ILLMProvider | None:
        return self._provider

    def start(
        self,
        trace: Trace,
        use_structured: bool = True,
        provider: ILLMProvider | None = None,
    ) -> ExplanationRun:
        """Create a run in the RECEIVED state."""
        selected = provider or self._provider
        if selected is None:
            raise ProviderConfigError("no generation provider configured")
        return ExplanationRun(trace=trace, provider=selected, use_structured=use_structured)

    def _prepare(self, run: ExplanationRun) -> None:
        if run.state is not PipelineState.RECEIVED:
            raise InternalError("explanation run already started")

        self._memory.add(run.trace)
        run.facts = analyze_trace(run.trace)
        run.advance(PipelineState.ANALYZED)

        run.health = self._memory.health()
        run.advance(PipelineState.CONTEXTED)

        run.prompt = build_prompt(run.trace, run.facts, run.health, run.use_structured)
        run.advance(PipelineState.PROMPTED)

    async def stream(
        self, run: ExplanationRun, cancel: asyncio.Event | None = None
    ) -> AsyncIterator[StreamEvent]:
        """Run the pipeline, yielding metadata, tokens and one terminal event.

        A provider failure or a set `cancel` event ends the run FAILED with
        an `error` event; tokens already yielded are kept in `run.tokens`.
        """
        self._prepare(run)
        yield StreamEvent.metadata(run.facts, run.health, run.trace)

        run.advance(PipelineState.STREAMING)
        relay = ChunkRelay(run.provider.generate_stream(run.prompt), cancel)
        error: str | None = None
        try:
            async for chunk in relay:
                run.tokens.append(chunk)
                yield StreamEvent.token(chunk)
        except ProviderError as e:
            error = e.message
        except StreamCancelled:
            error = CANCELLED_MESSAGE
        except Exception as e:
            logger.error(
                "Unexpected stream failure for trace %s",
                run.trace.trace_id,
                exc_info=True,
                extra={"context": run.log_context()},
            )
            error = f"internal error: {e}"
        except (asyncio.CancelledError, GeneratorExit):
            run.fail(CANCELLED_MESSAGE)
            raise
        finally:
            await relay.aclose()

        if error is not None:
            run.fail(error)
            logger.error(
                "Explanation failed for trace %s after %d tokens: %s",
                run.trace.trace_id,
                len(run.tokens),
                error,
                extra={"context": run.log_context()},
            )
            yield StreamEvent.error(error)
            return

        run.advance(PipelineState.DONE)
        logger.info(
            "Explanation streamed for trace %s (%d tokens)",
            run.trace.trace_id,
            len(run.tokens),
            extra={"context": run.log_context()},
        )
        yield StreamEvent.done()

    async def explain(
        self,
        trace: Trace,
        use_structured: bool = True,
        provider: ILLMProvider | None = None,
    ) -> TraceAnalysis:
        """Unary variant: one blocking generation call."""
        run = self.start(trace, use_structured, provider)
        self._prepare(run)
        run.advance(PipelineState.STREAMING)
        try:
            text = await run.provider.generate(run.prompt)
        except ProviderError as e:
            run.fail(e.message)
            raise

        run.tokens.append(text)
        run.advance(PipelineState.DONE)
        return TraceAnalysis(
            trace=trace,
            symbolic_facts=tuple(run.facts),
            system_context=run.health,
            ai_explanation=text,
        )

    async def evaluate(
        self,
        trace: Trace,
        facts: Iterable[SymbolicFact],
        explanation: str,
        provider: ILLMProvider | None = None,
    ) -> str:
        """Ask the backend to grade an explanation against the symbolic facts."""
        if not explanation or not explanation.strip():
            raise InputError("explanation is required")
        selected = provider or self._provider
        if selected is None:
            raise ProviderConfigError("no generation provider configured")

        prompt = build_evaluation_prompt(trace, facts, explanation)
        return await selected.generate(prompt)
