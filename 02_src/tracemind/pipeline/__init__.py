"""Pipeline module."""

from .events import StreamEvent, format_sse
from .explanation import ExplanationPipeline, ExplanationRun, PipelineState
from .relay import CANCELLED_MESSAGE, ChunkRelay, StreamCancelled

__all__ = [
    "ExplanationPipeline",
    "ExplanationRun",
    "PipelineState",
    "StreamEvent",
    "format_sse",
    "ChunkRelay",
    "StreamCancelled",
    "CANCELLED_MESSAGE",
]
