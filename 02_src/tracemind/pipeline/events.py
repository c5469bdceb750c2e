"""Named stream events and their server-sent-events framing."""

import json
from dataclasses import dataclass
from typing import Iterable

from ..models import SymbolicFact, SystemHealth, Trace

METADATA = "metadata"
TOKEN = "token"
DESIGN = "design"
DONE = "done"
ERROR = "error"

DONE_PAYLOAD = "[DONE]"


@dataclass(frozen=True)
class StreamEvent:
    """One event relayed to the caller."""

    name: str
    data: str

    @classmethod
    def metadata(
        cls, facts: Iterable[SymbolicFact], health: SystemHealth, trace: Trace
    ) -> "StreamEvent":
        payload = {
            "facts": [fact.to_dict() for fact in facts],
            "health": health.to_dict(),
            "trace": trace.to_dict(),
        }
        return cls(METADATA, json.dumps(payload))

    @classmethod
    def token(cls, text: str) -> "StreamEvent":
        return cls(TOKEN, text)

    @classmethod
    def done(cls) -> "StreamEvent":
        return cls(DONE, DONE_PAYLOAD)

    @classmethod
    def error(cls, message: str) -> "StreamEvent":
        return cls(ERROR, message)

    @property
    def is_terminal(self) -> bool:
        return self.name in (DONE, ERROR)


def format_sse(event: StreamEvent) -> str:
    """Frame an event as `event: <name>\\ndata: <payload>\\n\\n`.

    Payloads containing newlines are sent as one `data:` line per line,
    which SSE clients join back with `\\n`.
    """
    data = "".join(f"data: {line}\n" for line in event.data.split("\n"))
    return f"event: {event.name}\n{data}\n"
