"""JSON-lines logging for TraceMind.

Every record is one JSON object. Run-scoped fields go through
`extra={"context": {...}}`, for example the pipeline's trace id, state and
token count, and are emitted under the "context" key.
"""

import json
import logging
import logging.config
from datetime import datetime, timezone
from pathlib import Path

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Per-request client logs from the provider SDKs
QUIET_LOGGERS = ("httpx", "httpcore", "anthropic", "openai")


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "source": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        context = getattr(record, "context", None)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(log_level: str, log_file: str) -> None:
    """Send JSON lines to a rotating file and to stdout.

    Both values come from `Settings`, which reads LOG_LEVEL and LOG_FILE.
    """
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"json": {"()": JSONFormatter}},
        "handlers": {
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": log_file,
                "maxBytes": LOG_FILE_MAX_BYTES,
                "backupCount": LOG_FILE_BACKUPS,
                "formatter": "json",
                "encoding": "utf-8",
            },
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
        "root": {"level": log_level.upper(), "handlers": ["file", "console"]},
    })


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
