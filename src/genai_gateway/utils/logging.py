import logging
import sys
from typing import TextIO

# Emojis per level
EMOJI_MAP = {
    "DEBUG": "🐞",
    "INFO": "💡",
    "WARNING": "⚠️",
    "ERROR": "🔥",
    "CRITICAL": "💀",
}

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Attributes every LogRecord carries; anything else was passed via `extra=`.
_STANDARD_ATTRS = frozenset(
    logging.LogRecord(
        name="",
        level=logging.NOTSET,
        pathname="",
        lineno=0,
        msg="",
        args=(),
        exc_info=None,
    ).__dict__
) | {"message", "asctime"}


class EmojiFormatter(logging.Formatter):
    """Formatter that prefixes level emojis and appends `extra=` fields.

    Routing code logs attempt metadata (candidate, outcome, ordinal) through
    `extra`, so those fields end up as ``key='value'`` pairs after a pipe.
    """

    def format(self, record: logging.LogRecord) -> str:
        emoji = EMOJI_MAP.get(record.levelname, "")
        log_line = (
            f"{emoji} [{record.levelname:<8}] ({record.name}) {record.getMessage()}"
        )

        extra_attrs = {
            k: v
            for k, v in record.__dict__.items()
            if k not in _STANDARD_ATTRS and not k.startswith("_")
        }
        if extra_attrs:
            extra_str = " ".join(f"{k}={v!r}" for k, v in extra_attrs.items())
            log_line = f"{log_line} | {extra_str}"

        if record.exc_info:
            log_line = f"{log_line}\n{self.formatException(record.exc_info)}"

        return log_line


def parse_log_level(value: str | int | None, default: int = logging.INFO) -> int:
    """Turn a level name ("debug", "WARNING") or number into a logging level."""
    if value is None:
        return default
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    return LOG_LEVELS.get(text.upper(), default)


def setup_logging(level: int = logging.INFO, stream: TextIO | None = None) -> None:
    """Configure root logger with emoji formatter."""
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(EmojiFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)


# Helper for subsystems
def get_logger(name: str) -> logging.Logger:
    """Get a subsystem logger namespaced under the gateway."""
    return logging.getLogger(f"genai_gateway.{name}")
