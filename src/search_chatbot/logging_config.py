import inspect
import logging
import sys
from pathlib import Path
from typing import Any

from loguru import logger

# Lines logged outside a conversation (startup, uvicorn access) carry this id.
NO_CONVERSATION = "-"

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> <level>{level:<8}</level> "
    "[<magenta>{extra[conversation_id]}</magenta>] <cyan>{name}</cyan> - <level>{message}</level>"
)
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {extra[conversation_id]} | {name}:{line} - {message}"

# Third-party loggers that are routed into loguru, with their floor level.
_STDLIB_LOGGERS = {
    "uvicorn": "INFO",
    "uvicorn.error": "INFO",
    "uvicorn.access": "INFO",
    "httpx": "WARNING",
    "openai": "WARNING",
}


class _InterceptHandler(logging.Handler):
    """Forward stdlib ``logging`` records to loguru at the matching level."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Report the caller of the stdlib logger, not the logging module itself.
        frame, depth = inspect.currentframe(), 0
        while frame is not None and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _register_console(level: str) -> str:
    logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT)
    return f"console (stderr, {level})"


def _register_file(
    level: str,
    path: str = "logs/search-chatbot.log",
    rotation: str = "10 MB",
    retention: int = 3,
) -> str:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    logger.add(path, level=level, format=_FILE_FORMAT, rotation=rotation, retention=retention)
    return f"file ({path}, {level})"


_CONSUMERS = {
    "console": _register_console,
    "file": _register_file,
}


def intercept_stdlib_logging() -> None:
    handler = _InterceptHandler()
    for name, floor in _STDLIB_LOGGERS.items():
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = [handler]
        stdlib_logger.setLevel(floor)
        stdlib_logger.propagate = False


def setup_logging(
    level: str = "INFO",
    consumers: list[dict[str, Any]] | None = None,
) -> list[str]:
    """Replace loguru's sinks with the configured consumers.

    ``consumers`` entries look like ``{"type": "file", "path": ..., "level": ...}``;
    omitted, a single console consumer is used. Returns one description per
    registered consumer.
    """
    logger.remove()
    logger.configure(extra={"conversation_id": NO_CONVERSATION})
    intercept_stdlib_logging()

    if consumers is None:
        consumers = [{"type": "console"}]

    descriptions: list[str] = []
    for config in consumers:
        sink_type = config.get("type", "")
        register = _CONSUMERS.get(sink_type)
        if register is None:
            logger.warning(f"Unknown log consumer type: {sink_type!r}")
            continue

        kwargs = {k: v for k, v in config.items() if k not in ("type", "level")}
        descriptions.append(register(config.get("level", level), **kwargs))

    return descriptions
