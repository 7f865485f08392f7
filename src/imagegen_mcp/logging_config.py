import logging
import sys
from typing import Optional

_DEFAULT_LEVEL = "INFO"
_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"
_configured: Optional[str | int] = None


def _resolve_level(level: Optional[str | int]) -> str | int:
    if level is None:
        return _DEFAULT_LEVEL
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    # Unknown names come back from getLevelName as "Level <name>" strings.
    if isinstance(logging.getLevelName(name), int):
        return name
    return _DEFAULT_LEVEL


def configure_logging(
    level: Optional[str | int] = None,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
) -> str | int:
    """Configure root logging once with a consistent format.

    The level normally comes from `Settings.log_level`; unknown level names
    fall back to INFO. Records always go to stderr: stdout carries the MCP
    stdio stream and must stay clean.
    """
    global _configured

    requested = level
    level = _resolve_level(level)

    if _configured is not None and _configured == level:
        return level
    _configured = level

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_imagegen_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT, datefmt or _DEFAULT_DATEFMT))
    handler._imagegen_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)

    # The SDK's HTTP clients are chatty at INFO.
    for name in ("httpx", "httpcore", "openai"):
        logging.getLogger(name).setLevel(logging.WARNING)

    if isinstance(requested, str) and requested.strip().upper() != level:
        logging.getLogger(__name__).warning("Unknown log level %r; using %s", requested, level)

    return level


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
