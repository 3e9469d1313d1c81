"""Structured logging for the key source.

Module loggers wrap stdlib loggers under the ``azure_keysource`` namespace.
Until a host application installs handlers (or calls :func:`configure_logging`)
nothing is written anywhere, so the library never touches stdout.
"""
from __future__ import annotations

import logging
import sys
from typing import Dict, TextIO

import structlog

from .config import CONFIG

ROOT_LOGGER = "azure_keysource"

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())

_LEVELS: Dict[str, int] = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def get_logger(name: str = ROOT_LOGGER):
    return structlog.wrap_logger(logging.getLogger(name))


def configure_logging(
    level: str | None = None,
    json: bool | None = None,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Send the library's records to ``stream`` (stderr by default).

    Records carry ``ts``, ``level``, ``msg`` and ``component`` plus any bound
    context (``key_id``, ``strategy``). Only the ``azure_keysource`` logger is
    touched; the host's root handlers are left alone. Returns the installed
    handler.
    """

    numeric_level = _LEVELS.get((level or CONFIG.logging.level).lower(), logging.INFO)
    use_json = CONFIG.logging.json if json is None else json

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    package_logger = logging.getLogger(ROOT_LOGGER)
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(numeric_level)
    package_logger.propagate = False

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", key="ts"),
            structlog.stdlib.add_log_level,
            _add_component,
            _event_as_msg,
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=False,
    )
    return handler


def _add_component(
    logger: logging.Logger, _name: str, event_dict: dict[str, object]
) -> dict[str, object]:
    event_dict.setdefault("component", getattr(logger, "name", None) or ROOT_LOGGER)
    return event_dict


def _event_as_msg(
    _logger: logging.Logger, _name: str, event_dict: dict[str, object]
) -> dict[str, object]:
    if "msg" not in event_dict:
        event_dict["msg"] = event_dict.pop("event", "")
    return event_dict


__all__ = ["ROOT_LOGGER", "configure_logging", "get_logger"]
