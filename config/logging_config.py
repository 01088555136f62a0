"""Structured logging for the regression engine and channel layer, via structlog."""

import logging
import math
import sys

import structlog

FLOAT_PRECISION = 6


def _round_floats(_, __, event_dict: dict) -> dict:
    """Fit statistics carry full double precision; keep log lines readable."""
    for key, value in event_dict.items():
        if isinstance(value, float) and math.isfinite(value):
            event_dict[key] = round(value, FLOAT_PRECISION)
    return event_dict


def configure_logging(
    component: str, level: str = "INFO", json_output: bool = True
) -> structlog.BoundLogger:
    """Configure structlog and return a logger bound to ``component``.

    JSON lines go to stderr so that a host printing channel values on
    stdout is not interleaved with diagnostics. ``json_output=False``
    switches to the human-readable console renderer.
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            _round_floats,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
    return structlog.get_logger(component=component)
