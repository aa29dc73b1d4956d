"""structlog configuration for udpcomm.

Log records never share a stream with the Tx/Rx traffic: they go to stderr
(or the stream passed in), while traffic lines go to stdout.

Every record carries the thread that emitted it, so the ``udpcomm-stdin`` and
``udpcomm-stdout`` workers of an async-duplex session can be told apart.
Records logged inside a session or script also carry the bound ``mode``,
``channel`` and ``script`` context.

Two output modes:
- Human (default): short wall-clock time, colored when the stream is a
  terminal, exceptions rendered by rich
- JSON (--log-json): one object per line with ISO timestamps
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

HANDLER_NAME = "udpcomm"


def _shared_processors(*, log_json: bool) -> list[structlog.types.Processor]:
    timestamper = (
        structlog.processors.TimeStamper(fmt="iso")
        if log_json
        else structlog.processors.TimeStamper(fmt="%H:%M:%S.%f", utc=False)
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.CallsiteParameterAdder(
            [structlog.processors.CallsiteParameter.THREAD_NAME],
        ),
        timestamper,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(*, log_json: bool, stream: TextIO) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=stream.isatty(),
        exception_formatter=structlog.dev.rich_traceback,
    )


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route structlog and stdlib logging through one handler on *stream*.

    Calling it again replaces the handler it installed earlier and leaves
    other root handlers alone.

    Args:
        verbose: Enable DEBUG-level output for ``udpcomm.*``. Otherwise WARNING+.
        log_json: Use JSON renderer instead of console renderer.
        stream: Where records are written; ``sys.stderr`` at call time if None.
    """
    stream = stream if stream is not None else sys.stderr
    shared_processors = _shared_processors(log_json=log_json)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json=log_json, stream=stream),
            ],
        )
    )

    root_logger = logging.getLogger()
    for existing in [h for h in root_logger.handlers if h.get_name() == HANDLER_NAME]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("udpcomm").setLevel(logging.DEBUG if verbose else logging.WARNING)
