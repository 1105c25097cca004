"""structlog configuration for biblionet.

Pipeline modules log through stdlib ``logging.getLogger(__name__)``; the
telemetry layer logs through structlog.  Both end up in one stderr handler
so result output on stdout stays machine-readable:

- default: WARNING and up (VOSviewer problems, option fallbacks)
- ``-v``: DEBUG for the ``biblionet`` tree (stage sizes, pruning threshold,
  palette wraparound, span timings)
- ``--log-json``: one JSON object per line instead of the console renderer
"""

from __future__ import annotations

import logging
import sys

import structlog

# Third-party loggers that flood DEBUG output while a figure is saved.
QUIET_LOGGERS = ("matplotlib", "PIL")


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route biblionet and structlog records to stderr.

    Safe to call more than once: the root handler is replaced, not stacked.
    """
    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("biblionet").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
