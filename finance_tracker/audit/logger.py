"""
Audit Logger

Every repository change is written to the structured log. The logger is a
plain repository subscriber: it receives AuditEvents and never raises back
into the mutation that produced them.
"""

import logging
import sys

import structlog

from finance_tracker.models.audit import AuditEvent, AuditSeverity


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """
    Configure structlog on top of stdlib logging.

    Call once from the composition root. Library modules only ever call
    structlog.get_logger(__name__).
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Writes repository change events to the structured log.

    Usage:
        unsubscribe = repository.subscribe(AuditLogger())
    """

    def __init__(self):
        self._logger = structlog.get_logger("finance_tracker.audit")
        self._count = 0

    @property
    def event_count(self) -> int:
        """Number of events seen so far."""
        return self._count

    def __call__(self, event: AuditEvent) -> None:
        self.log(event)

    def log(self, event: AuditEvent) -> None:
        self._count += 1
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)
