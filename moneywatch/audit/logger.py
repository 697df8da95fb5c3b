"""
Audit Logger

DESIGN DECISION: Every ledger mutation and persistence checkpoint is logged.
This provides:
1. Traceability of user edits
2. Visibility into silent recoveries (unreadable persisted data)

The audit logger is synchronous like the rest of the engine and never
raises: a logging problem must not abort a ledger mutation.
"""

import logging
from typing import Optional

import structlog

from moneywatch.config import get_settings
from moneywatch.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
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
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Writes structured JSON log lines and keeps the most recent events in
    memory so the presentation layer can show a short activity history.
    """

    def __init__(
        self,
        history_size: int = 200,
        name: str = "moneywatch.audit",
        level: Optional[str] = None,
    ):
        """
        Initialize audit logger.

        Args:
            history_size: How many recent events to keep in memory.
                          0 disables the in-memory history.
            name: stdlib logger name the events are emitted under.
            level: Minimum level for that logger. Defaults to the
                   configured app log level, or DEBUG in debug mode.
        """
        if level is None:
            app = get_settings().app
            level = "DEBUG" if app.debug_mode else app.log_level
        logging.getLogger(name).setLevel(level)
        self._history_size = history_size
        self._history: list[AuditEvent] = []
        self._logger = structlog.get_logger(name)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._history_size:
            self._history.append(event)
            if len(self._history) > self._history_size:
                del self._history[: len(self._history) - self._history_size]

    def recent_events(self, limit: int = 20) -> list[AuditEvent]:
        """Most recent events, newest first."""
        return list(reversed(self._history[-limit:])) if limit else []

    def log_entity_changed(
        self,
        entity_type: str,
        action: str,
        entity_id: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an add/update/delete of a ledger record."""
        self.log(AuditEventBuilder.entity_changed(entity_type, action, entity_id, details))

    def log_not_found(self, entity_type: str, entity_id: str, action: str) -> None:
        """Log a lenient no-op on an unknown id."""
        self.log(AuditEventBuilder.record_not_found(entity_type, entity_id, action))

    def log_save_failed(self, key: str, error_message: str) -> None:
        """Log a persistence failure."""
        self.log(AuditEventBuilder.save_failed(key, error_message))
