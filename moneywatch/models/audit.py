"""
Audit Models for MoneyWatch

Every ledger mutation and every persistence checkpoint is logged.
This provides:
1. Traceability of what the user changed and when
2. Debugging information when persisted data had to be recovered
3. A record of when derived budget state was recomputed

DESIGN DECISION: Audit events are emitted, never edited.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Each entity family has its own added/updated/deleted events.
    """
    # Accounts
    ACCOUNT_ADDED = "account_added"
    ACCOUNT_UPDATED = "account_updated"
    ACCOUNT_DELETED = "account_deleted"

    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Budgets
    BUDGET_ADDED = "budget_added"
    BUDGET_UPDATED = "budget_updated"
    BUDGET_DELETED = "budget_deleted"
    BUDGETS_RECONCILED = "budgets_reconciled"

    # Subscriptions
    SUBSCRIPTION_ADDED = "subscription_added"
    SUBSCRIPTION_UPDATED = "subscription_updated"
    SUBSCRIPTION_STATUS_CHANGED = "subscription_status_changed"
    SUBSCRIPTION_DELETED = "subscription_deleted"

    # Categories
    CATEGORY_ADDED = "category_added"

    # Lookups that found nothing (lenient no-ops)
    RECORD_NOT_FOUND = "record_not_found"

    # Persistence
    COLLECTION_LOADED = "collection_loaded"
    COLLECTION_SEEDED = "collection_seeded"
    PERSISTED_DATA_RECOVERED = "persisted_data_recovered"
    COLLECTION_SAVED = "collection_saved"
    SAVE_FAILED = "save_failed"
    LEDGER_RESET = "ledger_reset"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred (local wall clock)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'budget', 'collection')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity, or the storage key for collections"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


_MUTATION_TYPES = {
    ("account", "added"): AuditEventType.ACCOUNT_ADDED,
    ("account", "updated"): AuditEventType.ACCOUNT_UPDATED,
    ("account", "deleted"): AuditEventType.ACCOUNT_DELETED,
    ("transaction", "added"): AuditEventType.TRANSACTION_ADDED,
    ("transaction", "updated"): AuditEventType.TRANSACTION_UPDATED,
    ("transaction", "deleted"): AuditEventType.TRANSACTION_DELETED,
    ("budget", "added"): AuditEventType.BUDGET_ADDED,
    ("budget", "updated"): AuditEventType.BUDGET_UPDATED,
    ("budget", "deleted"): AuditEventType.BUDGET_DELETED,
    ("subscription", "added"): AuditEventType.SUBSCRIPTION_ADDED,
    ("subscription", "updated"): AuditEventType.SUBSCRIPTION_UPDATED,
    ("subscription", "deleted"): AuditEventType.SUBSCRIPTION_DELETED,
}


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entity_changed("transaction", "added", tx_id)
        event = AuditEventBuilder.collection_recovered(key, reason)
    """

    @staticmethod
    def entity_changed(
        entity_type: str,
        action: str,
        entity_id: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        event_type = _MUTATION_TYPES.get((entity_type, action))
        if event_type is None:
            raise ValueError(f"Unknown mutation: {entity_type} {action}")
        return AuditEvent(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} {action}",
            details=details or {},
            is_user_action=True,
        )

    @staticmethod
    def subscription_status_changed(
        subscription_id: str,
        old_status: str,
        new_status: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBSCRIPTION_STATUS_CHANGED,
            entity_type="subscription",
            entity_id=subscription_id,
            description=f"Subscription status changed: {old_status} -> {new_status}",
            details={
                "old_status": old_status,
                "new_status": new_status,
            },
            is_user_action=True,
        )

    @staticmethod
    def category_added(name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_ADDED,
            entity_type="category",
            entity_id=name,
            description=f"Category added: {name}",
            is_user_action=True,
        )

    @staticmethod
    def record_not_found(entity_type: str, entity_id: str, action: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_NOT_FOUND,
            severity=AuditSeverity.DEBUG,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"Ignored {action} of unknown {entity_type}",
            details={"action": action},
        )

    @staticmethod
    def budgets_reconciled(budget_count: int, transaction_count: int, as_of: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGETS_RECONCILED,
            severity=AuditSeverity.DEBUG,
            entity_type="budget",
            description=f"Reconciled {budget_count} budgets",
            details={
                "budget_count": budget_count,
                "transaction_count": transaction_count,
                "as_of": as_of,
            },
        )

    @staticmethod
    def collection_loaded(key: str, record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COLLECTION_LOADED,
            entity_type="collection",
            entity_id=key,
            description=f"Loaded {record_count} records from {key}",
            details={"record_count": record_count},
        )

    @staticmethod
    def collection_seeded(key: str, record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COLLECTION_SEEDED,
            entity_type="collection",
            entity_id=key,
            description=f"No data under {key}; seeded {record_count} default records",
            details={"record_count": record_count},
        )

    @staticmethod
    def collection_recovered(key: str, reason: str, record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTED_DATA_RECOVERED,
            severity=AuditSeverity.WARNING,
            entity_type="collection",
            entity_id=key,
            description=f"Persisted data under {key} was unreadable; fell back to defaults",
            error_message=reason,
            details={"record_count": record_count},
        )

    @staticmethod
    def collection_saved(key: str, record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COLLECTION_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="collection",
            entity_id=key,
            description=f"Saved {record_count} records to {key}",
            details={"record_count": record_count},
        )

    @staticmethod
    def save_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="collection",
            entity_id=key,
            description=f"Failed to persist {key}",
            error_message=error_message,
        )

    @staticmethod
    def ledger_reset(keys: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_RESET,
            severity=AuditSeverity.WARNING,
            entity_type="collection",
            description="All persisted ledger data removed",
            details={"keys": keys},
            is_user_action=True,
        )
