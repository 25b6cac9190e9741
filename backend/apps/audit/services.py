"""
Audit service - appends immutable audit log entries and queries them.

All audit entries are append-only. No updates or deletions.

A failed audit write never undoes the registry change it describes: the
insert runs in its own savepoint and database errors are logged.
"""

import logging

from django.db import DatabaseError, transaction

from apps.audit.models import AuditLog
from core.middleware import get_current_request_id

logger = logging.getLogger(__name__)


def record(actor, action, entity, entity_id, metadata=None):
    """
    Append an audit log entry.

    Args:
        actor: Verbatim X-Actor value ('ADMIN' or 'DEALER:<name>')
        action: AuditAction value (e.g. 'END_EMPLOYMENT')
        entity: AuditEntity value (e.g. 'EMPLOYMENT')
        entity_id: Identifier of the affected row
        metadata: JSON-serializable details of the change (optional)

    Returns:
        AuditLog: Created entry, or None if the write failed
    """
    request_id = get_current_request_id()
    try:
        with transaction.atomic():
            return AuditLog.objects.create(
                actor=actor,
                action=action,
                entity=entity,
                entity_id=entity_id,
                metadata=metadata or {},
                request_id=request_id,
            )
    except DatabaseError:
        logger.exception(
            "audit_write_failed",
            extra={
                "operation": "AUDIT_RECORD",
                "entity_id": str(entity_id),
                "request_id": request_id,
                "audit_action": action,
                "audit_entity": entity,
            },
        )
        return None


def query(entity=None, entity_id=None):
    """Return entries newest first, optionally filtered by entity and id."""
    queryset = AuditLog.objects.all()
    if entity:
        queryset = queryset.filter(entity=entity)
    if entity_id:
        queryset = queryset.filter(entity_id=entity_id)
    return queryset.order_by("-created_at")
