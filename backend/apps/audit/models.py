"""
AuditLog model - immutable chronological record of registry changes.

Audit logs are append-only. No update or delete operations.
"""

import uuid
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


class AuditAction(models.TextChoices):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    END_EMPLOYMENT = "END_EMPLOYMENT"
    ADD_VEHICLE = "ADD_VEHICLE"
    OFFBOARD = "OFFBOARD"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    CANCEL = "CANCEL"


class AuditEntity(models.TextChoices):
    DEALER = "DEALER"
    EMPLOYMENT = "EMPLOYMENT"
    CLIENT = "CLIENT"
    CLIENT_LINK = "CLIENT_LINK"
    TRANSFER = "TRANSFER"


class AuditLogQuerySet(models.QuerySet):
    """Refuses bulk mutation so rows can only ever be inserted."""

    def update(self, **kwargs):
        raise ValueError("AuditLog entries are append-only. Updates are not allowed.")

    def delete(self):
        raise ValueError("AuditLog entries are append-only. Deletions are not allowed.")


class AuditLog(models.Model):
    """AuditLog model - immutable audit trail."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    # Verbatim X-Actor value: "ADMIN" or "DEALER:<name>"
    actor = models.CharField(max_length=255)
    action = models.CharField(max_length=32, choices=AuditAction.choices)
    entity = models.CharField(max_length=32, choices=AuditEntity.choices)
    entity_id = models.UUIDField()
    metadata = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    request_id = models.CharField(max_length=64, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = AuditLogQuerySet.as_manager()

    class Meta:
        db_table = "audit_logs"
        indexes = [
            models.Index(fields=["entity", "entity_id"], name="idx_audit_entity"),
            models.Index(fields=["created_at"], name="idx_audit_created"),
        ]
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.action} - {self.entity}:{self.entity_id} by {self.actor}"

    def save(self, *args, **kwargs):
        """Override save to prevent updates."""
        if not self._state.adding:
            raise ValueError(
                "AuditLog entries are append-only. Updates are not allowed."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Override delete to prevent deletion."""
        raise ValueError("AuditLog entries are append-only. Deletions are not allowed.")
