"""
Serializers for AuditLog model.
"""

from rest_framework import serializers
from apps.audit.models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    """Serializer for AuditLog."""

    id = serializers.UUIDField(read_only=True)
    actor = serializers.CharField(read_only=True)
    action = serializers.CharField(read_only=True)
    entity = serializers.CharField(read_only=True)
    entityId = serializers.UUIDField(source="entity_id", read_only=True)
    metadata = serializers.JSONField(read_only=True)
    requestId = serializers.CharField(
        source="request_id", read_only=True, allow_null=True
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = AuditLog
        fields = [
            "id",
            "actor",
            "action",
            "entity",
            "entityId",
            "metadata",
            "requestId",
            "createdAt",
        ]
