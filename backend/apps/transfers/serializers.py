"""
Transfer serializers - no business logic, validation only.
"""

from rest_framework import serializers
from apps.transfers.models import TransferRequest


class TransferCreateSerializer(serializers.Serializer):
    clientId = serializers.UUIDField()
    fromDealerId = serializers.UUIDField()
    toDealerId = serializers.UUIDField()
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class TransferRequestSerializer(serializers.ModelSerializer):
    id = serializers.UUIDField(read_only=True)
    clientId = serializers.UUIDField(source="client_id", read_only=True)
    clientName = serializers.CharField(source="client.name", read_only=True)
    fromDealerId = serializers.UUIDField(source="from_dealer_id", read_only=True)
    fromDealerName = serializers.CharField(
        source="from_dealer.display_name", read_only=True
    )
    toDealerId = serializers.UUIDField(source="to_dealer_id", read_only=True)
    toDealerName = serializers.CharField(
        source="to_dealer.display_name", read_only=True
    )
    status = serializers.CharField(read_only=True)
    reason = serializers.CharField(read_only=True, allow_null=True)
    requestedBy = serializers.CharField(source="requested_by_actor", read_only=True)
    decidedBy = serializers.CharField(
        source="decided_by_actor", read_only=True, allow_null=True
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    decidedAt = serializers.DateTimeField(
        source="decided_at", read_only=True, allow_null=True
    )

    class Meta:
        model = TransferRequest
        fields = [
            "id",
            "clientId",
            "clientName",
            "fromDealerId",
            "fromDealerName",
            "toDealerId",
            "toDealerName",
            "status",
            "reason",
            "requestedBy",
            "decidedBy",
            "createdAt",
            "decidedAt",
        ]
