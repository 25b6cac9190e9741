"""
Dealer serializers - no business logic, validation only.
"""

from rest_framework import serializers
from apps.dealers.models import Dealer, DealerStatus


class DealerSerializer(serializers.ModelSerializer):
    """Serializer for Dealer."""

    id = serializers.UUIDField(read_only=True)
    legalName = serializers.CharField(source="legal_name", max_length=255)
    outletName = serializers.CharField(
        source="outlet_name", max_length=255, required=False, allow_blank=True
    )
    location = serializers.CharField(
        max_length=255, required=False, allow_blank=True
    )
    status = serializers.ChoiceField(choices=DealerStatus.choices, read_only=True)
    displayName = serializers.CharField(source="display_name", read_only=True)
    deactivatedAt = serializers.DateTimeField(
        source="deactivated_at", read_only=True, allow_null=True
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Dealer
        fields = [
            "id",
            "legalName",
            "outletName",
            "location",
            "status",
            "displayName",
            "deactivatedAt",
            "createdAt",
            "updatedAt",
        ]


class DealerUpdateSerializer(serializers.Serializer):
    """PATCH body; every field optional but at least one required."""

    legalName = serializers.CharField(max_length=255, required=False)
    outletName = serializers.CharField(
        max_length=255, required=False, allow_blank=True
    )
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=DealerStatus.choices, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required")
        return attrs


class DealerSummarySerializer(serializers.ModelSerializer):
    """Compact dealer shape embedded in affiliation payloads."""

    id = serializers.UUIDField(read_only=True)
    legalName = serializers.CharField(source="legal_name", read_only=True)
    outletName = serializers.CharField(source="outlet_name", read_only=True)
    displayName = serializers.CharField(source="display_name", read_only=True)
    status = serializers.CharField(read_only=True)

    class Meta:
        model = Dealer
        fields = ["id", "legalName", "outletName", "displayName", "status"]
