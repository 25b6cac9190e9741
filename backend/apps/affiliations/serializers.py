"""
Affiliation serializers.

Input serializers validate request shape only; business rules live in the
services. Output serializers use the camelCase wire format.
"""

from rest_framework import serializers

from apps.affiliations.models import (
    ClientDealerLink,
    EmploymentAffiliation,
    SeparationEvent,
    SeparationType,
)
from apps.affiliations.services import get_active_client_link
from apps.dealers.serializers import DealerSummarySerializer
from apps.identity.models import ClientType
from apps.identity.serializers import ClientSerializer, PersonSerializer

# -----------------------------
# Input
# -----------------------------


class EmployeeRegistrationSerializer(serializers.Serializer):
    nationalId = serializers.CharField(max_length=12)
    name = serializers.CharField(max_length=255)
    mobile = serializers.CharField(
        max_length=20, required=False, allow_blank=True, allow_null=True
    )
    email = serializers.CharField(
        max_length=254, required=False, allow_blank=True, allow_null=True
    )
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    dateOfBirth = serializers.DateField(required=False, allow_null=True)
    dealerId = serializers.UUIDField()
    dateOfJoining = serializers.DateField()


class EndEmploymentSerializer(serializers.Serializer):
    separationDate = serializers.DateField()
    separationType = serializers.ChoiceField(choices=SeparationType.choices)
    remarks = serializers.CharField()


class ClientRegistrationSerializer(serializers.Serializer):
    clientType = serializers.ChoiceField(choices=ClientType.choices)
    name = serializers.CharField(max_length=255)
    dealerId = serializers.UUIDField()
    taxId = serializers.CharField(
        max_length=10, required=False, allow_blank=True, allow_null=True
    )
    orgName = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    officeCode = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
    officialEmailOrLetterNo = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
    contactPerson = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
    mobile = serializers.CharField(
        max_length=20, required=False, allow_blank=True, allow_null=True
    )
    email = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    gstNumber = serializers.CharField(
        max_length=20, required=False, allow_blank=True, allow_null=True
    )
    vehicles = serializers.ListField(
        child=serializers.CharField(max_length=32, allow_blank=True),
        required=False,
        default=list,
    )


class AddVehicleSerializer(serializers.Serializer):
    registrationNumber = serializers.CharField(max_length=32)
    fuelType = serializers.CharField(
        max_length=32, required=False, allow_blank=True, allow_null=True
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class EndClientLinkSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255)


# -----------------------------
# Output
# -----------------------------


class SeparationEventSerializer(serializers.ModelSerializer):
    id = serializers.UUIDField(read_only=True)
    separationDate = serializers.DateField(source="separation_date", read_only=True)
    separationType = serializers.CharField(source="separation_type", read_only=True)
    remarks = serializers.CharField(read_only=True)
    recordedByActor = serializers.CharField(source="recorded_by_actor", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = SeparationEvent
        fields = [
            "id",
            "separationDate",
            "separationType",
            "remarks",
            "recordedByActor",
            "createdAt",
        ]


class EmploymentSerializer(serializers.ModelSerializer):
    id = serializers.UUIDField(read_only=True)
    personId = serializers.UUIDField(source="person_id", read_only=True)
    dealerId = serializers.UUIDField(source="dealer_id", read_only=True)
    dealerName = serializers.CharField(source="dealer.display_name", read_only=True)
    dateOfJoining = serializers.DateField(source="date_of_joining", read_only=True)
    dateOfResignation = serializers.DateField(
        source="date_of_resignation", read_only=True, allow_null=True
    )
    status = serializers.CharField(read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = EmploymentAffiliation
        fields = [
            "id",
            "personId",
            "dealerId",
            "dealerName",
            "dateOfJoining",
            "dateOfResignation",
            "status",
            "createdAt",
        ]


class EmploymentWithPersonSerializer(EmploymentSerializer):
    person = PersonSerializer(read_only=True)

    class Meta(EmploymentSerializer.Meta):
        fields = EmploymentSerializer.Meta.fields + ["person"]


class PersonWithEmploymentsSerializer(PersonSerializer):
    """Search result: the person plus their full employment history."""

    employments = serializers.SerializerMethodField()

    class Meta(PersonSerializer.Meta):
        fields = PersonSerializer.Meta.fields + ["employments"]

    def get_employments(self, obj):
        employments = obj.employments.select_related("dealer").order_by(
            "-date_of_joining", "-created_at"
        )
        return EmploymentSerializer(employments, many=True).data


class ClientLinkSerializer(serializers.ModelSerializer):
    id = serializers.UUIDField(read_only=True)
    clientId = serializers.UUIDField(source="client_id", read_only=True)
    dealerId = serializers.UUIDField(source="dealer_id", read_only=True)
    dealerName = serializers.CharField(source="dealer.display_name", read_only=True)
    status = serializers.CharField(read_only=True)
    dateOfOnboarding = serializers.DateTimeField(
        source="date_of_onboarding", read_only=True
    )
    dateOfOffboarding = serializers.DateTimeField(
        source="date_of_offboarding", read_only=True, allow_null=True
    )
    offboardingReason = serializers.CharField(
        source="offboarding_reason", read_only=True, allow_null=True
    )
    remarks = serializers.CharField(read_only=True, allow_null=True)

    class Meta:
        model = ClientDealerLink
        fields = [
            "id",
            "clientId",
            "dealerId",
            "dealerName",
            "status",
            "dateOfOnboarding",
            "dateOfOffboarding",
            "offboardingReason",
            "remarks",
        ]


class ClientLinkDetailSerializer(ClientLinkSerializer):
    client = ClientSerializer(read_only=True)

    class Meta(ClientLinkSerializer.Meta):
        fields = ClientLinkSerializer.Meta.fields + ["client"]


class ClientWithActiveLinkSerializer(ClientSerializer):
    """Search result: the client, its vehicles and its current dealer link."""

    activeLink = serializers.SerializerMethodField()

    class Meta(ClientSerializer.Meta):
        fields = ClientSerializer.Meta.fields + ["activeLink"]

    def get_activeLink(self, obj):
        link = get_active_client_link(obj.id)
        return ClientLinkSerializer(link).data if link else None


class SimilarEmployeeSerializer(serializers.Serializer):
    employment = EmploymentSerializer(source="*", read_only=True)
    person = PersonSerializer(read_only=True)
    dealer = DealerSummarySerializer(read_only=True)
    dealerName = serializers.CharField(source="dealer.display_name", read_only=True)


class SimilarClientSerializer(serializers.Serializer):
    link = ClientLinkSerializer(source="*", read_only=True)
    client = ClientSerializer(read_only=True)
    dealer = DealerSummarySerializer(read_only=True)
    dealerName = serializers.CharField(source="dealer.display_name", read_only=True)
