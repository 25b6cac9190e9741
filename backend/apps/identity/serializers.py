"""
Identity serializers - no business logic, shape only.
"""

from rest_framework import serializers
from apps.identity.models import Client, Person, Vehicle


class PersonSerializer(serializers.ModelSerializer):
    id = serializers.UUIDField(read_only=True)
    nationalId = serializers.CharField(source="national_id", read_only=True)
    name = serializers.CharField(read_only=True)
    mobile = serializers.CharField(read_only=True, allow_null=True)
    email = serializers.EmailField(read_only=True, allow_null=True)
    address = serializers.CharField(read_only=True, allow_null=True)
    dateOfBirth = serializers.DateField(
        source="date_of_birth", read_only=True, allow_null=True
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Person
        fields = [
            "id",
            "nationalId",
            "name",
            "mobile",
            "email",
            "address",
            "dateOfBirth",
            "createdAt",
        ]


class VehicleSerializer(serializers.ModelSerializer):
    id = serializers.UUIDField(read_only=True)
    clientId = serializers.UUIDField(source="client_id", read_only=True)
    registrationNumber = serializers.CharField(
        source="registration_number", read_only=True
    )
    fuelType = serializers.CharField(source="fuel_type", read_only=True, allow_null=True)
    notes = serializers.CharField(read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Vehicle
        fields = [
            "id",
            "clientId",
            "registrationNumber",
            "fuelType",
            "notes",
            "createdAt",
        ]


class ClientSerializer(serializers.ModelSerializer):
    id = serializers.UUIDField(read_only=True)
    clientType = serializers.CharField(source="client_type", read_only=True)
    taxId = serializers.CharField(source="tax_id", read_only=True, allow_null=True)
    orgId = serializers.CharField(source="org_id", read_only=True, allow_null=True)
    name = serializers.CharField(read_only=True)
    contactPerson = serializers.CharField(
        source="contact_person", read_only=True, allow_null=True
    )
    mobile = serializers.CharField(read_only=True, allow_null=True)
    email = serializers.EmailField(read_only=True, allow_null=True)
    address = serializers.CharField(read_only=True, allow_null=True)
    gstNumber = serializers.CharField(
        source="gst_number", read_only=True, allow_null=True
    )
    vehicles = VehicleSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Client
        fields = [
            "id",
            "clientType",
            "taxId",
            "orgId",
            "name",
            "contactPerson",
            "mobile",
            "email",
            "address",
            "gstNumber",
            "vehicles",
            "createdAt",
        ]
