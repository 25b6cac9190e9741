"""
Identity Store models.

Persons and clients are created on first encounter of their natural key
and are never deleted. Vehicles always belong to exactly one client.
"""

import uuid
from django.db import models
from django.db.models import Q


class Person(models.Model):
    """An individual employee, keyed by national id."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    national_id = models.CharField(max_length=12, unique=True)
    name = models.CharField(max_length=255)
    mobile = models.CharField(max_length=20, null=True, blank=True)
    email = models.EmailField(null=True, blank=True)
    address = models.TextField(null=True, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "identity_persons"
        indexes = [
            models.Index(fields=["name"], name="idx_person_name"),
            models.Index(fields=["mobile"], name="idx_person_mobile"),
            models.Index(fields=["email"], name="idx_person_email"),
        ]

    def __str__(self):
        return f"{self.name} ({self.national_id})"


class ClientType(models.TextChoices):
    PRIVATE = "PRIVATE"
    GOVERNMENT = "GOVERNMENT"


class Client(models.Model):
    """
    A fuel client.

    PRIVATE clients are keyed by tax_id (PAN); GOVERNMENT clients by the
    derived org_id. Exactly one of the two is set, matching client_type.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    client_type = models.CharField(max_length=16, choices=ClientType.choices)
    tax_id = models.CharField(max_length=10, unique=True, null=True, blank=True)
    org_id = models.CharField(max_length=16, unique=True, null=True, blank=True)
    name = models.CharField(max_length=255)
    contact_person = models.CharField(max_length=255, null=True, blank=True)
    mobile = models.CharField(max_length=20, null=True, blank=True)
    email = models.EmailField(null=True, blank=True)
    address = models.TextField(null=True, blank=True)
    gst_number = models.CharField(max_length=20, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "identity_clients"
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(
                        client_type=ClientType.PRIVATE,
                        tax_id__isnull=False,
                        org_id__isnull=True,
                    )
                    | Q(
                        client_type=ClientType.GOVERNMENT,
                        tax_id__isnull=True,
                        org_id__isnull=False,
                    )
                ),
                name="client_identity_matches_type",
            ),
        ]
        indexes = [
            models.Index(fields=["name"], name="idx_client_name"),
            models.Index(fields=["mobile"], name="idx_client_mobile"),
            models.Index(fields=["email"], name="idx_client_email"),
        ]

    def __str__(self):
        return f"{self.name} ({self.tax_id or self.org_id})"


class Vehicle(models.Model):
    """A vehicle registered to a client. Follows the client on transfer."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    client = models.ForeignKey(
        Client, on_delete=models.PROTECT, related_name="vehicles"
    )
    # Stored upper-cased and trimmed
    registration_number = models.CharField(max_length=32, unique=True)
    fuel_type = models.CharField(max_length=32, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "identity_vehicles"
        indexes = [
            models.Index(fields=["client"], name="idx_vehicle_client"),
        ]

    def __str__(self):
        return self.registration_number
