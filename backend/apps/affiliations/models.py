"""
Affiliation Ledger models.

A person holds at most one ACTIVE employment and a client at most one ACTIVE
dealer link, system-wide. Partial unique constraints enforce this in the
database; the application checks only exist to build a useful 409 payload.

ACTIVE -> INACTIVE is the only transition. Rows are never deleted and a
rehire or re-onboarding creates a new row.
"""

import uuid
from django.db import models
from django.db.models import Q
from django.utils import timezone


class AffiliationStatus(models.TextChoices):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class SeparationType(models.TextChoices):
    RESIGNED = "RESIGNED"
    PERFORMANCE = "PERFORMANCE"
    CONDUCT = "CONDUCT"
    REDUNDANCY = "REDUNDANCY"
    OTHER = "OTHER"


class EmploymentAffiliation(models.Model):
    """One stint of a person at a dealer."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    person = models.ForeignKey(
        "identity.Person", on_delete=models.PROTECT, related_name="employments"
    )
    dealer = models.ForeignKey(
        "dealers.Dealer", on_delete=models.PROTECT, related_name="employments"
    )
    date_of_joining = models.DateField()
    date_of_resignation = models.DateField(null=True, blank=True)
    status = models.CharField(
        max_length=16,
        choices=AffiliationStatus.choices,
        default=AffiliationStatus.ACTIVE,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "affiliation_employments"
        constraints = [
            models.UniqueConstraint(
                fields=["person"],
                condition=Q(status="ACTIVE"),
                name="uniq_active_employment_per_person",
            ),
            models.CheckConstraint(
                condition=(
                    Q(status="ACTIVE", date_of_resignation__isnull=True)
                    | Q(status="INACTIVE", date_of_resignation__isnull=False)
                ),
                name="employment_resignation_matches_status",
            ),
        ]
        indexes = [
            models.Index(fields=["dealer", "status"], name="idx_employment_dealer"),
            models.Index(fields=["date_of_joining"], name="idx_employment_joined"),
        ]

    def __str__(self):
        return f"{self.person_id} @ {self.dealer_id} ({self.status})"


class SeparationEvent(models.Model):
    """Why and when an employment ended. Exactly one per ended employment."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    employment = models.OneToOneField(
        EmploymentAffiliation, on_delete=models.PROTECT, related_name="separation"
    )
    separation_date = models.DateField()
    separation_type = models.CharField(max_length=16, choices=SeparationType.choices)
    remarks = models.TextField()
    recorded_by_actor = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "affiliation_separation_events"
        indexes = [
            models.Index(fields=["separation_date"], name="idx_separation_date"),
        ]

    def __str__(self):
        return f"{self.separation_type} on {self.separation_date}"


class ClientDealerLink(models.Model):
    """One period during which a client is served by a dealer."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    client = models.ForeignKey(
        "identity.Client", on_delete=models.PROTECT, related_name="dealer_links"
    )
    dealer = models.ForeignKey(
        "dealers.Dealer", on_delete=models.PROTECT, related_name="client_links"
    )
    status = models.CharField(
        max_length=16,
        choices=AffiliationStatus.choices,
        default=AffiliationStatus.ACTIVE,
    )
    date_of_onboarding = models.DateTimeField(default=timezone.now)
    date_of_offboarding = models.DateTimeField(null=True, blank=True)
    offboarding_reason = models.CharField(max_length=255, null=True, blank=True)
    remarks = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "affiliation_client_links"
        constraints = [
            models.UniqueConstraint(
                fields=["client"],
                condition=Q(status="ACTIVE"),
                name="uniq_active_link_per_client",
            ),
            models.CheckConstraint(
                condition=(
                    Q(status="ACTIVE", date_of_offboarding__isnull=True)
                    | Q(status="INACTIVE", date_of_offboarding__isnull=False)
                ),
                name="link_offboarding_matches_status",
            ),
        ]
        indexes = [
            models.Index(fields=["dealer", "status"], name="idx_link_dealer"),
        ]

    def __str__(self):
        return f"{self.client_id} @ {self.dealer_id} ({self.status})"
