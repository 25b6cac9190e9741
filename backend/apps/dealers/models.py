"""
Dealer directory.

Dealers are never deleted; only the status toggles and deactivated_at is
stamped when an outlet goes inactive.
"""

import uuid
from django.db import models


class DealerStatus(models.TextChoices):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Dealer(models.Model):
    """A petroleum outlet that is a member of the association."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    legal_name = models.CharField(max_length=255)
    outlet_name = models.CharField(max_length=255, blank=True, default="")
    location = models.CharField(max_length=255, blank=True, default="")
    status = models.CharField(
        max_length=16, choices=DealerStatus.choices, default=DealerStatus.ACTIVE
    )
    deactivated_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "dealers"
        indexes = [
            models.Index(fields=["status"], name="idx_dealer_status"),
        ]

    def __str__(self):
        return self.display_name

    @property
    def display_name(self):
        """Name shown in conflict payloads and similar-match results."""
        return self.outlet_name or self.legal_name

    @property
    def is_active(self):
        return self.status == DealerStatus.ACTIVE
