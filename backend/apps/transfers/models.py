"""
Transfer Workflow models.

A client moves from one dealer to another only through an approved
TransferRequest. PENDING is the only non-terminal state.
"""

import uuid
from django.db import models
from django.db.models import F, Q


class TransferStatus(models.TextChoices):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELED = "CANCELED"


class TransferRequest(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    client = models.ForeignKey(
        "identity.Client", on_delete=models.PROTECT, related_name="transfer_requests"
    )
    from_dealer = models.ForeignKey(
        "dealers.Dealer", on_delete=models.PROTECT, related_name="outgoing_transfers"
    )
    to_dealer = models.ForeignKey(
        "dealers.Dealer", on_delete=models.PROTECT, related_name="incoming_transfers"
    )
    status = models.CharField(
        max_length=16, choices=TransferStatus.choices, default=TransferStatus.PENDING
    )
    reason = models.TextField(null=True, blank=True)
    requested_by_actor = models.CharField(max_length=255)
    decided_by_actor = models.CharField(max_length=255, null=True, blank=True)
    version = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    decided_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "transfer_requests"
        constraints = [
            models.CheckConstraint(
                condition=~Q(from_dealer=F("to_dealer")),
                name="transfer_dealers_differ",
            ),
            models.CheckConstraint(
                condition=(
                    Q(status="PENDING", decided_at__isnull=True)
                    | (~Q(status="PENDING") & Q(decided_at__isnull=False))
                ),
                name="transfer_decided_at_matches_status",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "created_at"], name="idx_transfer_status"),
            models.Index(fields=["client"], name="idx_transfer_client"),
        ]

    def __str__(self):
        return f"{self.client_id}: {self.from_dealer_id} -> {self.to_dealer_id} ({self.status})"
