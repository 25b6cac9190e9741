import uuid
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("dealers", "0001_initial"),
        ("identity", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="TransferRequest",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("APPROVED", "Approved"),
                            ("REJECTED", "Rejected"),
                            ("CANCELED", "Canceled"),
                        ],
                        default="PENDING",
                        max_length=16,
                    ),
                ),
                ("reason", models.TextField(blank=True, null=True)),
                ("requested_by_actor", models.CharField(max_length=255)),
                (
                    "decided_by_actor",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                ("version", models.IntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("decided_at", models.DateTimeField(blank=True, null=True)),
                (
                    "client",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transfer_requests",
                        to="identity.client",
                    ),
                ),
                (
                    "from_dealer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="outgoing_transfers",
                        to="dealers.dealer",
                    ),
                ),
                (
                    "to_dealer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="incoming_transfers",
                        to="dealers.dealer",
                    ),
                ),
            ],
            options={
                "db_table": "transfer_requests",
                "indexes": [
                    models.Index(
                        fields=["status", "created_at"], name="idx_transfer_status"
                    ),
                    models.Index(fields=["client"], name="idx_transfer_client"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=~models.Q(from_dealer=models.F("to_dealer")),
                        name="transfer_dealers_differ",
                    ),
                    models.CheckConstraint(
                        condition=(
                            models.Q(status="PENDING", decided_at__isnull=True)
                            | (
                                ~models.Q(status="PENDING")
                                & models.Q(decided_at__isnull=False)
                            )
                        ),
                        name="transfer_decided_at_matches_status",
                    ),
                ],
            },
        ),
    ]
