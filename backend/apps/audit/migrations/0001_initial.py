# Audit logs are append-only immutable records of registry changes.

import uuid
from django.core.serializers.json import DjangoJSONEncoder
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AuditLog",
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
                ("actor", models.CharField(max_length=255)),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("CREATE", "Create"),
                            ("UPDATE", "Update"),
                            ("END_EMPLOYMENT", "End Employment"),
                            ("ADD_VEHICLE", "Add Vehicle"),
                            ("OFFBOARD", "Offboard"),
                            ("APPROVE", "Approve"),
                            ("REJECT", "Reject"),
                            ("CANCEL", "Cancel"),
                        ],
                        max_length=32,
                    ),
                ),
                (
                    "entity",
                    models.CharField(
                        choices=[
                            ("DEALER", "Dealer"),
                            ("EMPLOYMENT", "Employment"),
                            ("CLIENT", "Client"),
                            ("CLIENT_LINK", "Client Link"),
                            ("TRANSFER", "Transfer"),
                        ],
                        max_length=32,
                    ),
                ),
                ("entity_id", models.UUIDField()),
                (
                    "metadata",
                    models.JSONField(
                        blank=True, default=dict, encoder=DjangoJSONEncoder
                    ),
                ),
                (
                    "request_id",
                    models.CharField(blank=True, max_length=64, null=True),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "audit_logs",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["entity", "entity_id"], name="idx_audit_entity"
                    ),
                    models.Index(fields=["created_at"], name="idx_audit_created"),
                ],
            },
        ),
    ]
