import uuid
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Person",
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
                ("national_id", models.CharField(max_length=12, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("mobile", models.CharField(blank=True, max_length=20, null=True)),
                ("email", models.EmailField(blank=True, max_length=254, null=True)),
                ("address", models.TextField(blank=True, null=True)),
                ("date_of_birth", models.DateField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "identity_persons",
                "indexes": [
                    models.Index(fields=["name"], name="idx_person_name"),
                    models.Index(fields=["mobile"], name="idx_person_mobile"),
                    models.Index(fields=["email"], name="idx_person_email"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Client",
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
                    "client_type",
                    models.CharField(
                        choices=[("PRIVATE", "Private"), ("GOVERNMENT", "Government")],
                        max_length=16,
                    ),
                ),
                (
                    "tax_id",
                    models.CharField(blank=True, max_length=10, null=True, unique=True),
                ),
                (
                    "org_id",
                    models.CharField(blank=True, max_length=16, null=True, unique=True),
                ),
                ("name", models.CharField(max_length=255)),
                (
                    "contact_person",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                ("mobile", models.CharField(blank=True, max_length=20, null=True)),
                ("email", models.EmailField(blank=True, max_length=254, null=True)),
                ("address", models.TextField(blank=True, null=True)),
                (
                    "gst_number",
                    models.CharField(blank=True, max_length=20, null=True),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "identity_clients",
                "indexes": [
                    models.Index(fields=["name"], name="idx_client_name"),
                    models.Index(fields=["mobile"], name="idx_client_mobile"),
                    models.Index(fields=["email"], name="idx_client_email"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(
                                client_type="PRIVATE",
                                tax_id__isnull=False,
                                org_id__isnull=True,
                            )
                            | models.Q(
                                client_type="GOVERNMENT",
                                tax_id__isnull=True,
                                org_id__isnull=False,
                            )
                        ),
                        name="client_identity_matches_type",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Vehicle",
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
                    "registration_number",
                    models.CharField(max_length=32, unique=True),
                ),
                ("fuel_type", models.CharField(blank=True, max_length=32, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "client",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="vehicles",
                        to="identity.client",
                    ),
                ),
            ],
            options={
                "db_table": "identity_vehicles",
                "indexes": [
                    models.Index(fields=["client"], name="idx_vehicle_client"),
                ],
            },
        ),
    ]
