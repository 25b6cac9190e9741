import uuid
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


STATUS_CHOICES = [("ACTIVE", "Active"), ("INACTIVE", "Inactive")]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("dealers", "0001_initial"),
        ("identity", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="EmploymentAffiliation",
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
                ("date_of_joining", models.DateField()),
                ("date_of_resignation", models.DateField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=STATUS_CHOICES, default="ACTIVE", max_length=16
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "dealer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="employments",
                        to="dealers.dealer",
                    ),
                ),
                (
                    "person",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="employments",
                        to="identity.person",
                    ),
                ),
            ],
            options={
                "db_table": "affiliation_employments",
                "indexes": [
                    models.Index(
                        fields=["dealer", "status"], name="idx_employment_dealer"
                    ),
                    models.Index(
                        fields=["date_of_joining"], name="idx_employment_joined"
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(status="ACTIVE"),
                        fields=("person",),
                        name="uniq_active_employment_per_person",
                    ),
                    models.CheckConstraint(
                        condition=(
                            models.Q(status="ACTIVE", date_of_resignation__isnull=True)
                            | models.Q(
                                status="INACTIVE", date_of_resignation__isnull=False
                            )
                        ),
                        name="employment_resignation_matches_status",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SeparationEvent",
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
                ("separation_date", models.DateField()),
                (
                    "separation_type",
                    models.CharField(
                        choices=[
                            ("RESIGNED", "Resigned"),
                            ("PERFORMANCE", "Performance"),
                            ("CONDUCT", "Conduct"),
                            ("REDUNDANCY", "Redundancy"),
                            ("OTHER", "Other"),
                        ],
                        max_length=16,
                    ),
                ),
                ("remarks", models.TextField()),
                ("recorded_by_actor", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "employment",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="separation",
                        to="affiliations.employmentaffiliation",
                    ),
                ),
            ],
            options={
                "db_table": "affiliation_separation_events",
                "indexes": [
                    models.Index(
                        fields=["separation_date"], name="idx_separation_date"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ClientDealerLink",
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
                        choices=STATUS_CHOICES, default="ACTIVE", max_length=16
                    ),
                ),
                (
                    "date_of_onboarding",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                ("date_of_offboarding", models.DateTimeField(blank=True, null=True)),
                (
                    "offboarding_reason",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                ("remarks", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "client",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="dealer_links",
                        to="identity.client",
                    ),
                ),
                (
                    "dealer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="client_links",
                        to="dealers.dealer",
                    ),
                ),
            ],
            options={
                "db_table": "affiliation_client_links",
                "indexes": [
                    models.Index(fields=["dealer", "status"], name="idx_link_dealer"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(status="ACTIVE"),
                        fields=("client",),
                        name="uniq_active_link_per_client",
                    ),
                    models.CheckConstraint(
                        condition=(
                            models.Q(status="ACTIVE", date_of_offboarding__isnull=True)
                            | models.Q(
                                status="INACTIVE", date_of_offboarding__isnull=False
                            )
                        ),
                        name="link_offboarding_matches_status",
                    ),
                ],
            },
        ),
    ]
