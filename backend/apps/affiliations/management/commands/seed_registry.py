"""
Demo data for a fresh registry.

Creates two dealers, three employees, a PRIVATE and a GOVERNMENT client with
vehicles, and one PENDING transfer. Everything goes through the services, so
constraints hold and every write is audited.
Run: python manage.py seed_registry
"""

from datetime import date

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.affiliations import registration
from apps.dealers.models import Dealer
from apps.dealers.services import create_dealer
from apps.identity import services as identity
from apps.identity.models import ClientType
from apps.transfers.services import create_transfer_request

ADMIN = "ADMIN"

DEALERS = [
    ("Hilal Enterprises Pvt Ltd", "Hilal Petroleum", "Srinagar"),
    ("Bharat Petroleum Dealers", "Bharat Fuel Services", "Anantnag"),
]

EMPLOYEES = [
    # national id, name, mobile, email, address, date of birth, dealer index, joined
    (
        "123456789012",
        "Mohammad Ali Khan",
        "+919876543210",
        "ali.khan@example.com",
        "Rajbagh, Srinagar",
        date(1985, 3, 15),
        0,
        date(2023, 1, 15),
    ),
    (
        "234567890123",
        "Rahul Sharma",
        "+919876543211",
        "rahul.sharma@example.com",
        "Lal Chowk, Srinagar",
        date(1990, 7, 22),
        0,
        date(2023, 6, 1),
    ),
    (
        "345678901234",
        "Tariq Ahmad",
        "+919876543212",
        "tariq.ahmad@example.com",
        "Anantnag",
        date(1988, 11, 10),
        1,
        date(2023, 3, 20),
    ),
]


class Command(BaseCommand):
    help = "Load demo dealers, employees, clients and a pending transfer"

    def handle(self, *args, **options):
        if Dealer.objects.filter(legal_name=DEALERS[0][0]).exists():
            self.stdout.write(self.style.WARNING("Registry already seeded, skipping"))
            return

        self.stdout.write("Seeding registry...")
        with transaction.atomic():
            dealers = [
                create_dealer(ADMIN, legal, outlet_name=outlet, location=location)
                for legal, outlet, location in DEALERS
            ]
            hilal, bharat = dealers
            dealer_actor = f"DEALER:{hilal.display_name}"

            for nid, name, mobile, email, address, dob, idx, joined in EMPLOYEES:
                registration.register_employee(
                    dealer_actor,
                    nid,
                    name,
                    dealers[idx].id,
                    joined,
                    mobile=mobile,
                    email=email,
                    address=address,
                    date_of_birth=dob,
                )

            private, _ = registration.register_client(
                dealer_actor,
                ClientType.PRIVATE,
                "ABC Trading Corp",
                hilal.id,
                tax_id="ABCTY1234D",
                vehicles=["JK01AB1234"],
                contact_person="Rajesh Kumar",
                mobile="+919876543213",
                email="contact@abctrading.com",
                address="Industrial Area, Srinagar",
                gst_number="22ABCTY1234D1Z5",
            )
            for registration_number, fuel_type in [
                ("JK01CD5678", "Petrol"),
                ("JK01EF9012", "Diesel"),
            ]:
                identity.add_vehicle(
                    private.id,
                    registration_number,
                    fuel_type=fuel_type,
                    actor=dealer_actor,
                )

            government, _ = registration.register_client(
                f"DEALER:{bharat.display_name}",
                ClientType.GOVERNMENT,
                "PWD Kashmir - Unit 04",
                bharat.id,
                org_name="PWD Kashmir",
                office_code="UNIT-04",
                official_reference="pwd.unit04@jk.gov.in",
                contact_person="Engineer Mohd Saleem",
                mobile="+911942567890",
                email="pwd.unit04@jk.gov.in",
                address="Civil Secretariat, Srinagar",
            )
            for i in range(1, 13):
                identity.add_vehicle(
                    government.id, f"JK02GH{1000 + i}", fuel_type="Diesel", actor=ADMIN
                )

            create_transfer_request(
                private.id,
                hilal.id,
                bharat.id,
                f"DEALER:{bharat.display_name}",
                reason="Closer proximity to business operations",
            )

        self.stdout.write(self.style.SUCCESS("Registry seeded"))
