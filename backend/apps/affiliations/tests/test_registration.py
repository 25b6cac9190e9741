"""
Registration orchestration tests, including the end-to-end employee and
client scenarios.
"""

from datetime import date

from django.test import TestCase

from apps.affiliations import registration
from apps.affiliations import services as ledger
from apps.affiliations.conflicts import find_similar_clients
from apps.affiliations.models import ClientDealerLink, EmploymentAffiliation
from apps.audit.models import AuditLog
from apps.dealers.models import Dealer
from apps.identity.models import Client, Person, Vehicle
from apps.identity.org_id import derive_org_id
from core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)

NATIONAL_ID = "123456789012"


class EmployeeRegistrationTests(TestCase):
    def setUp(self):
        self.d1 = Dealer.objects.create(legal_name="D1 Petroleum", outlet_name="D1 Outlet")
        self.d2 = Dealer.objects.create(legal_name="D2 Petroleum")

    def _register(self, dealer, joined=date(2024, 1, 1)):
        return registration.register_employee(
            "ADMIN", NATIONAL_ID, "Ravi Kumar", dealer.id, joined, mobile="9800000001"
        )

    def test_active_elsewhere_blocks_second_dealer(self):
        person, employment = self._register(self.d1)
        self.assertEqual(employment.status, "ACTIVE")

        with self.assertRaises(ConflictError) as ctx:
            self._register(self.d2)
        self.assertEqual(ctx.exception.code, "EMPLOYEE_ACTIVE_ELSEWHERE")
        self.assertEqual(ctx.exception.details["dealerName"], "D1 Outlet")
        self.assertEqual(ctx.exception.details["since"], "2024-01-01")
        self.assertEqual(EmploymentAffiliation.objects.count(), 1)

    def test_after_separation_person_is_reused(self):
        person, employment = self._register(self.d1)
        ledger.end_employment(
            employment.id, date(2024, 3, 31), "RESIGNED", "Moved", "ADMIN"
        )

        again, second = self._register(self.d2, joined=date(2024, 4, 1))
        self.assertEqual(again.id, person.id)
        self.assertNotEqual(second.id, employment.id)
        self.assertEqual(Person.objects.filter(national_id=NATIONAL_ID).count(), 1)
        self.assertEqual(EmploymentAffiliation.objects.filter(person=person).count(), 2)

    def test_already_active_at_same_dealer(self):
        self._register(self.d1)
        with self.assertRaises(InvalidStateError):
            self._register(self.d1)

    def test_writes_audit_entry(self):
        _, employment = self._register(self.d1)
        entry = AuditLog.objects.get(entity="EMPLOYMENT", entity_id=employment.id)
        self.assertEqual(entry.action, "CREATE")
        self.assertEqual(entry.actor, "ADMIN")
        self.assertEqual(entry.metadata["dateOfJoining"], "2024-01-01")

    def test_inactive_dealer_is_not_found(self):
        self.d1.status = "INACTIVE"
        self.d1.save()
        with self.assertRaises(NotFoundError):
            self._register(self.d1)
        self.assertFalse(Person.objects.exists())

    def test_bad_national_id(self):
        with self.assertRaises(ValidationError):
            registration.register_employee(
                "ADMIN", "12AB", "X", self.d1.id, date(2024, 1, 1)
            )


class ClientRegistrationTests(TestCase):
    def setUp(self):
        self.d1 = Dealer.objects.create(legal_name="D1 Petroleum")
        self.d2 = Dealer.objects.create(legal_name="D2 Petroleum")

    def _private(self, dealer, vehicles=("mh12ab1234",), name="ABC Trading Corp"):
        return registration.register_client(
            "DEALER:D1",
            "PRIVATE",
            name,
            dealer.id,
            tax_id="ABCTY1234D",
            vehicles=list(vehicles),
        )

    def test_private_client_with_vehicles(self):
        client_obj, created = self._private(self.d1)
        self.assertTrue(created)
        self.assertEqual(client_obj.tax_id, "ABCTY1234D")
        self.assertEqual(
            list(client_obj.vehicles.values_list("registration_number", flat=True)),
            ["MH12AB1234"],
        )
        link = ClientDealerLink.objects.get(client=client_obj, status="ACTIVE")
        self.assertEqual(link.dealer_id, self.d1.id)
        self.assertTrue(
            AuditLog.objects.filter(entity="CLIENT", entity_id=client_obj.id).exists()
        )

    def test_private_client_requires_vehicle(self):
        with self.assertRaises(ValidationError):
            self._private(self.d1, vehicles=())

    def test_active_elsewhere(self):
        self._private(self.d1)
        with self.assertRaises(ConflictError) as ctx:
            self._private(self.d2, vehicles=("KA01XY0001",))
        self.assertEqual(ctx.exception.code, "CLIENT_ACTIVE_ELSEWHERE")
        self.assertEqual(ctx.exception.details["dealerName"], "D1 Petroleum")
        self.assertFalse(Vehicle.objects.filter(registration_number="KA01XY0001").exists())

    def test_client_without_active_link_is_reused(self):
        client_obj, _ = self._private(self.d1)
        link = ClientDealerLink.objects.get(client=client_obj, status="ACTIVE")
        ledger.deactivate_client_link(link.id, "Closed account", "ADMIN")

        reused, created = self._private(self.d2, vehicles=("MH12AB1234", "KA01XY0002"))
        self.assertFalse(created)
        self.assertEqual(reused.id, client_obj.id)
        self.assertEqual(reused.vehicles.count(), 2)

    def test_vehicle_owned_elsewhere_rolls_back_registration(self):
        other = Client.objects.create(
            client_type="PRIVATE", tax_id="PQRST6789Z", name="Other"
        )
        Vehicle.objects.create(client=other, registration_number="MH12AB1234")

        with self.assertRaises(ConflictError) as ctx:
            self._private(self.d1)
        self.assertEqual(ctx.exception.code, "VEHICLE_ALREADY_REGISTERED")
        self.assertFalse(Client.objects.filter(tax_id="ABCTY1234D").exists())
        self.assertFalse(ClientDealerLink.objects.exists())

    def test_government_client_org_id_is_derived(self):
        client_obj, created = registration.register_client(
            "ADMIN",
            "GOVERNMENT",
            "PWD Division 3",
            self.d1.id,
            org_name="Public Works Department",
            office_code="PWD-03",
            official_reference="ee.pwd3@gov.in",
        )
        self.assertTrue(created)
        self.assertEqual(
            client_obj.org_id,
            derive_org_id("Public Works Department", "PWD-03", "ee.pwd3@gov.in"),
        )
        self.assertIsNone(client_obj.tax_id)
        self.assertEqual(client_obj.vehicles.count(), 0)

    def test_government_client_requires_org_fields(self):
        with self.assertRaises(ValidationError):
            registration.register_client(
                "ADMIN", "GOVERNMENT", "PWD", self.d1.id, org_name="PWD"
            )

    def test_similar_clients_finds_other_dealers_client(self):
        self._private(self.d1)
        matches = find_similar_clients(exclude_dealer_id=self.d2.id, name="abc")
        self.assertEqual(len(matches), 1)
        self.assertEqual(matches[0].client.name, "ABC Trading Corp")
        self.assertEqual(matches[0].dealer_id, self.d1.id)
