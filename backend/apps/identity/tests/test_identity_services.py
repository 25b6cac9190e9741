"""
Identity Store service tests: person and client creation, search, vehicles.
"""

from django.test import TestCase

from apps.audit.models import AuditLog
from apps.identity import services as identity
from apps.identity.models import Client, Person, Vehicle
from core.exceptions import ConflictError, NotFoundError, ValidationError


class PersonServiceTests(TestCase):
    def test_create_and_find_person(self):
        person = identity.create_person(
            "123456789012", " Anil Kumar ", mobile="9800000001", email="anil@x.in"
        )
        self.assertEqual(person.name, "Anil Kumar")
        self.assertEqual(identity.find_person_by_national_id("123456789012"), person)
        self.assertIsNone(identity.find_person_by_national_id("999999999999"))

    def test_create_person_duplicate_national_id(self):
        identity.create_person("123456789012", "First")
        with self.assertRaises(ConflictError) as ctx:
            identity.create_person("123456789012", "Second")
        self.assertEqual(ctx.exception.code, "PERSON_ALREADY_EXISTS")

    def test_create_person_validation(self):
        with self.assertRaises(ValidationError):
            identity.create_person("12345", "Short Id")
        with self.assertRaises(ValidationError):
            identity.create_person("123456789012", "")
        with self.assertRaises(ValidationError):
            identity.create_person("123456789012", "Bad Email", email="nope")

    def test_search_persons_requires_a_filter(self):
        with self.assertRaises(ValidationError):
            identity.search_persons()

    def test_search_persons_ands_filters(self):
        Person.objects.create(national_id="111111111111", name="Suresh Patil", mobile="1")
        Person.objects.create(national_id="222222222222", name="Suresh Rao", mobile="2")

        by_name = identity.search_persons(name="suresh")
        self.assertEqual(len(by_name), 2)

        both = identity.search_persons(name="suresh", mobile="2")
        self.assertEqual([p.national_id for p in both], ["222222222222"])


class ClientServiceTests(TestCase):
    def test_create_private_client_normalizes_tax_id(self):
        client_obj = identity.create_client("PRIVATE", "Fleet Co", tax_id="abcde1234f")
        self.assertEqual(client_obj.tax_id, "ABCDE1234F")
        self.assertIsNone(client_obj.org_id)
        self.assertEqual(identity.find_client_by_tax_id("ABCDE1234F"), client_obj)

    def test_create_government_client(self):
        client_obj = identity.create_client(
            "GOVERNMENT", "PWD Office", org_id="0123456789ABCDEF"
        )
        self.assertIsNone(client_obj.tax_id)
        self.assertEqual(identity.find_client_by_org_id("0123456789ABCDEF"), client_obj)

    def test_type_specific_rules(self):
        with self.assertRaises(ValidationError):
            identity.create_client("PRIVATE", "No Pan")
        with self.assertRaises(ValidationError):
            identity.create_client("GOVERNMENT", "No Org")
        with self.assertRaises(ValidationError):
            identity.create_client(
                "GOVERNMENT", "Both", tax_id="ABCDE1234F", org_id="0123456789ABCDEF"
            )
        with self.assertRaises(ValidationError):
            identity.create_client("OTHER", "Unknown")

    def test_duplicate_tax_id_conflicts(self):
        identity.create_client("PRIVATE", "One", tax_id="ABCDE1234F")
        with self.assertRaises(ConflictError):
            identity.create_client("PRIVATE", "Two", tax_id="ABCDE1234F")

    def test_search_clients_by_vehicle_is_distinct(self):
        client_obj = Client.objects.create(
            client_type="PRIVATE", tax_id="ABCDE1234F", name="Fleet Co"
        )
        Vehicle.objects.create(client=client_obj, registration_number="MH12AB1234")
        Vehicle.objects.create(client=client_obj, registration_number="MH12AB9999")

        results = identity.search_clients(vehicle_registration="mh12ab")
        self.assertEqual(results, [client_obj])

    def test_search_clients_requires_a_filter(self):
        with self.assertRaises(ValidationError):
            identity.search_clients()

    def test_search_clients_name_and_org_are_anded(self):
        Client.objects.create(
            client_type="PRIVATE", tax_id="ABCDE1234F", name="Fleet Trading Co"
        )
        Client.objects.create(
            client_type="PRIVATE", tax_id="BCDEF2345G", name="Fleet Logistics"
        )
        results = identity.search_clients(name="fleet", org="trading")
        self.assertEqual([c.name for c in results], ["Fleet Trading Co"])
        self.assertEqual(identity.search_clients(name="fleet", org="cargo"), [])


class VehicleServiceTests(TestCase):
    def setUp(self):
        self.owner = Client.objects.create(
            client_type="PRIVATE", tax_id="ABCDE1234F", name="Owner"
        )
        self.other = Client.objects.create(
            client_type="PRIVATE", tax_id="PQRST6789Z", name="Other"
        )

    def test_add_vehicle_uppercases_and_audits(self):
        vehicle = identity.add_vehicle(
            self.owner.id, " ka01mn0001 ", fuel_type="DIESEL", actor="DEALER:Owner Outlet"
        )
        self.assertEqual(vehicle.registration_number, "KA01MN0001")
        entry = AuditLog.objects.get(action="ADD_VEHICLE")
        self.assertEqual(entry.entity, "CLIENT")
        self.assertEqual(entry.entity_id, self.owner.id)
        self.assertEqual(entry.actor, "DEALER:Owner Outlet")

    def test_add_vehicle_conflict_across_clients(self):
        identity.add_vehicle(self.owner.id, "KA01MN0001")
        with self.assertRaises(ConflictError) as ctx:
            identity.add_vehicle(self.other.id, "ka01mn0001")
        self.assertEqual(ctx.exception.code, "VEHICLE_ALREADY_REGISTERED")

    def test_add_vehicle_unknown_client_and_blank(self):
        with self.assertRaises(NotFoundError):
            identity.add_vehicle("00000000-0000-0000-0000-000000000000", "X1")
        with self.assertRaises(ValidationError):
            identity.add_vehicle(self.owner.id, "   ")

    def test_register_vehicles_is_idempotent_for_owner(self):
        created = identity.register_vehicles(self.owner, ["ka01", "KA01", "KA02"])
        self.assertEqual(len(created), 2)
        again = identity.register_vehicles(self.owner, ["KA01"])
        self.assertEqual(again, [])

        with self.assertRaises(ConflictError):
            identity.register_vehicles(self.other, ["KA02"])
