"""
Identity Store services.

Persons are resolved by national id, clients by tax id (PRIVATE) or derived
org id (GOVERNMENT). The unique indexes are the final guard against
duplicate identities; an IntegrityError on insert becomes a ConflictError.
"""

import logging

from django.db import IntegrityError, transaction

from apps.audit import services as audit
from apps.audit.models import AuditAction, AuditEntity
from apps.identity.models import Client, ClientType, Person, Vehicle
from apps.identity.validators import (
    normalize_registration,
    normalize_tax_id,
    require_text,
    validate_national_id,
    validate_optional_email,
    validate_tax_id,
)
from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.middleware import get_current_request_id

logger = logging.getLogger(__name__)


# -----------------------------
# Persons
# -----------------------------


def find_person_by_national_id(national_id):
    return Person.objects.filter(national_id=national_id).first()


def create_person(
    national_id, name, mobile=None, email=None, address=None, date_of_birth=None
):
    """Create a Person. ConflictError if the national id already exists."""
    validate_national_id(national_id)
    name = require_text(name, "name")
    email = validate_optional_email(email)

    if Person.objects.filter(national_id=national_id).exists():
        raise ConflictError(
            "A person with this nationalId already exists",
            {"nationalId": national_id},
            code="PERSON_ALREADY_EXISTS",
        )

    try:
        with transaction.atomic():
            return Person.objects.create(
                national_id=national_id,
                name=name,
                mobile=mobile or None,
                email=email,
                address=address or None,
                date_of_birth=date_of_birth,
            )
    except IntegrityError:
        raise ConflictError(
            "A person with this nationalId already exists",
            {"nationalId": national_id},
            code="PERSON_ALREADY_EXISTS",
        )


def search_persons(national_id=None, name=None, mobile=None):
    """ANDed filters; name is a case-insensitive substring match."""
    if not (national_id or name or mobile):
        raise ValidationError("At least one search parameter is required")

    queryset = Person.objects.all()
    if national_id:
        queryset = queryset.filter(national_id=national_id)
    if name:
        queryset = queryset.filter(name__icontains=name)
    if mobile:
        queryset = queryset.filter(mobile=mobile)
    return list(queryset.order_by("name"))


# -----------------------------
# Clients
# -----------------------------


def get_client(client_id):
    try:
        return Client.objects.get(id=client_id)
    except Client.DoesNotExist:
        raise NotFoundError(f"Client {client_id} does not exist")


def find_client_by_tax_id(tax_id):
    return Client.objects.filter(tax_id=normalize_tax_id(tax_id)).first()


def find_client_by_org_id(org_id):
    return Client.objects.filter(org_id=org_id).first()


def create_client(client_type, name, tax_id=None, org_id=None, **contact):
    """
    Create a Client after checking the type-specific identity rules.

    contact may carry contact_person, mobile, email, address and gst_number.
    """
    if client_type not in ClientType.values:
        raise ValidationError(
            "clientType must be PRIVATE or GOVERNMENT", {"field": "clientType"}
        )
    name = require_text(name, "name")

    if client_type == ClientType.PRIVATE:
        tax_id = validate_tax_id(normalize_tax_id(tax_id))
        if org_id:
            raise ValidationError("PRIVATE clients cannot carry an orgId")
        natural_key = {"taxId": tax_id}
    else:
        if not org_id:
            raise ValidationError("GOVERNMENT clients require an orgId")
        if tax_id:
            raise ValidationError("GOVERNMENT clients cannot carry a taxId")
        natural_key = {"orgId": org_id}

    contact["email"] = validate_optional_email(contact.get("email"))
    allowed = {"contact_person", "mobile", "email", "address", "gst_number"}
    fields = {k: (v or None) for k, v in contact.items() if k in allowed}

    try:
        with transaction.atomic():
            return Client.objects.create(
                client_type=client_type,
                name=name,
                tax_id=tax_id if client_type == ClientType.PRIVATE else None,
                org_id=org_id if client_type == ClientType.GOVERNMENT else None,
                **fields,
            )
    except IntegrityError:
        raise ConflictError("A client with this identity already exists", natural_key)


def search_clients(
    tax_id=None, org_id=None, name=None, vehicle_registration=None, org=None
):
    """
    ANDed filters. name, org and vehicle registration are substring matches;
    org is matched against the client name, like name.
    """
    if not (tax_id or org_id or name or vehicle_registration or org):
        raise ValidationError("At least one search parameter is required")

    queryset = Client.objects.all()
    if tax_id:
        queryset = queryset.filter(tax_id=normalize_tax_id(tax_id))
    if org_id:
        queryset = queryset.filter(org_id=org_id)
    if name:
        queryset = queryset.filter(name__icontains=name)
    if org:
        queryset = queryset.filter(name__icontains=org)
    if vehicle_registration:
        queryset = queryset.filter(
            vehicles__registration_number__icontains=vehicle_registration.strip()
        )
    return list(queryset.distinct().order_by("name").prefetch_related("vehicles"))


# -----------------------------
# Vehicles
# -----------------------------


def _vehicle_taken(registration_number, owner_id):
    return ConflictError(
        f"Vehicle {registration_number} is already registered",
        {"registrationNumber": registration_number, "clientId": str(owner_id)},
        code="VEHICLE_ALREADY_REGISTERED",
    )


def add_vehicle(client_id, registration_number, fuel_type=None, notes=None, actor=None):
    """
    Register a vehicle to a client.

    ConflictError(VEHICLE_ALREADY_REGISTERED) if any client already owns the
    registration. An audit entry is written when an actor is given.
    """
    client = get_client(client_id)
    registration_number = normalize_registration(registration_number)
    if not registration_number:
        raise ValidationError(
            "registrationNumber must be non-empty", {"field": "registrationNumber"}
        )

    existing = Vehicle.objects.filter(registration_number=registration_number).first()
    if existing:
        raise _vehicle_taken(registration_number, existing.client_id)

    with transaction.atomic():
        try:
            with transaction.atomic():
                vehicle = Vehicle.objects.create(
                    client=client,
                    registration_number=registration_number,
                    fuel_type=fuel_type or None,
                    notes=notes or None,
                )
        except IntegrityError:
            owner = Vehicle.objects.get(registration_number=registration_number)
            raise _vehicle_taken(registration_number, owner.client_id)

        if actor:
            audit.record(
                actor,
                AuditAction.ADD_VEHICLE,
                AuditEntity.CLIENT,
                client.id,
                {"registrationNumber": registration_number, "fuelType": fuel_type},
            )

    logger.info(
        "vehicle_added",
        extra={
            "operation": "ADD_VEHICLE",
            "entity_id": str(client.id),
            "request_id": get_current_request_id(),
        },
    )
    return vehicle


def register_vehicles(client, registrations):
    """
    Attach each registration to the client.

    Registrations the client already owns are skipped; one owned by another
    client raises ConflictError. Returns the newly created vehicles.
    """
    created = []
    seen = set()
    for raw in registrations or []:
        registration_number = normalize_registration(raw)
        if not registration_number or registration_number in seen:
            continue
        seen.add(registration_number)

        existing = Vehicle.objects.filter(
            registration_number=registration_number
        ).first()
        if existing:
            if existing.client_id == client.id:
                continue
            raise _vehicle_taken(registration_number, existing.client_id)

        try:
            with transaction.atomic():
                created.append(
                    Vehicle.objects.create(
                        client=client, registration_number=registration_number
                    )
                )
        except IntegrityError:
            owner = Vehicle.objects.get(registration_number=registration_number)
            raise _vehicle_taken(registration_number, owner.client_id)
    return created
