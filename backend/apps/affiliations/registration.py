"""
Registration orchestration for employees and clients.

Each registration resolves the identity, runs the conflict check, and writes
the identity, the affiliation and the audit entry in one transaction. A
conflict aborts the whole unit before anything is persisted.
"""

import logging

from django.db import transaction

from apps.affiliations import services as ledger
from apps.affiliations.conflicts import (
    check_client_conflict,
    check_employee_conflict,
)
from apps.audit import services as audit
from apps.audit.models import AuditAction, AuditEntity
from apps.dealers.services import get_active_dealer
from apps.identity import services as identity
from apps.identity.models import ClientType
from apps.identity.org_id import derive_org_id
from apps.identity.validators import (
    normalize_registration,
    normalize_tax_id,
    require_text,
    validate_national_id,
    validate_tax_id,
)
from core.exceptions import InvalidStateError, ValidationError
from core.middleware import get_current_request_id

logger = logging.getLogger(__name__)


def _raise_conflict(conflict, operation, entity_id):
    logger.warning(
        "registration_conflict",
        extra={
            "operation": operation,
            "entity_id": str(entity_id),
            "request_id": get_current_request_id(),
            "conflict_code": conflict.code,
            "conflict_dealer_id": str(conflict.dealer_id),
        },
    )
    raise conflict.as_error()


def register_employee(
    actor,
    national_id,
    name,
    dealer_id,
    date_of_joining,
    mobile=None,
    email=None,
    address=None,
    date_of_birth=None,
):
    """
    Register an employee at a dealer.

    The Person is reused when the national id is already known; otherwise it
    is created. Returns (person, employment).
    """
    validate_national_id(national_id)
    require_text(name, "name")
    if not date_of_joining:
        raise ValidationError("dateOfJoining is required", {"field": "dateOfJoining"})
    dealer = get_active_dealer(dealer_id)

    with transaction.atomic():
        person = identity.find_person_by_national_id(national_id)
        if person is not None:
            conflict = check_employee_conflict(person.id, dealer.id)
            if conflict:
                _raise_conflict(conflict, "REGISTER_EMPLOYEE", person.id)
            if ledger.get_active_employment(person.id) is not None:
                raise InvalidStateError(
                    "Employee is already active at this dealer",
                    {"personId": str(person.id), "dealerId": str(dealer.id)},
                )
        else:
            person = identity.create_person(
                national_id,
                name,
                mobile=mobile,
                email=email,
                address=address,
                date_of_birth=date_of_birth,
            )

        employment = ledger.create_employment(person.id, dealer.id, date_of_joining)

        audit.record(
            actor,
            AuditAction.CREATE,
            AuditEntity.EMPLOYMENT,
            employment.id,
            {
                "personId": str(person.id),
                "dealerId": str(dealer.id),
                "dateOfJoining": date_of_joining,
            },
        )

    logger.info(
        "employee_registered",
        extra={
            "operation": "REGISTER_EMPLOYEE",
            "entity_id": str(employment.id),
            "request_id": get_current_request_id(),
        },
    )
    return person, employment


def register_client(
    actor,
    client_type,
    name,
    dealer_id,
    tax_id=None,
    org_name=None,
    office_code=None,
    official_reference=None,
    vehicles=None,
    contact_person=None,
    mobile=None,
    email=None,
    address=None,
    gst_number=None,
):
    """
    Register a client at a dealer.

    PRIVATE clients need a tax id and at least one vehicle. GOVERNMENT
    clients need the org name, office code and official email or letter
    number, from which the org id is derived. An existing client with no
    active link elsewhere is reused. Returns (client, created).
    """
    require_text(name, "name")
    vehicles = [v for v in (vehicles or []) if normalize_registration(v)]

    if client_type == ClientType.PRIVATE:
        tax_id = validate_tax_id(normalize_tax_id(tax_id))
        if not vehicles:
            raise ValidationError(
                "PRIVATE clients require at least one vehicle", {"field": "vehicles"}
            )
        org_id = None
    elif client_type == ClientType.GOVERNMENT:
        org_name = require_text(org_name, "orgName")
        office_code = require_text(office_code, "officeCode")
        official_reference = require_text(
            official_reference, "officialEmailOrLetterNo"
        )
        org_id = derive_org_id(org_name, office_code, official_reference)
        tax_id = None
    else:
        raise ValidationError(
            "clientType must be PRIVATE or GOVERNMENT", {"field": "clientType"}
        )

    dealer = get_active_dealer(dealer_id)

    with transaction.atomic():
        if client_type == ClientType.PRIVATE:
            client = identity.find_client_by_tax_id(tax_id)
        else:
            client = identity.find_client_by_org_id(org_id)

        created = client is None
        if not created:
            conflict = check_client_conflict(client.id, dealer.id)
            if conflict:
                _raise_conflict(conflict, "REGISTER_CLIENT", client.id)
            if ledger.get_active_client_link(client.id) is not None:
                raise InvalidStateError(
                    "Client is already active at this dealer",
                    {"clientId": str(client.id), "dealerId": str(dealer.id)},
                )
        else:
            client = identity.create_client(
                client_type,
                name,
                tax_id=tax_id,
                org_id=org_id,
                contact_person=contact_person,
                mobile=mobile,
                email=email,
                address=address,
                gst_number=gst_number,
            )

        added = identity.register_vehicles(client, vehicles)
        link = ledger.create_client_link(client.id, dealer.id)

        audit.record(
            actor,
            AuditAction.CREATE,
            AuditEntity.CLIENT,
            client.id,
            {
                "clientType": client.client_type,
                "dealerId": str(dealer.id),
                "linkId": str(link.id),
                "reused": not created,
                "vehicles": [v.registration_number for v in added],
            },
        )

    logger.info(
        "client_registered",
        extra={
            "operation": "REGISTER_CLIENT",
            "entity_id": str(client.id),
            "request_id": get_current_request_id(),
        },
    )
    return client, created
