"""
Affiliation Ledger services - all affiliation mutations flow through here.

Rules:
- All mutations wrapped in transaction.atomic
- Use select_for_update for row-level locking
- State changes validated through state_machine.validate_transition
- The partial unique constraints are authoritative; an IntegrityError on
  insert is translated into the same ConflictError the detector produces
"""

import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.affiliations.conflicts import client_conflict_from, employee_conflict_from
from apps.affiliations.models import (
    AffiliationStatus,
    ClientDealerLink,
    EmploymentAffiliation,
    SeparationEvent,
    SeparationType,
)
from apps.affiliations.state_machine import (
    CLIENT_LINK,
    EMPLOYMENT,
    validate_transition,
)
from apps.audit import services as audit
from apps.audit.models import AuditAction, AuditEntity
from apps.dealers.services import get_active_dealer
from core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from core.middleware import get_current_request_id

logger = logging.getLogger(__name__)


# -----------------------------
# Employments
# -----------------------------


def get_active_employment(person_id):
    return (
        EmploymentAffiliation.objects.select_related("dealer")
        .filter(person_id=person_id, status=AffiliationStatus.ACTIVE)
        .first()
    )


def list_person_employments(person_id):
    return list(
        EmploymentAffiliation.objects.select_related("dealer")
        .filter(person_id=person_id)
        .order_by("-date_of_joining", "-created_at")
    )


def list_dealer_employments(dealer_id):
    return list(
        EmploymentAffiliation.objects.select_related("person", "dealer")
        .filter(dealer_id=dealer_id)
        .order_by("-created_at")
    )


def create_employment(person_id, dealer_id, date_of_joining):
    """
    Open an ACTIVE employment. Callers run the conflict check first.

    If the one-active-per-person index rejects the insert, the winning row
    is re-read and reported exactly as the conflict check would have.
    """
    if not date_of_joining:
        raise ValidationError("dateOfJoining is required", {"field": "dateOfJoining"})
    dealer = get_active_dealer(dealer_id)

    try:
        with transaction.atomic():
            return EmploymentAffiliation.objects.create(
                person_id=person_id,
                dealer=dealer,
                date_of_joining=date_of_joining,
                status=AffiliationStatus.ACTIVE,
            )
    except IntegrityError:
        winner = get_active_employment(person_id)
        if winner is None:
            raise ConflictError("Employment could not be created")
        conflict = employee_conflict_from(winner, dealer_id)
        if conflict:
            raise conflict.as_error()
        raise InvalidStateError(
            "Employee is already active at this dealer",
            {"employmentId": str(winner.id)},
        )


def end_employment(affiliation_id, separation_date, separation_type, remarks, actor):
    """
    ACTIVE -> INACTIVE with a SeparationEvent, as one transaction.

    The affiliation row is locked for the duration.
    """
    if not separation_date:
        raise ValidationError(
            "separationDate is required", {"field": "separationDate"}
        )
    if separation_type not in SeparationType.values:
        raise ValidationError(
            "Invalid separationType",
            {"field": "separationType", "allowed": list(SeparationType.values)},
        )
    if not remarks or not remarks.strip():
        raise ValidationError("remarks must be non-empty", {"field": "remarks"})

    with transaction.atomic():
        try:
            employment = EmploymentAffiliation.objects.select_for_update().get(
                id=affiliation_id
            )
        except EmploymentAffiliation.DoesNotExist:
            raise NotFoundError(f"Employment {affiliation_id} does not exist")

        validate_transition(EMPLOYMENT, employment.status, AffiliationStatus.INACTIVE)

        if separation_date < employment.date_of_joining:
            raise ValidationError(
                "separationDate cannot precede dateOfJoining",
                {
                    "separationDate": separation_date.isoformat(),
                    "dateOfJoining": employment.date_of_joining.isoformat(),
                },
            )

        employment.status = AffiliationStatus.INACTIVE
        employment.date_of_resignation = separation_date
        employment.save(update_fields=["status", "date_of_resignation", "updated_at"])

        separation = SeparationEvent.objects.create(
            employment=employment,
            separation_date=separation_date,
            separation_type=separation_type,
            remarks=remarks.strip(),
            recorded_by_actor=actor,
        )

        audit.record(
            actor,
            AuditAction.END_EMPLOYMENT,
            AuditEntity.EMPLOYMENT,
            employment.id,
            {
                "separationDate": separation_date,
                "separationType": separation_type,
                "remarks": separation.remarks,
            },
        )

    logger.info(
        "employment_ended",
        extra={
            "operation": "END_EMPLOYMENT",
            "entity_id": str(employment.id),
            "request_id": get_current_request_id(),
        },
    )
    return employment


# -----------------------------
# Client links
# -----------------------------


def get_active_client_link(client_id):
    return (
        ClientDealerLink.objects.select_related("dealer")
        .filter(client_id=client_id, status=AffiliationStatus.ACTIVE)
        .first()
    )


def list_dealer_client_links(dealer_id):
    return list(
        ClientDealerLink.objects.select_related("client", "dealer")
        .prefetch_related("client__vehicles")
        .filter(dealer_id=dealer_id, status=AffiliationStatus.ACTIVE)
        .order_by("-date_of_onboarding")
    )


def create_client_link(client_id, dealer_id, date_of_onboarding=None):
    """Open an ACTIVE client link; same race handling as create_employment."""
    dealer = get_active_dealer(dealer_id)

    try:
        with transaction.atomic():
            return ClientDealerLink.objects.create(
                client_id=client_id,
                dealer=dealer,
                status=AffiliationStatus.ACTIVE,
                date_of_onboarding=date_of_onboarding or timezone.now(),
            )
    except IntegrityError:
        winner = get_active_client_link(client_id)
        if winner is None:
            raise ConflictError("Client link could not be created")
        conflict = client_conflict_from(winner, dealer_id)
        if conflict:
            raise conflict.as_error()
        raise InvalidStateError(
            "Client is already active at this dealer",
            {"linkId": str(winner.id)},
        )


def offboard_locked_link(link, offboarding_reason):
    """
    ACTIVE -> INACTIVE on a link row the caller has already locked.

    Used by deactivate_client_link and by transfer approval.
    """
    validate_transition(CLIENT_LINK, link.status, AffiliationStatus.INACTIVE)
    link.status = AffiliationStatus.INACTIVE
    link.date_of_offboarding = timezone.now()
    link.offboarding_reason = offboarding_reason
    link.save(
        update_fields=[
            "status",
            "date_of_offboarding",
            "offboarding_reason",
            "updated_at",
        ]
    )
    return link


def deactivate_client_link(link_id, offboarding_reason, actor):
    """Terminate a client link with a caller-provided reason."""
    if not offboarding_reason or not offboarding_reason.strip():
        raise ValidationError("reason must be non-empty", {"field": "reason"})

    with transaction.atomic():
        try:
            link = ClientDealerLink.objects.select_for_update().get(id=link_id)
        except ClientDealerLink.DoesNotExist:
            raise NotFoundError(f"Client link {link_id} does not exist")

        offboard_locked_link(link, offboarding_reason.strip())

        audit.record(
            actor,
            AuditAction.OFFBOARD,
            AuditEntity.CLIENT_LINK,
            link.id,
            {
                "clientId": str(link.client_id),
                "dealerId": str(link.dealer_id),
                "reason": link.offboarding_reason,
            },
        )

    logger.info(
        "client_link_deactivated",
        extra={
            "operation": "OFFBOARD_CLIENT",
            "entity_id": str(link.id),
            "request_id": get_current_request_id(),
        },
    )
    return link
