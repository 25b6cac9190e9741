"""
Transfer Workflow services.

Rules:
- All mutations wrapped in transaction.atomic
- Request row and the outgoing link are locked with select_for_update
- Decisions are version-locked so two deciders cannot both move a request
- Approval is all-or-nothing: any failure leaves the old link ACTIVE
"""

import logging

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from apps.affiliations import services as ledger
from apps.affiliations.models import AffiliationStatus, ClientDealerLink
from apps.affiliations.state_machine import TRANSFER, validate_transition
from apps.audit import services as audit
from apps.audit.models import AuditAction, AuditEntity
from apps.dealers.models import Dealer
from apps.identity.models import Client
from apps.transfers.models import TransferRequest, TransferStatus
from core.exceptions import (
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from core.middleware import get_current_request_id
from core.permissions import is_admin_actor

logger = logging.getLogger(__name__)

TRANSFER_OFFBOARDING_REASON = "TRANSFER"


def _require_admin(actor, action):
    if not is_admin_actor(actor):
        raise PermissionDeniedError(f"Only ADMIN can {action} transfers")


def _lock_transfer(transfer_id):
    try:
        return TransferRequest.objects.select_for_update().get(id=transfer_id)
    except TransferRequest.DoesNotExist:
        raise NotFoundError(f"TransferRequest {transfer_id} does not exist")


def _decide(transfer, target_status, actor):
    """Move a locked PENDING request to target_status, version-locked."""
    validate_transition(TRANSFER, transfer.status, target_status)

    now = timezone.now()
    updated = TransferRequest.objects.filter(
        id=transfer.id, status=TransferStatus.PENDING, version=transfer.version
    ).update(
        status=target_status,
        decided_at=now,
        decided_by_actor=actor,
        version=F("version") + 1,
    )
    if updated == 0:
        raise InvalidStateError(
            "Concurrent modification detected for transfer request",
            {"transferId": str(transfer.id), "expected_version": transfer.version},
        )
    transfer.refresh_from_db()
    return transfer


def get_transfer(transfer_id):
    try:
        return TransferRequest.objects.select_related(
            "client", "from_dealer", "to_dealer"
        ).get(id=transfer_id)
    except TransferRequest.DoesNotExist:
        raise NotFoundError(f"TransferRequest {transfer_id} does not exist")


def list_transfers(status=None):
    """Requests newest first, optionally filtered by status."""
    queryset = TransferRequest.objects.select_related(
        "client", "from_dealer", "to_dealer"
    )
    if status:
        if status not in TransferStatus.values:
            raise ValidationError(
                "Invalid status filter", {"allowed": list(TransferStatus.values)}
            )
        queryset = queryset.filter(status=status)
    return queryset.order_by("-created_at")


def create_transfer_request(client_id, from_dealer_id, to_dealer_id, actor, reason=None):
    """
    Open a PENDING transfer.

    from_dealer must currently hold the client's ACTIVE link.
    """
    if not client_id or not from_dealer_id or not to_dealer_id:
        raise ValidationError("clientId, fromDealerId and toDealerId are required")
    if str(from_dealer_id) == str(to_dealer_id):
        raise ValidationError(
            "fromDealerId and toDealerId must differ",
            {"fromDealerId": str(from_dealer_id), "toDealerId": str(to_dealer_id)},
        )

    if not Client.objects.filter(id=client_id).exists():
        raise NotFoundError(f"Client {client_id} does not exist")
    if not Dealer.objects.filter(id=from_dealer_id).exists():
        raise NotFoundError(f"Dealer {from_dealer_id} does not exist")
    if not Dealer.objects.filter(id=to_dealer_id).exists():
        raise NotFoundError(f"Dealer {to_dealer_id} does not exist")

    with transaction.atomic():
        link = ledger.get_active_client_link(client_id)
        if link is None or str(link.dealer_id) != str(from_dealer_id):
            raise InvalidStateError(
                "fromDealer does not hold the client's active link",
                {
                    "clientId": str(client_id),
                    "fromDealerId": str(from_dealer_id),
                    "activeDealerId": str(link.dealer_id) if link else None,
                },
                code="TRANSFER_SOURCE_MISMATCH",
            )

        transfer = TransferRequest.objects.create(
            client_id=client_id,
            from_dealer_id=from_dealer_id,
            to_dealer_id=to_dealer_id,
            status=TransferStatus.PENDING,
            reason=(reason or "").strip() or None,
            requested_by_actor=actor,
        )

        audit.record(
            actor,
            AuditAction.CREATE,
            AuditEntity.TRANSFER,
            transfer.id,
            {
                "clientId": str(client_id),
                "fromDealerId": str(from_dealer_id),
                "toDealerId": str(to_dealer_id),
                "reason": transfer.reason,
            },
        )

    logger.info(
        "transfer_requested",
        extra={
            "operation": "CREATE_TRANSFER",
            "entity_id": str(transfer.id),
            "request_id": get_current_request_id(),
        },
    )
    return transfer


def approve_transfer(transfer_id, actor):
    """
    Approve a PENDING transfer.

    In one transaction: deactivate the (client, fromDealer) link with reason
    TRANSFER, open an ACTIVE (client, toDealer) link, mark the request
    APPROVED. Any failure rolls back all of it.
    """
    _require_admin(actor, "approve")

    with transaction.atomic():
        transfer = _lock_transfer(transfer_id)
        validate_transition(TRANSFER, transfer.status, TransferStatus.APPROVED)

        old_link = (
            ClientDealerLink.objects.select_for_update()
            .filter(
                client_id=transfer.client_id,
                dealer_id=transfer.from_dealer_id,
                status=AffiliationStatus.ACTIVE,
            )
            .first()
        )
        if old_link is None:
            raise InvalidStateError(
                "Client no longer holds an active link at fromDealer",
                {
                    "transferId": str(transfer.id),
                    "clientId": str(transfer.client_id),
                    "fromDealerId": str(transfer.from_dealer_id),
                },
            )

        ledger.offboard_locked_link(old_link, TRANSFER_OFFBOARDING_REASON)
        new_link = ledger.create_client_link(transfer.client_id, transfer.to_dealer_id)
        _decide(transfer, TransferStatus.APPROVED, actor)

        audit.record(
            actor,
            AuditAction.APPROVE,
            AuditEntity.TRANSFER,
            transfer.id,
            {
                "clientId": str(transfer.client_id),
                "oldLinkId": str(old_link.id),
                "newLinkId": str(new_link.id),
            },
        )

    logger.info(
        "transfer_approved",
        extra={
            "operation": "APPROVE_TRANSFER",
            "entity_id": str(transfer.id),
            "request_id": get_current_request_id(),
        },
    )
    return transfer


def reject_transfer(transfer_id, actor):
    """PENDING -> REJECTED. No ledger changes."""
    _require_admin(actor, "reject")

    with transaction.atomic():
        transfer = _lock_transfer(transfer_id)
        _decide(transfer, TransferStatus.REJECTED, actor)
        audit.record(
            actor,
            AuditAction.REJECT,
            AuditEntity.TRANSFER,
            transfer.id,
            {"clientId": str(transfer.client_id)},
        )

    logger.info(
        "transfer_rejected",
        extra={
            "operation": "REJECT_TRANSFER",
            "entity_id": str(transfer.id),
            "request_id": get_current_request_id(),
        },
    )
    return transfer


def cancel_transfer(transfer_id, actor):
    """PENDING -> CANCELED. No ledger changes."""
    _require_admin(actor, "cancel")

    with transaction.atomic():
        transfer = _lock_transfer(transfer_id)
        _decide(transfer, TransferStatus.CANCELED, actor)
        audit.record(
            actor,
            AuditAction.CANCEL,
            AuditEntity.TRANSFER,
            transfer.id,
            {"clientId": str(transfer.client_id)},
        )

    logger.info(
        "transfer_canceled",
        extra={
            "operation": "CANCEL_TRANSFER",
            "entity_id": str(transfer.id),
            "request_id": get_current_request_id(),
        },
    )
    return transfer
