"""
Dealer services - all dealer mutations flow through this layer.

Rules:
- All mutations wrapped in transaction.atomic
- Use select_for_update for row-level locking
- Create audit entries for all mutations
- Admin-only mutations
"""

import logging

from django.db import transaction
from django.utils import timezone

from apps.audit import services as audit
from apps.audit.models import AuditAction, AuditEntity
from apps.dealers.models import Dealer, DealerStatus
from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from core.middleware import get_current_request_id
from core.permissions import is_admin_actor

logger = logging.getLogger(__name__)


def _require_admin(actor, action):
    if not is_admin_actor(actor):
        raise PermissionDeniedError(f"Only ADMIN can {action}")


def get_dealer(dealer_id):
    try:
        return Dealer.objects.get(id=dealer_id)
    except Dealer.DoesNotExist:
        raise NotFoundError(f"Dealer {dealer_id} does not exist")


def get_active_dealer(dealer_id):
    """New affiliations may only be opened at an ACTIVE dealer."""
    try:
        return Dealer.objects.get(id=dealer_id, status=DealerStatus.ACTIVE)
    except Dealer.DoesNotExist:
        raise NotFoundError(f"Active Dealer {dealer_id} does not exist")


def list_dealers(status=None):
    queryset = Dealer.objects.all()
    if status:
        if status not in DealerStatus.values:
            raise ValidationError(
                "Invalid status", {"allowed": list(DealerStatus.values)}
            )
        queryset = queryset.filter(status=status)
    return queryset.order_by("legal_name")


def create_dealer(actor, legal_name, outlet_name=None, location=None):
    """Create a new ACTIVE Dealer."""
    _require_admin(actor, "create dealers")

    if not legal_name or not legal_name.strip():
        raise ValidationError("legalName must be non-empty")

    with transaction.atomic():
        dealer = Dealer.objects.create(
            legal_name=legal_name.strip(),
            outlet_name=(outlet_name or "").strip(),
            location=(location or "").strip(),
            status=DealerStatus.ACTIVE,
        )

        audit.record(
            actor,
            AuditAction.CREATE,
            AuditEntity.DEALER,
            dealer.id,
            {"legalName": dealer.legal_name, "outletName": dealer.outlet_name},
        )

    logger.info(
        "dealer_created",
        extra={
            "operation": "CREATE_DEALER",
            "entity_id": str(dealer.id),
            "request_id": get_current_request_id(),
        },
    )
    return dealer


def update_dealer(actor, dealer_id, **changes):
    """
    Update a Dealer's names, location or status.

    Only the keys legal_name, outlet_name, location and status are accepted.
    Going INACTIVE stamps deactivated_at; reactivating clears it.
    """
    _require_admin(actor, "update dealers")

    allowed = {"legal_name", "outlet_name", "location", "status"}
    unknown = set(changes) - allowed
    if unknown:
        raise ValidationError("Unknown fields", {"fields": sorted(unknown)})

    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        raise ValidationError("No changes provided")

    status = changes.get("status")
    if status is not None and status not in DealerStatus.values:
        raise ValidationError("Invalid status", {"allowed": list(DealerStatus.values)})

    if "legal_name" in changes and not changes["legal_name"].strip():
        raise ValidationError("legalName must be non-empty")

    with transaction.atomic():
        try:
            dealer = Dealer.objects.select_for_update().get(id=dealer_id)
        except Dealer.DoesNotExist:
            raise NotFoundError(f"Dealer {dealer_id} does not exist")

        previous = {
            "legalName": dealer.legal_name,
            "outletName": dealer.outlet_name,
            "location": dealer.location,
            "status": dealer.status,
        }

        for field in ("legal_name", "outlet_name", "location"):
            if field in changes:
                setattr(dealer, field, changes[field].strip())

        if status is not None and status != dealer.status:
            dealer.status = status
            dealer.deactivated_at = (
                timezone.now() if status == DealerStatus.INACTIVE else None
            )

        dealer.save()

        audit.record(
            actor,
            AuditAction.UPDATE,
            AuditEntity.DEALER,
            dealer.id,
            {
                "previous": previous,
                "new": {
                    "legalName": dealer.legal_name,
                    "outletName": dealer.outlet_name,
                    "location": dealer.location,
                    "status": dealer.status,
                },
            },
        )

    return dealer
