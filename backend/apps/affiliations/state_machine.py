"""
State machine enforcement for affiliations and transfer requests.

Raises InvalidStateError for disallowed transitions.
"""

from apps.affiliations.models import AffiliationStatus
from apps.transfers.models import TransferStatus
from core.exceptions import InvalidStateError

EMPLOYMENT = "EmploymentAffiliation"
CLIENT_LINK = "ClientDealerLink"
TRANSFER = "TransferRequest"

# Allowed transitions for EmploymentAffiliation and ClientDealerLink
AFFILIATION_TRANSITIONS = {
    AffiliationStatus.ACTIVE: [AffiliationStatus.INACTIVE],
    AffiliationStatus.INACTIVE: [],  # Terminal
}

# Allowed transitions for TransferRequest
TRANSFER_TRANSITIONS = {
    TransferStatus.PENDING: [
        TransferStatus.APPROVED,
        TransferStatus.REJECTED,
        TransferStatus.CANCELED,
    ],
    TransferStatus.APPROVED: [],  # Terminal
    TransferStatus.REJECTED: [],  # Terminal
    TransferStatus.CANCELED: [],  # Terminal
}

TRANSITIONS = {
    EMPLOYMENT: AFFILIATION_TRANSITIONS,
    CLIENT_LINK: AFFILIATION_TRANSITIONS,
    TRANSFER: TRANSFER_TRANSITIONS,
}


def _transitions_for(entity_type):
    try:
        return TRANSITIONS[entity_type]
    except KeyError:
        raise ValueError(f"Unknown entity_type: {entity_type}")


def validate_transition(entity_type, current_status, target_status):
    """
    Validate a state transition.

    Args:
        entity_type: EMPLOYMENT, CLIENT_LINK or TRANSFER
        current_status: Current state
        target_status: Target state

    Returns:
        bool: True if transition is allowed

    Raises:
        InvalidStateError: If transition is disallowed
    """
    transitions = _transitions_for(entity_type)

    if current_status not in transitions:
        raise InvalidStateError(
            f"Invalid current status: {current_status}",
            {"entity_type": entity_type, "current_status": current_status},
        )

    allowed_targets = transitions[current_status]

    if not allowed_targets:
        raise InvalidStateError(
            (
                f"{entity_type} in state {current_status} is terminal and cannot "
                "transition"
            ),
            {
                "entity_type": entity_type,
                "current_status": str(current_status),
                "target_status": str(target_status),
            },
        )

    if target_status not in allowed_targets:
        raise InvalidStateError(
            (
                "Invalid transition: "
                f"{entity_type} cannot transition from {current_status} to "
                f"{target_status}"
            ),
            {
                "entity_type": entity_type,
                "current_status": str(current_status),
                "target_status": str(target_status),
                "allowed_transitions": [str(s) for s in allowed_targets],
            },
        )

    return True


def is_terminal_state(entity_type, status):
    """Check if a state is terminal (no transitions allowed)."""
    transitions = _transitions_for(entity_type)
    return status in transitions and not transitions[status]
