"""
Conflict Detector.

Answers two questions before a registration is written:
- is this identity already affiliated with another dealer? (hard conflict)
- does it look like someone registered elsewhere? (similar match, advisory)
"""

from dataclasses import dataclass
from datetime import date, datetime

from django.conf import settings
from django.db.models import Q

from apps.affiliations.models import (
    AffiliationStatus,
    ClientDealerLink,
    EmploymentAffiliation,
)
from core.exceptions import ConflictError

EMPLOYEE_ACTIVE_ELSEWHERE = "EMPLOYEE_ACTIVE_ELSEWHERE"
CLIENT_ACTIVE_ELSEWHERE = "CLIENT_ACTIVE_ELSEWHERE"

_MESSAGES = {
    EMPLOYEE_ACTIVE_ELSEWHERE: "Employee is currently active at another dealer",
    CLIENT_ACTIVE_ELSEWHERE: "Client is currently active at another dealer",
}


@dataclass(frozen=True)
class Conflict:
    code: str
    dealer_id: object
    dealer_name: str
    since: date | datetime

    def as_error(self):
        return ConflictError(
            _MESSAGES[self.code],
            {
                "dealerName": self.dealer_name,
                "since": self.since.isoformat(),
                "dealerId": str(self.dealer_id),
            },
            code=self.code,
        )


def _active_employment(person_id):
    return (
        EmploymentAffiliation.objects.select_related("dealer")
        .filter(person_id=person_id, status=AffiliationStatus.ACTIVE)
        .first()
    )


def _active_link(client_id):
    return (
        ClientDealerLink.objects.select_related("dealer")
        .filter(client_id=client_id, status=AffiliationStatus.ACTIVE)
        .first()
    )


def employee_conflict_from(employment, requesting_dealer_id):
    if employment is None or str(employment.dealer_id) == str(requesting_dealer_id):
        return None
    return Conflict(
        code=EMPLOYEE_ACTIVE_ELSEWHERE,
        dealer_id=employment.dealer_id,
        dealer_name=employment.dealer.display_name,
        since=employment.date_of_joining,
    )


def client_conflict_from(link, requesting_dealer_id):
    if link is None or str(link.dealer_id) == str(requesting_dealer_id):
        return None
    return Conflict(
        code=CLIENT_ACTIVE_ELSEWHERE,
        dealer_id=link.dealer_id,
        dealer_name=link.dealer.display_name,
        since=link.date_of_onboarding,
    )


def check_employee_conflict(person_id, requesting_dealer_id):
    """Conflict if the person's ACTIVE employment is at a different dealer."""
    return employee_conflict_from(_active_employment(person_id), requesting_dealer_id)


def check_client_conflict(client_id, requesting_dealer_id):
    """Conflict if the client's ACTIVE link is at a different dealer."""
    return client_conflict_from(_active_link(client_id), requesting_dealer_id)


def find_similar_employees(exclude_dealer_id, name=None, mobile=None, email=None):
    """
    Employments at other dealers whose person resembles the candidate.

    Criteria are ORed: name is a case-insensitive substring, mobile and
    email are exact. Rows of any status are considered. Newest first.
    """
    criteria = Q()
    if name and name.strip():
        criteria |= Q(person__name__icontains=name.strip())
    if mobile:
        criteria |= Q(person__mobile=mobile)
    if email:
        criteria |= Q(person__email=email)
    if not criteria:
        return []

    return list(
        EmploymentAffiliation.objects.select_related("person", "dealer")
        .filter(criteria)
        .exclude(dealer_id=exclude_dealer_id)
        .order_by("-created_at")[: settings.SIMILAR_MATCH_LIMIT]
    )


def find_similar_clients(
    exclude_dealer_id, name=None, mobile=None, email=None, tax_id=None
):
    """
    ACTIVE client links at other dealers whose client resembles the candidate.

    Same rules as find_similar_employees, with tax id as an extra exact
    criterion.
    """
    criteria = Q()
    if name and name.strip():
        criteria |= Q(client__name__icontains=name.strip())
    if mobile:
        criteria |= Q(client__mobile=mobile)
    if email:
        criteria |= Q(client__email=email)
    if tax_id:
        criteria |= Q(client__tax_id=tax_id.strip().upper())
    if not criteria:
        return []

    return list(
        ClientDealerLink.objects.select_related("client", "dealer")
        .prefetch_related("client__vehicles")
        .filter(criteria, status=AffiliationStatus.ACTIVE)
        .exclude(dealer_id=exclude_dealer_id)
        .order_by("-created_at")[: settings.SIMILAR_MATCH_LIMIT]
    )
