"""
Home-page metrics: five independent counts over the registry.
"""

from datetime import timedelta

from django.utils import timezone

from apps.affiliations.models import (
    AffiliationStatus,
    ClientDealerLink,
    EmploymentAffiliation,
    SeparationEvent,
)
from apps.dealers.models import Dealer, DealerStatus


def compute_home_metrics(today=None):
    """
    Return activeDealers, activeEmployees, activeClients, todaysJoins and
    todaysSeparations. The daily windows are [today, tomorrow) in the
    configured TIME_ZONE.
    """
    today = today or timezone.localdate()
    tomorrow = today + timedelta(days=1)

    return {
        "activeDealers": Dealer.objects.filter(status=DealerStatus.ACTIVE).count(),
        "activeEmployees": EmploymentAffiliation.objects.filter(
            status=AffiliationStatus.ACTIVE
        ).count(),
        "activeClients": ClientDealerLink.objects.filter(
            status=AffiliationStatus.ACTIVE
        ).count(),
        "todaysJoins": EmploymentAffiliation.objects.filter(
            date_of_joining__gte=today, date_of_joining__lt=tomorrow
        ).count(),
        "todaysSeparations": SeparationEvent.objects.filter(
            separation_date__gte=today, separation_date__lt=tomorrow
        ).count(),
    }
