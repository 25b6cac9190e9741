"""
URL routing for transfer endpoints.
"""

from django.urls import path
from apps.transfers import views

app_name = "transfers"

urlpatterns = [
    path(
        "transfers", views.create_or_list_transfers, name="create-or-list-transfers"
    ),
    path("transfers/<uuid:transferId>", views.get_transfer, name="get-transfer"),
    path(
        "transfers/<uuid:transferId>/approve",
        views.approve_transfer,
        name="approve-transfer",
    ),
    path(
        "transfers/<uuid:transferId>/reject",
        views.reject_transfer,
        name="reject-transfer",
    ),
    path(
        "transfers/<uuid:transferId>/cancel",
        views.cancel_transfer,
        name="cancel-transfer",
    ),
]
