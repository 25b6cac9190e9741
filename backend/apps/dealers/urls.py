"""
URL routing for dealer endpoints.
"""

from django.urls import path
from apps.dealers import views

app_name = "dealers"

urlpatterns = [
    path("dealers", views.list_or_create_dealers, name="list-or-create-dealers"),
    path(
        "dealers/<uuid:dealerId>",
        views.get_or_update_dealer,
        name="get-or-update-dealer",
    ),
    path(
        "dealers/<uuid:dealerId>/employees",
        views.list_dealer_employees,
        name="list-dealer-employees",
    ),
    path(
        "dealers/<uuid:dealerId>/clients",
        views.list_dealer_clients,
        name="list-dealer-clients",
    ),
]
