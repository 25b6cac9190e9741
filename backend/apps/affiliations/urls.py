"""
URL routing for registry endpoints defined directly under /api/v1.
"""

from django.urls import path
from apps.affiliations import views

app_name = "affiliations"

urlpatterns = [
    # Employees
    path("employees", views.register_employee, name="register-employee"),
    path("employees/search", views.search_employees, name="search-employees"),
    path("employees/similar", views.similar_employees, name="similar-employees"),
    path(
        "employments/<uuid:employmentId>/end",
        views.end_employment,
        name="end-employment",
    ),
    # Clients
    path("clients", views.register_client, name="register-client"),
    path("clients/search", views.search_clients, name="search-clients"),
    path("clients/similar", views.similar_clients, name="similar-clients"),
    path(
        "clients/<uuid:clientId>/vehicles", views.add_vehicle, name="add-vehicle"
    ),
    path(
        "client-links/<uuid:linkId>/end",
        views.end_client_link,
        name="end-client-link",
    ),
    # Quick-search aliases
    path("search/employee", views.search_employees, name="quick-search-employees"),
    path("search/client", views.search_clients, name="quick-search-clients"),
]
