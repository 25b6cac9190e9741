from django.urls import include, path

urlpatterns = [
    path("api/health/", include("health.urls")),
    # API v1 base path: /api/v1. Each app declares its own resource prefix.
    path("api/v1/", include("apps.dealers.urls")),
    path("api/v1/", include("apps.affiliations.urls")),
    path("api/v1/", include("apps.transfers.urls")),
    path("api/v1/", include("apps.audit.urls")),
    path("api/v1/", include("apps.metrics.urls")),
]
