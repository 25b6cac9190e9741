from django.conf import settings
from django.urls import path

from apps.metrics.cache import MetricsCache
from apps.metrics.views import HomeMetricsView

app_name = "metrics"

# One cache per process, shared by every request this worker serves
home_metrics_cache = MetricsCache(ttl_seconds=settings.METRICS_CACHE_TTL_SECONDS)

urlpatterns = [
    path(
        "metrics/home",
        HomeMetricsView.as_view(metrics_cache=home_metrics_cache),
        name="home-metrics",
    ),
]
