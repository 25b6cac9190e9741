from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.metrics.services import compute_home_metrics


class HomeMetricsView(APIView):
    """GET /api/v1/metrics/home - cached counts for the landing page."""

    permission_classes = [AllowAny]
    metrics_cache = None

    def get(self, request):
        metrics = self.metrics_cache.get(compute_home_metrics)
        return Response({"data": metrics})
