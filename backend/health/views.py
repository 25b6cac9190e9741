from django.apps import apps
from django.core.cache import caches
from django.db import DatabaseError, connection
from django.db.migrations.executor import MigrationExecutor
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

# Tables the registry cannot serve requests without
REGISTRY_MODELS = [
    ("dealers", "Dealer"),
    ("affiliations", "EmploymentAffiliation"),
    ("affiliations", "ClientDealerLink"),
    ("audit", "AuditLog"),
]


class LiveView(APIView):
    """Liveness probe: process is running. No DB or external deps."""

    permission_classes = [AllowAny]

    def get(self, request):
        return Response({"status": "alive"})


class ReadyView(APIView):
    """Readiness probe: DB, cache, migrations, registry tables."""

    permission_classes = [AllowAny]

    def get(self, request):
        checks = self._run_checks()
        overall = "ready" if all(v == "ok" for v in checks.values()) else "not_ready"
        return Response(
            {"status": overall, "checks": checks},
            status=200 if overall == "ready" else 503,
        )

    def _run_checks(self):
        checks = {}

        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1;")
            checks["database"] = "ok"
        except DatabaseError:
            checks["database"] = "error"

        try:
            executor = MigrationExecutor(connection)
            plan = executor.migration_plan(executor.loader.graph.leaf_nodes())
            checks["migrations"] = "ok" if not plan else "pending"
        except DatabaseError:
            checks["migrations"] = "error"

        cache = caches["default"]
        cache.set("health_check", "ok", timeout=5)
        checks["cache"] = "ok" if cache.get("health_check") == "ok" else "error"

        tables_ok = True
        for app_label, model_name in REGISTRY_MODELS:
            try:
                apps.get_model(app_label, model_name).objects.exists()
            except DatabaseError:
                tables_ok = False
        checks["registry_tables"] = "ok" if tables_ok else "error"

        return checks
