"""
Audit log views - query audit log entries.

Read-only - audit logs are append-only.
"""

from uuid import UUID

from django.conf import settings
from rest_framework.decorators import api_view, permission_classes
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny

from apps.audit import services
from apps.audit.models import AuditEntity
from apps.audit.serializers import AuditLogSerializer
from core.exceptions import error_response


class AuditLogPagination(PageNumberPagination):
    page_size = settings.AUDIT_PAGE_SIZE


@api_view(["GET"])
@permission_classes([AllowAny])
def query_audit_log(request):
    """
    GET /api/v1/audit?entity=&id=&page=

    Query audit log entries, newest first. Both filters are optional.
    """
    entity = request.query_params.get("entity")
    entity_id = request.query_params.get("id")

    if entity and entity not in AuditEntity.values:
        return error_response(
            "VALIDATION_ERROR",
            "Invalid entity",
            {"allowed": list(AuditEntity.values)},
        )

    if entity_id:
        try:
            entity_id = UUID(entity_id)
        except ValueError:
            return error_response("VALIDATION_ERROR", "Invalid id format")

    queryset = services.query(entity=entity, entity_id=entity_id)

    paginator = AuditLogPagination()
    page = paginator.paginate_queryset(queryset, request)
    serializer = AuditLogSerializer(page, many=True)

    return paginator.get_paginated_response(serializer.data)
