"""
Dealer API views.

All mutations flow through the service layer.
Admin-only mutations for POST/PATCH; reads are open.
"""

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.affiliations import services as affiliation_services
from apps.affiliations.serializers import (
    ClientLinkDetailSerializer,
    EmploymentWithPersonSerializer,
)
from apps.dealers import services
from apps.dealers.serializers import DealerSerializer, DealerUpdateSerializer
from core.exceptions import error_response
from core.permissions import IsAdminActor


@api_view(["GET", "POST"])
@permission_classes([AllowAny])
def list_or_create_dealers(request):
    """
    GET /api/v1/dealers - List dealers (optional ?status=)
    POST /api/v1/dealers - Create dealer (admin-only)
    """
    if request.method == "GET":
        dealers = services.list_dealers(status=request.query_params.get("status"))
        serializer = DealerSerializer(dealers, many=True)
        return Response({"data": serializer.data}, status=status.HTTP_200_OK)

    if not IsAdminActor().has_permission(request, None):
        return error_response(
            "FORBIDDEN", IsAdminActor.message, status_code=status.HTTP_403_FORBIDDEN
        )

    serializer = DealerSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    dealer = services.create_dealer(
        request.actor,
        data["legal_name"],
        outlet_name=data.get("outlet_name"),
        location=data.get("location"),
    )
    return Response(
        {"data": DealerSerializer(dealer).data}, status=status.HTTP_201_CREATED
    )


@api_view(["GET", "PATCH"])
@permission_classes([AllowAny])
def get_or_update_dealer(request, dealerId):
    """
    GET /api/v1/dealers/{dealerId}
    PATCH /api/v1/dealers/{dealerId} - names, location or status (admin-only)
    """
    if request.method == "GET":
        dealer = services.get_dealer(dealerId)
        return Response({"data": DealerSerializer(dealer).data})

    if not IsAdminActor().has_permission(request, None):
        return error_response(
            "FORBIDDEN", IsAdminActor.message, status_code=status.HTTP_403_FORBIDDEN
        )

    serializer = DealerUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    dealer = services.update_dealer(
        request.actor,
        dealerId,
        legal_name=data.get("legalName"),
        outlet_name=data.get("outletName"),
        location=data.get("location"),
        status=data.get("status"),
    )
    return Response({"data": DealerSerializer(dealer).data})


@api_view(["GET"])
@permission_classes([AllowAny])
def list_dealer_employees(request, dealerId):
    """GET /api/v1/dealers/{dealerId}/employees - employments with person"""
    services.get_dealer(dealerId)
    employments = affiliation_services.list_dealer_employments(dealerId)
    serializer = EmploymentWithPersonSerializer(employments, many=True)
    return Response({"data": serializer.data})


@api_view(["GET"])
@permission_classes([AllowAny])
def list_dealer_clients(request, dealerId):
    """GET /api/v1/dealers/{dealerId}/clients - ACTIVE links with client and vehicles"""
    services.get_dealer(dealerId)
    links = affiliation_services.list_dealer_client_links(dealerId)
    serializer = ClientLinkDetailSerializer(links, many=True)
    return Response({"data": serializer.data})
