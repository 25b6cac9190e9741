"""
Transfer API views.

Any actor may request a transfer; only ADMIN decides it.
"""

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.transfers import services
from apps.transfers.serializers import (
    TransferCreateSerializer,
    TransferRequestSerializer,
)
from core.permissions import IsAdminActor


@api_view(["GET", "POST"])
@permission_classes([AllowAny])
def create_or_list_transfers(request):
    """
    POST /api/v1/transfers - Request a client transfer (PENDING)
    GET /api/v1/transfers?status= - List requests, newest first
    """
    if request.method == "GET":
        transfers = services.list_transfers(status=request.query_params.get("status"))
        serializer = TransferRequestSerializer(transfers, many=True)
        return Response({"data": serializer.data})

    serializer = TransferCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    transfer = services.create_transfer_request(
        data["clientId"],
        data["fromDealerId"],
        data["toDealerId"],
        request.actor,
        reason=data.get("reason"),
    )
    transfer = services.get_transfer(transfer.id)
    return Response(
        {"data": TransferRequestSerializer(transfer).data},
        status=status.HTTP_201_CREATED,
    )


@api_view(["GET"])
@permission_classes([AllowAny])
def get_transfer(request, transferId):
    """GET /api/v1/transfers/{transferId}"""
    transfer = services.get_transfer(transferId)
    return Response({"data": TransferRequestSerializer(transfer).data})


@api_view(["POST"])
@permission_classes([IsAdminActor])
def approve_transfer(request, transferId):
    """
    POST /api/v1/transfers/{transferId}/approve

    Swap the client's active link to the destination dealer (PENDING only).
    """
    services.approve_transfer(transferId, request.actor)
    return Response({"data": {"success": True}})


@api_view(["POST"])
@permission_classes([IsAdminActor])
def reject_transfer(request, transferId):
    """POST /api/v1/transfers/{transferId}/reject (PENDING only)"""
    services.reject_transfer(transferId, request.actor)
    return Response({"data": {"success": True}})


@api_view(["POST"])
@permission_classes([IsAdminActor])
def cancel_transfer(request, transferId):
    """POST /api/v1/transfers/{transferId}/cancel (PENDING only)"""
    services.cancel_transfer(transferId, request.actor)
    return Response({"data": {"success": True}})
