"""
Registry API views: employee and client registration, search, similar
matches, and ending affiliations.

All mutations flow through the service layer. Any ADMIN or DEALER actor
may mutate; reads are open.
"""

from uuid import UUID

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.affiliations import conflicts, registration, services
from apps.affiliations.serializers import (
    AddVehicleSerializer,
    ClientRegistrationSerializer,
    ClientWithActiveLinkSerializer,
    EmployeeRegistrationSerializer,
    EmploymentSerializer,
    EndClientLinkSerializer,
    EndEmploymentSerializer,
    PersonWithEmploymentsSerializer,
    SimilarClientSerializer,
    SimilarEmployeeSerializer,
)
from apps.identity import services as identity
from apps.identity.serializers import (
    ClientSerializer,
    PersonSerializer,
    VehicleSerializer,
)
from core.exceptions import error_response
from core.permissions import HasActor


def _dealer_id_param(request):
    """Parse the required dealerId query parameter; None if absent or bad."""
    raw = request.query_params.get("dealerId")
    if not raw:
        return None
    try:
        return UUID(raw)
    except ValueError:
        return None


# -----------------------------
# Employees
# -----------------------------


@api_view(["POST"])
@permission_classes([HasActor])
def register_employee(request):
    """
    POST /api/v1/employees

    Register an employee at a dealer. 409 EMPLOYEE_ACTIVE_ELSEWHERE when the
    person is active at another dealer.
    """
    serializer = EmployeeRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    person, employment = registration.register_employee(
        request.actor,
        data["nationalId"],
        data["name"],
        data["dealerId"],
        data["dateOfJoining"],
        mobile=data.get("mobile"),
        email=data.get("email"),
        address=data.get("address"),
        date_of_birth=data.get("dateOfBirth"),
    )
    return Response(
        {
            "data": {
                "person": PersonSerializer(person).data,
                "employment": EmploymentSerializer(employment).data,
            }
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(["GET"])
@permission_classes([AllowAny])
def search_employees(request):
    """GET /api/v1/employees/search?nationalId=|name=|mobile="""
    persons = identity.search_persons(
        national_id=request.query_params.get("nationalId"),
        name=request.query_params.get("name"),
        mobile=request.query_params.get("mobile"),
    )
    serializer = PersonWithEmploymentsSerializer(persons, many=True)
    return Response({"data": serializer.data})


@api_view(["GET"])
@permission_classes([AllowAny])
def similar_employees(request):
    """GET /api/v1/employees/similar?name=|mobile=|email=&dealerId="""
    dealer_id = _dealer_id_param(request)
    if dealer_id is None:
        return error_response(
            "VALIDATION_ERROR", "dealerId is required", {"field": "dealerId"}
        )

    matches = conflicts.find_similar_employees(
        exclude_dealer_id=dealer_id,
        name=request.query_params.get("name"),
        mobile=request.query_params.get("mobile"),
        email=request.query_params.get("email"),
    )
    return Response({"data": SimilarEmployeeSerializer(matches, many=True).data})


@api_view(["PATCH"])
@permission_classes([HasActor])
def end_employment(request, employmentId):
    """
    PATCH /api/v1/employments/{employmentId}/end

    ACTIVE -> INACTIVE with a separation record.
    """
    serializer = EndEmploymentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    services.end_employment(
        employmentId,
        data["separationDate"],
        data["separationType"],
        data["remarks"],
        request.actor,
    )
    return Response({"data": {"success": True}})


# -----------------------------
# Clients
# -----------------------------


@api_view(["POST"])
@permission_classes([HasActor])
def register_client(request):
    """
    POST /api/v1/clients

    Register a PRIVATE or GOVERNMENT client at a dealer. An existing client
    with no active link elsewhere is reused.
    """
    serializer = ClientRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    client, _created = registration.register_client(
        request.actor,
        data["clientType"],
        data["name"],
        data["dealerId"],
        tax_id=data.get("taxId"),
        org_name=data.get("orgName"),
        office_code=data.get("officeCode"),
        official_reference=data.get("officialEmailOrLetterNo"),
        vehicles=data.get("vehicles"),
        contact_person=data.get("contactPerson"),
        mobile=data.get("mobile"),
        email=data.get("email"),
        address=data.get("address"),
        gst_number=data.get("gstNumber"),
    )
    return Response(
        {"data": ClientSerializer(client).data}, status=status.HTTP_201_CREATED
    )


@api_view(["GET"])
@permission_classes([AllowAny])
def search_clients(request):
    """GET /api/v1/clients/search?pan=|govId=|vehicle=|name=|org="""
    params = request.query_params
    clients = identity.search_clients(
        tax_id=params.get("pan"),
        org_id=params.get("govId"),
        name=params.get("name"),
        org=params.get("org"),
        vehicle_registration=params.get("vehicle"),
    )
    serializer = ClientWithActiveLinkSerializer(clients, many=True)
    return Response({"data": serializer.data})


@api_view(["GET"])
@permission_classes([AllowAny])
def similar_clients(request):
    """GET /api/v1/clients/similar?name=|mobile=|email=|pan=&dealerId="""
    dealer_id = _dealer_id_param(request)
    if dealer_id is None:
        return error_response(
            "VALIDATION_ERROR", "dealerId is required", {"field": "dealerId"}
        )

    matches = conflicts.find_similar_clients(
        exclude_dealer_id=dealer_id,
        name=request.query_params.get("name"),
        mobile=request.query_params.get("mobile"),
        email=request.query_params.get("email"),
        tax_id=request.query_params.get("pan"),
    )
    return Response({"data": SimilarClientSerializer(matches, many=True).data})


@api_view(["POST"])
@permission_classes([HasActor])
def add_vehicle(request, clientId):
    """POST /api/v1/clients/{clientId}/vehicles"""
    serializer = AddVehicleSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    vehicle = identity.add_vehicle(
        clientId,
        data["registrationNumber"],
        fuel_type=data.get("fuelType"),
        notes=data.get("notes"),
        actor=request.actor,
    )
    return Response(
        {"data": VehicleSerializer(vehicle).data}, status=status.HTTP_201_CREATED
    )


@api_view(["PATCH"])
@permission_classes([HasActor])
def end_client_link(request, linkId):
    """PATCH /api/v1/client-links/{linkId}/end - offboard with a reason"""
    serializer = EndClientLinkSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    services.deactivate_client_link(
        linkId, serializer.validated_data["reason"], request.actor
    )
    return Response({"data": {"success": True}})
