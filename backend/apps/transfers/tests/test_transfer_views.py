from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.affiliations.models import AffiliationStatus, ClientDealerLink
from apps.dealers.models import Dealer
from apps.identity.models import Client, ClientType
from apps.transfers.models import TransferRequest, TransferStatus


class TransferViewTests(APITestCase):
    def setUp(self):
        self.d1 = Dealer.objects.create(legal_name="D1 Ltd", outlet_name="D1 Outlet")
        self.d2 = Dealer.objects.create(legal_name="D2 Ltd")
        self.client_row = Client.objects.create(
            client_type=ClientType.PRIVATE, tax_id="ABCTY1234D", name="ABC Trading"
        )
        self.link = ClientDealerLink.objects.create(
            client=self.client_row, dealer=self.d1
        )
        self.list_url = reverse("transfers:create-or-list-transfers")

    def _create(self, actor="DEALER:D2 Ltd"):
        return self.client.post(
            self.list_url,
            {
                "clientId": str(self.client_row.id),
                "fromDealerId": str(self.d1.id),
                "toDealerId": str(self.d2.id),
                "reason": "Closer outlet",
            },
            format="json",
            HTTP_X_ACTOR=actor,
        )

    def test_dealer_can_request_transfer(self):
        response = self._create()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.json()["data"]
        self.assertEqual(data["status"], "PENDING")
        self.assertEqual(data["fromDealerName"], "D1 Outlet")
        self.assertEqual(data["requestedBy"], "DEALER:D2 Ltd")

    def test_request_requires_actor(self):
        response = self.client.post(
            self.list_url, {"clientId": str(self.client_row.id)}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(TransferRequest.objects.exists())

    def test_request_same_dealers(self):
        response = self.client.post(
            self.list_url,
            {
                "clientId": str(self.client_row.id),
                "fromDealerId": str(self.d1.id),
                "toDealerId": str(self.d1.id),
            },
            format="json",
            HTTP_X_ACTOR="ADMIN",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_and_get(self):
        transfer_id = self._create().json()["data"]["id"]

        response = self.client.get(self.list_url, {"status": "PENDING"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t["id"] for t in response.json()["data"]], [transfer_id])

        response = self.client.get(
            reverse("transfers:get-transfer", args=[transfer_id])
        )
        self.assertEqual(response.json()["data"]["clientName"], "ABC Trading")

    def test_dealer_cannot_approve(self):
        transfer_id = self._create().json()["data"]["id"]
        response = self.client.post(
            reverse("transfers:approve-transfer", args=[transfer_id]),
            HTTP_X_ACTOR="DEALER:D2 Ltd",
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.json()["error"]["code"], "FORBIDDEN")
        self.assertEqual(
            TransferRequest.objects.get(id=transfer_id).status, TransferStatus.PENDING
        )

    def test_admin_approves(self):
        transfer_id = self._create().json()["data"]["id"]
        response = self.client.post(
            reverse("transfers:approve-transfer", args=[transfer_id]),
            HTTP_X_ACTOR="ADMIN",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {"data": {"success": True}})

        active = ClientDealerLink.objects.get(
            client=self.client_row, status=AffiliationStatus.ACTIVE
        )
        self.assertEqual(active.dealer_id, self.d2.id)

    def test_reject_then_approve_conflicts(self):
        transfer_id = self._create().json()["data"]["id"]
        response = self.client.post(
            reverse("transfers:reject-transfer", args=[transfer_id]),
            HTTP_X_ACTOR="ADMIN",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.post(
            reverse("transfers:approve-transfer", args=[transfer_id]),
            HTTP_X_ACTOR="ADMIN",
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.json()["error"]["code"], "INVALID_STATE")

    def test_admin_cancels(self):
        transfer_id = self._create().json()["data"]["id"]
        response = self.client.post(
            reverse("transfers:cancel-transfer", args=[transfer_id]),
            HTTP_X_ACTOR="ADMIN",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            TransferRequest.objects.get(id=transfer_id).status,
            TransferStatus.CANCELED,
        )
