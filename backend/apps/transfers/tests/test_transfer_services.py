"""
Transfer workflow service tests: request, approve, reject, cancel.
"""

import uuid
from unittest import mock

from django.test import TestCase

from apps.affiliations import services as ledger
from apps.affiliations.models import AffiliationStatus, ClientDealerLink
from apps.audit.models import AuditLog
from apps.dealers.models import Dealer, DealerStatus
from apps.identity.models import Client, ClientType
from apps.transfers import services
from apps.transfers.models import TransferRequest, TransferStatus
from core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)


class TransferFixtureMixin:
    def setUp(self):
        self.d1 = Dealer.objects.create(legal_name="D1 Ltd")
        self.d2 = Dealer.objects.create(legal_name="D2 Ltd")
        self.client_row = Client.objects.create(
            client_type=ClientType.PRIVATE,
            tax_id="ABCTY1234D",
            name="ABC Trading Corp",
        )
        self.link = ClientDealerLink.objects.create(
            client=self.client_row, dealer=self.d1
        )

    def _request(self, actor="DEALER:D2 Ltd"):
        return services.create_transfer_request(
            self.client_row.id, self.d1.id, self.d2.id, actor, reason="Better rates"
        )


class CreateTransferRequestTests(TransferFixtureMixin, TestCase):
    def test_create_pending_request(self):
        transfer = self._request()

        self.assertEqual(transfer.status, TransferStatus.PENDING)
        self.assertEqual(transfer.requested_by_actor, "DEALER:D2 Ltd")
        self.assertEqual(transfer.version, 0)
        self.assertTrue(
            AuditLog.objects.filter(
                entity="TRANSFER", entity_id=transfer.id, action="CREATE"
            ).exists()
        )

    def test_same_dealers_rejected(self):
        with self.assertRaises(ValidationError):
            services.create_transfer_request(
                self.client_row.id, self.d1.id, self.d1.id, "ADMIN"
            )

    def test_source_must_hold_active_link(self):
        d3 = Dealer.objects.create(legal_name="D3 Ltd")
        with self.assertRaises(InvalidStateError) as ctx:
            services.create_transfer_request(
                self.client_row.id, d3.id, self.d2.id, "ADMIN"
            )
        self.assertEqual(ctx.exception.code, "TRANSFER_SOURCE_MISMATCH")
        self.assertEqual(ctx.exception.details["activeDealerId"], str(self.d1.id))
        self.assertFalse(TransferRequest.objects.exists())

    def test_unknown_client(self):
        with self.assertRaises(NotFoundError):
            services.create_transfer_request(
                uuid.uuid4(), self.d1.id, self.d2.id, "ADMIN"
            )

    def test_list_filters_by_status(self):
        transfer = self._request()
        self.assertEqual(list(services.list_transfers("PENDING")), [transfer])
        self.assertEqual(list(services.list_transfers("APPROVED")), [])
        with self.assertRaises(ValidationError):
            services.list_transfers("DONE")


class ApproveTransferTests(TransferFixtureMixin, TestCase):
    def test_approve_moves_active_link(self):
        transfer = self._request()

        services.approve_transfer(transfer.id, "ADMIN")

        transfer.refresh_from_db()
        self.assertEqual(transfer.status, TransferStatus.APPROVED)
        self.assertEqual(transfer.decided_by_actor, "ADMIN")
        self.assertIsNotNone(transfer.decided_at)
        self.assertEqual(transfer.version, 1)

        self.link.refresh_from_db()
        self.assertEqual(self.link.status, AffiliationStatus.INACTIVE)
        self.assertEqual(self.link.offboarding_reason, "TRANSFER")
        self.assertIsNotNone(self.link.date_of_offboarding)

        active = ClientDealerLink.objects.get(
            client=self.client_row, status=AffiliationStatus.ACTIVE
        )
        self.assertEqual(active.dealer_id, self.d2.id)
        self.assertTrue(
            AuditLog.objects.filter(
                entity="TRANSFER", entity_id=transfer.id, action="APPROVE"
            ).exists()
        )

    def test_dealer_actor_cannot_approve(self):
        transfer = self._request()
        with self.assertRaises(PermissionDeniedError):
            services.approve_transfer(transfer.id, "DEALER:D2 Ltd")
        transfer.refresh_from_db()
        self.assertEqual(transfer.status, TransferStatus.PENDING)

    def test_rejected_request_cannot_be_approved(self):
        transfer = self._request()
        services.reject_transfer(transfer.id, "ADMIN")

        with self.assertRaises(InvalidStateError):
            services.approve_transfer(transfer.id, "ADMIN")

        self.link.refresh_from_db()
        self.assertEqual(self.link.status, AffiliationStatus.ACTIVE)
        self.assertFalse(
            ClientDealerLink.objects.filter(dealer=self.d2).exists()
        )

    def test_approve_twice_fails(self):
        transfer = self._request()
        services.approve_transfer(transfer.id, "ADMIN")
        with self.assertRaises(InvalidStateError):
            services.approve_transfer(transfer.id, "ADMIN")
        self.assertEqual(
            ClientDealerLink.objects.filter(client=self.client_row).count(), 2
        )

    def test_inactive_destination_rolls_back(self):
        transfer = self._request()
        Dealer.objects.filter(id=self.d2.id).update(status=DealerStatus.INACTIVE)

        with self.assertRaises(NotFoundError):
            services.approve_transfer(transfer.id, "ADMIN")

        self.link.refresh_from_db()
        self.assertEqual(self.link.status, AffiliationStatus.ACTIVE)
        self.assertIsNone(self.link.offboarding_reason)
        transfer.refresh_from_db()
        self.assertEqual(transfer.status, TransferStatus.PENDING)

    def test_failure_opening_new_link_rolls_back(self):
        transfer = self._request()

        with mock.patch(
            "apps.transfers.services.ledger.create_client_link",
            side_effect=ConflictError("boom"),
        ):
            with self.assertRaises(ConflictError):
                services.approve_transfer(transfer.id, "ADMIN")

        self.link.refresh_from_db()
        self.assertEqual(self.link.status, AffiliationStatus.ACTIVE)
        transfer.refresh_from_db()
        self.assertEqual(transfer.status, TransferStatus.PENDING)
        self.assertFalse(AuditLog.objects.filter(action="APPROVE").exists())

    def test_source_link_ended_after_request(self):
        transfer = self._request()
        ledger.deactivate_client_link(self.link.id, "Closed", "ADMIN")
        with self.assertRaises(InvalidStateError):
            services.approve_transfer(transfer.id, "ADMIN")
        transfer.refresh_from_db()
        self.assertEqual(transfer.status, TransferStatus.PENDING)


class DecisionTests(TransferFixtureMixin, TestCase):
    def test_reject_leaves_links_untouched(self):
        transfer = self._request()
        services.reject_transfer(transfer.id, "ADMIN")

        transfer.refresh_from_db()
        self.assertEqual(transfer.status, TransferStatus.REJECTED)
        self.link.refresh_from_db()
        self.assertEqual(self.link.status, AffiliationStatus.ACTIVE)

    def test_cancel(self):
        transfer = self._request()
        services.cancel_transfer(transfer.id, "ADMIN")
        transfer.refresh_from_db()
        self.assertEqual(transfer.status, TransferStatus.CANCELED)

        with self.assertRaises(InvalidStateError):
            services.reject_transfer(transfer.id, "ADMIN")

    def test_unknown_transfer(self):
        with self.assertRaises(NotFoundError):
            services.reject_transfer(uuid.uuid4(), "ADMIN")

    def test_stale_version_loses(self):
        transfer = self._request()
        stale = TransferRequest.objects.get(id=transfer.id)
        TransferRequest.objects.filter(id=transfer.id).update(version=5)

        with self.assertRaises(InvalidStateError) as ctx:
            services._decide(stale, TransferStatus.REJECTED, "ADMIN")
        self.assertEqual(ctx.exception.details["expected_version"], 0)

        transfer.refresh_from_db()
        self.assertEqual(transfer.status, TransferStatus.PENDING)
