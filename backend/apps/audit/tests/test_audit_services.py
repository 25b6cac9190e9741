import uuid
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase

from apps.audit import services
from apps.audit.models import AuditAction, AuditEntity, AuditLog
from apps.dealers.models import Dealer
from apps.dealers.services import create_dealer


class AuditRecordTests(TestCase):
    def test_record_appends_entry(self):
        entity_id = uuid.uuid4()
        entry = services.record(
            "ADMIN", AuditAction.UPDATE, AuditEntity.DEALER, entity_id, {"a": 1}
        )
        self.assertIsNotNone(entry)
        self.assertEqual(list(services.query(AuditEntity.DEALER, entity_id)), [entry])

    def test_record_defaults_metadata(self):
        entry = services.record(
            "ADMIN", AuditAction.CREATE, AuditEntity.CLIENT, uuid.uuid4()
        )
        self.assertEqual(entry.metadata, {})

    def test_failed_write_is_logged_and_returns_none(self):
        with mock.patch.object(
            AuditLog.objects, "create", side_effect=DatabaseError("disk full")
        ):
            with self.assertLogs("apps.audit.services", level="ERROR") as cm:
                entry = services.record(
                    "ADMIN", AuditAction.CREATE, AuditEntity.DEALER, uuid.uuid4()
                )

        self.assertIsNone(entry)
        self.assertEqual(cm.records[0].message, "audit_write_failed")
        self.assertEqual(cm.records[0].operation, "AUDIT_RECORD")

    def test_failed_write_keeps_business_change(self):
        with mock.patch.object(
            AuditLog.objects, "create", side_effect=DatabaseError("disk full")
        ):
            with self.assertLogs("apps.audit.services", level="ERROR"):
                dealer = create_dealer("ADMIN", "Resilient Fuels")

        self.assertTrue(Dealer.objects.filter(id=dealer.id).exists())
        self.assertFalse(AuditLog.objects.exists())
