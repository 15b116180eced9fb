"""Tests for audit recording and the audit log endpoint."""
import uuid
from decimal import Decimal
from unittest import mock

import pytest
from django.db import DatabaseError

from audit import services as audit_services
from audit.models import AuditLog
from audit.services import actor_identity, diff_fields, record_audit
from deals import services as deal_services
from deals.models import Deal


class TestActorIdentity:

    def test_member(self, partner):
        assert actor_identity(partner) == (str(partner.pk), "Partner Member")

    def test_token_payload(self):
        member_id = uuid.uuid4()
        assert actor_identity({"sub": member_id, "name": "Kim"}) == (str(member_id), "Kim")

    @pytest.mark.parametrize("actor", [None, {}, {"role": "admin"}])
    def test_unknown(self, actor):
        assert actor_identity(actor) == (None, "unknown")


class TestDiffFields:

    def test_reports_changed_fields_only(self):
        before = {"value": Decimal("10.00"), "prob": 5, "buckets": [1, 2]}
        after = {"value": Decimal("10"), "prob": 6, "buckets": [1, 3]}
        assert diff_fields(before, after) == {
            "prob": {"from": 5, "to": 6},
            "buckets": {"from": [1, 2], "to": [1, 3]},
        }

    def test_restricted_to_fields(self):
        assert diff_fields({"a": 1, "b": 1}, {"a": 2, "b": 2}, fields=["b"]) == {"b": {"from": 1, "to": 2}}


@pytest.mark.django_db
class TestRecordAudit:

    def test_writes_row(self, admin_user):
        record_audit(admin_user, "EDIT_DEAL", "deals", 42, {"value": {"from": Decimal("1"), "to": Decimal("2")}})
        entry = AuditLog.objects.get()
        assert entry.actor_id == admin_user.pk
        assert entry.actor_name == "Admin User"
        assert entry.record_id == "42"
        assert entry.changes == {"value": {"from": "1", "to": "2"}}

    def test_unknown_actor(self):
        record_audit(None, "EDIT_DEAL", "deals", "x")
        entry = AuditLog.objects.get()
        assert entry.actor_id is None
        assert entry.actor_name == "unknown"

    def test_storage_failure_is_swallowed(self, admin_user):
        with mock.patch.object(audit_services, "write_audit_entry", side_effect=DatabaseError("disk full")), \
                mock.patch.object(audit_services.logger, "warning") as warning:
            record_audit(admin_user, "EDIT_DEAL", "deals", "x")
        assert not AuditLog.objects.exists()
        warning.assert_called_once()
        assert warning.call_args.args[1] == "EDIT_DEAL"

    def test_business_call_survives_audit_failure(self, admin_user):
        deal = Deal.objects.create(name="D1", value=Decimal("1000"))
        with mock.patch.object(audit_services, "write_audit_entry", side_effect=DatabaseError("disk full")):
            deal_services.update_deal(deal, {"value": Decimal("2000")}, admin_user)
        deal.refresh_from_db()
        assert deal.value == Decimal("2000")
        assert not AuditLog.objects.exists()

    def test_malformed_actor_id_is_swallowed(self):
        with mock.patch.object(audit_services.logger, "warning") as warning:
            record_audit({"sub": "legacy-7", "name": "Kim"}, "EDIT_DEAL", "deals", "x")
        assert not AuditLog.objects.exists()
        warning.assert_called_once()

    def test_business_call_survives_payload_failure(self, admin_user):
        deal = Deal.objects.create(name="D1", value=Decimal("1000"))
        with mock.patch.object(audit_services, "build_audit_payload", side_effect=TypeError("not serializable")):
            deal_services.update_deal(deal, {"value": Decimal("2000")}, admin_user)
        deal.refresh_from_db()
        assert deal.value == Decimal("2000")
        assert not AuditLog.objects.exists()

    def test_async_dispatch(self, admin_user, settings):
        settings.AUDIT_LOG_ASYNC = True
        with mock.patch("audit.tasks.write_audit_log.delay") as delay:
            record_audit(admin_user, "DELETE_DEAL", "deals", "x", {"name": "D1"})
        payload = delay.call_args.args[0]
        assert payload["action"] == "DELETE_DEAL"
        assert payload["actor_name"] == "Admin User"
        assert payload["changes"] == {"name": "D1"}

    def test_async_dispatch_failure_is_swallowed(self, admin_user, settings):
        settings.AUDIT_LOG_ASYNC = True
        with mock.patch("audit.tasks.write_audit_log.delay", side_effect=ConnectionError("broker down")):
            record_audit(admin_user, "DELETE_DEAL", "deals", "x")

    def test_task_writes_row(self, admin_user):
        from audit.tasks import write_audit_log

        payload = audit_services.build_audit_payload(admin_user, "DELETE_DEAL", "deals", "x")
        write_audit_log(payload)
        assert AuditLog.objects.get().action == "DELETE_DEAL"


class TestAuditLogEndpoint:
    """GET /api/v1/audit-log/"""

    def _seed(self, count, action="EDIT_DEAL", table_name="deals"):
        for i in range(count):
            AuditLog.objects.create(actor_name="seed", action=action, table_name=table_name, record_id=str(i))

    def test_newest_first(self, admin_client):
        self._seed(3)
        resp = admin_client.get("/api/v1/audit-log/")
        assert resp.status_code == 200
        assert [row["recordId"] for row in resp.data] == ["2", "1", "0"]

    def test_limit(self, admin_client, settings):
        settings.AUDIT_LOG_API_LIMIT = 5
        self._seed(8)
        resp = admin_client.get("/api/v1/audit-log/")
        assert len(resp.data) == 5
        assert resp.data[0]["recordId"] == "7"

    def test_filters(self, admin_client):
        self._seed(2)
        self._seed(1, action="BLOCKED_EDIT_TASK_HOURS", table_name="tasks")
        resp = admin_client.get("/api/v1/audit-log/", {"action": "BLOCKED_EDIT_TASK_HOURS"})
        assert [row["tableName"] for row in resp.data] == ["tasks"]

        resp = admin_client.get("/api/v1/audit-log/", {"table_name": "deals", "record_id": "1"})
        assert len(resp.data) == 1

    def test_requires_admin(self, class_a_client):
        resp = class_a_client.get("/api/v1/audit-log/")
        assert resp.status_code == 403
