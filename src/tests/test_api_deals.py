"""Tests for the deals API and the paid-deal lock."""
from decimal import Decimal

import pytest

from audit.models import AuditLog
from deals.models import Deal


def _url(deal=None):
    return f"/api/v1/deals/{deal.pk}/" if deal else "/api/v1/deals/"


class TestCreateDeal:
    """POST /api/v1/deals/"""

    def test_create_applies_defaults(self, admin_client):
        resp = admin_client.post(_url(), {"name": "Website", "client": "Initech", "value": "1000"}, format="json")
        assert resp.status_code == 201
        assert resp.data["invoiceStatus"] == "none"
        assert resp.data["buckets"] == []
        assert resp.data["prob"] == 0
        assert resp.data["expenses"] == Decimal("0")
        assert AuditLog.objects.filter(action="CREATE_DEAL", record_id=resp.data["id"]).count() == 1

    def test_explicit_nulls_get_defaults(self, admin_client):
        resp = admin_client.post(
            _url(),
            {"name": "Campaign", "value": "500", "buckets": None, "prob": None, "invoiceStatus": None},
            format="json",
        )
        assert resp.status_code == 201
        assert resp.data["buckets"] == []
        assert resp.data["prob"] == 0
        assert resp.data["invoiceStatus"] == "none"

    def test_requires_admin(self, class_a_client):
        resp = class_a_client.post(_url(), {"name": "Website", "value": "1000"}, format="json")
        assert resp.status_code == 403
        assert resp.data == {"error": "Admin access required"}

    def test_requires_authentication(self, api_client, db):
        resp = api_client.get(_url())
        assert resp.status_code == 401
        assert "error" in resp.data


class TestUpdateDeal:
    """PATCH /api/v1/deals/:id/"""

    def test_lock_lifecycle(self, admin_client):
        deal = Deal.objects.create(name="D1", value=Decimal("1000"))

        resp = admin_client.patch(_url(deal), {"value": 2000}, format="json")
        assert resp.status_code == 200
        assert resp.data["value"] == Decimal("2000")

        resp = admin_client.patch(_url(deal), {"invoiceStatus": "paid"}, format="json")
        assert resp.status_code == 200

        resp = admin_client.patch(_url(deal), {"value": 3000}, format="json")
        assert resp.status_code == 403
        deal.refresh_from_db()
        assert deal.value == Decimal("2000")
        assert AuditLog.objects.filter(action="BLOCKED_EDIT_PAID_DEAL", record_id=str(deal.pk)).count() == 1

        resp = admin_client.patch(_url(deal), {"invoiceStatus": "sent"}, format="json")
        assert resp.status_code == 200

        resp = admin_client.patch(_url(deal), {"value": 3000}, format="json")
        assert resp.status_code == 200
        deal.refresh_from_db()
        assert deal.value == Decimal("3000")

    @pytest.mark.parametrize(
        "payload",
        [
            {"value": 9999},
            {"prob": 10},
            {"buckets": [{"label": "All", "amount": 1}]},
            {"name": "Renamed", "prob": 10},
        ],
    )
    def test_paid_deal_rejects_financial_fields(self, admin_client, paid_deal, payload):
        resp = admin_client.patch(_url(paid_deal), payload, format="json")
        assert resp.status_code == 403
        assert "locked" in resp.data["error"]

        paid_deal.refresh_from_db()
        assert paid_deal.value == Decimal("5000")
        assert paid_deal.prob == 100
        assert paid_deal.buckets == []
        assert paid_deal.name == "Annual report"

        blocked = AuditLog.objects.get(action="BLOCKED_EDIT_PAID_DEAL")
        assert blocked.actor_name == "Admin User"
        assert blocked.changes["name"] == "Annual report"
        assert set(blocked.changes["fields"]) == set(payload) - {"name"}

    def test_paid_deal_accepts_non_financial_fields(self, admin_client, paid_deal):
        resp = admin_client.patch(_url(paid_deal), {"owner": "Alex", "stage": "Closed Won"}, format="json")
        assert resp.status_code == 200
        assert resp.data["owner"] == "Alex"

    def test_invoice_status_unlocks(self, admin_client, paid_deal):
        resp = admin_client.patch(_url(paid_deal), {"invoiceStatus": "sent"}, format="json")
        assert resp.status_code == 200
        assert resp.data["invoiceStatus"] == "sent"

    def test_edit_records_field_diff(self, admin_client, deal):
        resp = admin_client.patch(_url(deal), {"value": "1500", "prob": 75, "client": "Acme"}, format="json")
        assert resp.status_code == 200

        entry = AuditLog.objects.get(action="EDIT_DEAL", record_id=str(deal.pk))
        assert entry.table_name == "deals"
        assert entry.changes == {
            "value": {"from": "1000.00", "to": "1500.00"},
            "prob": {"from": 50, "to": 75},
        }

    def test_no_op_edit_records_nothing(self, admin_client, deal):
        resp = admin_client.patch(_url(deal), {"client": "Acme"}, format="json")
        assert resp.status_code == 200
        assert not AuditLog.objects.filter(action="EDIT_DEAL").exists()

    def test_unknown_deal_is_404(self, admin_client):
        resp = admin_client.patch("/api/v1/deals/00000000-0000-0000-0000-000000000000/", {"value": 1}, format="json")
        assert resp.status_code == 404
        assert "error" in resp.data


class TestDeleteDeal:
    """DELETE /api/v1/deals/:id/"""

    def test_delete_unpaid(self, class_a_client, deal):
        resp = class_a_client.delete(_url(deal))
        assert resp.status_code == 200
        assert resp.data == {"ok": True}
        assert not Deal.objects.filter(pk=deal.pk).exists()
        assert AuditLog.objects.filter(action="DELETE_DEAL", record_id=str(deal.pk)).count() == 1

    def test_delete_paid_is_blocked(self, admin_client, paid_deal):
        resp = admin_client.delete(_url(paid_deal))
        assert resp.status_code == 403
        assert Deal.objects.filter(pk=paid_deal.pk).exists()
        assert AuditLog.objects.filter(action="BLOCKED_DELETE_PAID_DEAL", record_id=str(paid_deal.pk)).count() == 1

    def test_delete_keeps_projects(self, admin_client, project):
        resp = admin_client.delete(_url(project.deal))
        assert resp.status_code == 200
        project.refresh_from_db()
        assert project.deal is None

    def test_class_b_cannot_delete(self, class_b_client, deal):
        resp = class_b_client.delete(_url(deal))
        assert resp.status_code == 403
        assert resp.data == {"error": "Deleting records requires Admin or Class A access"}
        assert Deal.objects.filter(pk=deal.pk).exists()
