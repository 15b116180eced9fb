"""Tests for the tasks API and the task hours lock."""
from decimal import Decimal

from audit.models import AuditLog
from deals.models import Deal
from projects.models import Project, Task


def _url(task=None):
    return f"/api/v1/tasks/{task.pk}/" if task else "/api/v1/tasks/"


class TestCreateTask:
    """POST /api/v1/tasks/"""

    def test_any_member_can_create(self, class_b_client, project):
        resp = class_b_client.post(_url(), {"title": "Moodboard", "projectId": str(project.pk)}, format="json")
        assert resp.status_code == 201
        assert resp.data["priority"] == "med"
        assert resp.data["status"] == "todo"
        assert resp.data["estHours"] == Decimal("0")

    def test_project_is_required(self, class_b_client, db):
        resp = class_b_client.post(_url(), {"title": "Orphan"}, format="json")
        assert resp.status_code == 400
        assert resp.data["error"].startswith("projectId")


class TestUpdateTaskHours:
    """PATCH /api/v1/tasks/:id/"""

    def test_hours_editable_on_open_project(self, class_b_client, task):
        resp = class_b_client.patch(_url(task), {"estHours": "10.5"}, format="json")
        assert resp.status_code == 200
        assert resp.data["estHours"] == Decimal("10.5")
        assert not AuditLog.objects.exists()

    def test_hours_locked_on_complete_paid_project(self, class_b_client, locked_task):
        resp = class_b_client.patch(_url(locked_task), {"estHours": 20}, format="json")
        assert resp.status_code == 403
        assert "locked" in resp.data["error"]

        locked_task.refresh_from_db()
        assert locked_task.est_hours == Decimal("12")

        entry = AuditLog.objects.get(action="BLOCKED_EDIT_TASK_HOURS")
        assert entry.table_name == "tasks"
        assert entry.record_id == str(locked_task.pk)
        assert entry.changes["from"] == "12.00"
        assert entry.changes["attempted"] == "20.00"

    def test_status_editable_on_locked_project(self, class_b_client, locked_task):
        resp = class_b_client.patch(_url(locked_task), {"status": "done"}, format="json")
        assert resp.status_code == 200
        locked_task.refresh_from_db()
        assert locked_task.status == Task.Status.DONE

    def test_mixed_payload_is_refused_whole(self, class_b_client, locked_task):
        resp = class_b_client.patch(_url(locked_task), {"status": "done", "estHours": 1}, format="json")
        assert resp.status_code == 403
        locked_task.refresh_from_db()
        assert locked_task.status == Task.Status.TODO

    def test_unlocks_when_deal_is_unpaid(self, class_b_client, locked_task):
        Deal.objects.filter(pk=locked_task.project.deal_id).update(invoice_status=Deal.InvoiceStatus.SENT)
        resp = class_b_client.patch(_url(locked_task), {"estHours": 20}, format="json")
        assert resp.status_code == 200

    def test_complete_project_without_deal_is_open(self, class_b_client, db):
        project = Project.objects.create(name="Internal", status=Project.Status.COMPLETE)
        task = Task.objects.create(title="Retro", project=project, est_hours=Decimal("2"))
        resp = class_b_client.patch(_url(task), {"estHours": 3}, format="json")
        assert resp.status_code == 200

    def test_moving_out_of_locked_project_with_hours_is_refused(self, class_b_client, locked_task, project):
        resp = class_b_client.patch(
            _url(locked_task),
            {"projectId": str(project.pk), "estHours": 1},
            format="json",
        )
        assert resp.status_code == 403
        locked_task.refresh_from_db()
        assert locked_task.project_id != project.pk
        assert locked_task.est_hours == Decimal("12")

    def test_moving_into_locked_project_with_hours_is_refused(self, class_b_client, task, locked_project):
        resp = class_b_client.patch(
            _url(task),
            {"projectId": str(locked_project.pk), "estHours": 99},
            format="json",
        )
        assert resp.status_code == 403
        task.refresh_from_db()
        assert task.project_id != locked_project.pk
        assert task.est_hours != Decimal("99")

        entry = AuditLog.objects.get(action="BLOCKED_EDIT_TASK_HOURS")
        assert entry.changes["project"] == str(locked_project.pk)
        assert entry.changes["attempted"] == "99.00"

    def test_moving_into_locked_project_without_hours_is_allowed(self, class_b_client, task, locked_project):
        resp = class_b_client.patch(_url(task), {"projectId": str(locked_project.pk)}, format="json")
        assert resp.status_code == 200
        task.refresh_from_db()
        assert task.project_id == locked_project.pk


class TestDeleteTask:
    """DELETE /api/v1/tasks/:id/"""

    def test_class_a_can_delete(self, class_a_client, task):
        resp = class_a_client.delete(_url(task))
        assert resp.status_code == 200
        assert resp.data == {"ok": True}
        assert not Task.objects.filter(pk=task.pk).exists()

    def test_class_b_cannot_delete(self, class_b_client, task):
        resp = class_b_client.delete(_url(task))
        assert resp.status_code == 403
        assert Task.objects.filter(pk=task.pk).exists()
