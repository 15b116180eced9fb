"""Shared fixtures for all tests."""
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from deals.models import Deal
from projects.models import Project, Task

TeamMember = get_user_model()

PIN = "1234"


@pytest.fixture
def api_client():
    return APIClient()


def _member(name, auth_role, **extra):
    return TeamMember.objects.create_user(name, pin=PIN, auth_role=auth_role, **extra)


@pytest.fixture
def admin_user(db):
    return _member("Admin User", TeamMember.AuthRole.ADMIN, role="Creative Director")


@pytest.fixture
def class_a_user(db):
    return _member("Class A User", TeamMember.AuthRole.CLASS_A, role="Lead Designer")


@pytest.fixture
def class_b_user(db):
    return _member("Class B User", TeamMember.AuthRole.CLASS_B, role="Designer")


@pytest.fixture
def va_user(db):
    return _member("VA User", TeamMember.AuthRole.VA, role="Assistant")


@pytest.fixture
def partner(db):
    """A member on profit share, used as the target of pay operations."""
    return _member(
        "Partner Member",
        TeamMember.AuthRole.CLASS_A,
        profit_share_pct=Decimal("25"),
    )


@pytest.fixture
def admin_client(api_client, admin_user):
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def class_a_client(api_client, class_a_user):
    api_client.force_authenticate(user=class_a_user)
    return api_client


@pytest.fixture
def class_b_client(api_client, class_b_user):
    api_client.force_authenticate(user=class_b_user)
    return api_client


@pytest.fixture
def deal(db):
    return Deal.objects.create(
        name="Brand refresh",
        client="Acme",
        value=Decimal("1000.00"),
        stage=Deal.Stage.PROPOSAL,
        buckets=[{"label": "Design", "amount": 600}, {"label": "Build", "amount": 400}],
        prob=50,
    )


@pytest.fixture
def paid_deal(db):
    return Deal.objects.create(
        name="Annual report",
        client="Globex",
        value=Decimal("5000.00"),
        stage=Deal.Stage.CLOSED_WON,
        invoice_status=Deal.InvoiceStatus.PAID,
        amount_collected=Decimal("5000.00"),
        prob=100,
    )


@pytest.fixture
def project(deal):
    return Project.objects.create(name="Brand refresh delivery", client="Acme", deal=deal)


@pytest.fixture
def locked_project(paid_deal):
    return Project.objects.create(
        name="Annual report delivery",
        client="Globex",
        deal=paid_deal,
        status=Project.Status.COMPLETE,
    )


@pytest.fixture
def task(project, class_b_user):
    return Task.objects.create(
        title="Logo concepts",
        project=project,
        assignee=class_b_user,
        est_hours=Decimal("8.00"),
    )


@pytest.fixture
def locked_task(locked_project, class_b_user):
    return Task.objects.create(
        title="Print proofs",
        project=locked_project,
        assignee=class_b_user,
        est_hours=Decimal("12.00"),
    )
