"""Business services for team members: roster edits, PIN login and tokens."""
from __future__ import annotations

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import TeamMember
from audit.services import actor_identity, record_audit
from core.exceptions import (
    CannotSelfDelete,
    CannotSelfDemote,
    InvalidRole,
    MemberInactive,
    PinLoginError,
    ProfitShareLocked,
)
from core.locks import profit_share_locked

logger = logging.getLogger("agency")

TABLE_NAME = "team_members"

EDITABLE_FIELDS = ("name", "role", "color", "is_active", "auth_role", "profit_share_pct")

PCT_LOCK_REASON = "Profit share payout exists for this member"


def _is_self(member: TeamMember, actor) -> bool:
    actor_id, _name = actor_identity(actor)
    return actor_id is not None and actor_id == str(member.pk)


def _validate_role(role) -> None:
    if role not in TeamMember.AuthRole.values:
        raise InvalidRole(role)


# ---------------------------------------------------------------------------
# Roster
# ---------------------------------------------------------------------------

def create_member(fields: dict, pin, actor=None) -> TeamMember:
    """Add a member to the roster. A PIN is mandatory.

    Raises
    ------
    ValueError
        If no PIN is given.
    InvalidRole
        If ``auth_role`` is not one of the known access levels.
    """
    if not pin:
        raise ValueError("PIN is required for new members")
    data = {key: value for key, value in fields.items() if key in EDITABLE_FIELDS}
    data.setdefault("auth_role", TeamMember.AuthRole.CLASS_B)
    _validate_role(data["auth_role"])
    if data.get("profit_share_pct") is None:
        data["profit_share_pct"] = Decimal("0")

    member = TeamMember.objects.create_user(pin=pin, **data)
    logger.info("Team member %s (%s) created by %s", member.pk, member.name, actor)
    return member


def update_member(member: TeamMember, changes: dict, actor) -> TeamMember:
    """Apply a partial update to a team member.

    ``changes`` may also carry ``pin``, which is re-hashed. The checks run
    in order: self-demotion, role validity, profit share lock. A refused
    update applies nothing.

    Raises
    ------
    CannotSelfDemote
        If the actor tries to move their own access level away from admin.
    InvalidRole
        If ``auth_role`` is not one of the known access levels.
    ProfitShareLocked
        If the percentage changes after a profit share payout.
    """
    pin = changes.get("pin")
    changes = {key: value for key, value in changes.items() if key in EDITABLE_FIELDS}

    if "auth_role" in changes:
        if _is_self(member, actor) and changes["auth_role"] != TeamMember.AuthRole.ADMIN:
            raise CannotSelfDemote()
        _validate_role(changes["auth_role"])

    new_pct = changes.get("profit_share_pct")
    if new_pct is not None:
        new_pct = Decimal(str(new_pct))
        changes["profit_share_pct"] = new_pct

    with transaction.atomic():
        current = TeamMember.objects.select_for_update().get(pk=member.pk)
        old_pct = current.profit_share_pct
        pct_changed = new_pct is not None and new_pct != old_pct
        blocked = pct_changed and profit_share_locked(current)
        if not blocked:
            for field, value in changes.items():
                setattr(current, field, value)
            if pin:
                current.set_password(str(pin))
            current.save()

    if blocked:
        record_audit(
            actor,
            "BLOCKED_PS_PCT_CHANGE",
            TABLE_NAME,
            current.pk,
            {"name": current.name, "from": old_pct, "to": new_pct, "reason": PCT_LOCK_REASON},
        )
        logger.warning("Blocked profit share change for %s by %s", current.pk, actor)
        raise ProfitShareLocked(
            f"{current.name}'s profit share percentage is locked: "
            "a profit share payout has already been made."
        )

    if pct_changed:
        record_audit(
            actor,
            "EDIT_TEAM_PS_PCT",
            TABLE_NAME,
            current.pk,
            {"name": current.name, "from": old_pct, "to": new_pct},
        )
    return current


def delete_member(member: TeamMember, actor) -> None:
    """Remove a member from the roster.

    Raises
    ------
    CannotSelfDelete
        If the actor is the member being removed.
    """
    if _is_self(member, actor):
        raise CannotSelfDelete()

    member_id, name = member.pk, member.name
    member.delete()
    record_audit(actor, "DELETE_TEAM_MEMBER", TABLE_NAME, member_id, {"name": name})
    logger.info("Team member %s (%s) deleted by %s", member_id, name, actor)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

def authenticate_pin(member_id, pin) -> TeamMember:
    """Check a member id / PIN pair.

    Raises
    ------
    ValueError
        If either value is missing.
    PinLoginError
        Unknown member or wrong PIN.
    MemberInactive
        The member exists but has been deactivated.
    """
    if not member_id or not pin:
        raise ValueError("memberId and pin required")

    try:
        member = TeamMember.objects.filter(pk=member_id).first()
    except (DjangoValidationError, ValueError):
        member = None
    if member is None:
        raise PinLoginError("Member not found")
    if not member.is_active:
        raise MemberInactive()
    if not member.check_password(str(pin)):
        logger.warning("Failed PIN login for member %s", member.pk)
        raise PinLoginError("Incorrect PIN")

    logger.info("Member %s logged in", member.pk)
    return member


def issue_token(member: TeamMember) -> str:
    """Signed access token carrying ``sub``, ``name`` and ``role``."""
    token = AccessToken.for_user(member)
    token["name"] = member.name
    token["role"] = member.auth_role
    return str(token)
