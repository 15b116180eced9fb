import uuid
from decimal import Decimal

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class TeamMemberManager(BaseUserManager):
    """Manager for team members; the PIN is stored through the password hasher."""

    def create_user(self, name, pin=None, **extra_fields):
        if not name:
            raise ValueError("A team member needs a name.")
        extra_fields.setdefault("is_active", True)
        member = self.model(name=name, **extra_fields)
        member.set_password(str(pin) if pin is not None else None)
        member.save(using=self._db)
        return member

    def create_superuser(self, name, password=None, **extra_fields):
        extra_fields.setdefault("auth_role", TeamMember.AuthRole.ADMIN)
        if extra_fields.get("auth_role") != TeamMember.AuthRole.ADMIN:
            raise ValueError("A superuser must have the admin role.")
        return self.create_user(name, password, **extra_fields)


class TeamMember(AbstractBaseUser):
    """
    A member of the agency team.

    Team members log in with their id and a numeric PIN; the PIN hash lives
    in the inherited ``password`` column. ``auth_role`` drives API
    permissions while ``role`` is only a job title shown in the UI.
    """

    class AuthRole(models.TextChoices):
        ADMIN = "admin", "Admin"
        CLASS_A = "class_a", "Class A"
        CLASS_B = "class_b", "Class B"
        VA = "va", "Virtual assistant"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(
        "name",
        max_length=150,
        unique=True,
        error_messages={"unique": "A team member with this name already exists."},
    )
    role = models.CharField("job title", max_length=100, blank=True, default="")
    auth_role = models.CharField(
        "access level",
        max_length=20,
        choices=AuthRole.choices,
        default=AuthRole.CLASS_B,
        db_index=True,
    )
    color = models.CharField("color", max_length=20, default="#c9a84c")
    profit_share_pct = models.DecimalField(
        "profit share %",
        max_digits=5,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
    )
    is_active = models.BooleanField("active", default=True)
    created_at = models.DateTimeField("created at", auto_now_add=True)

    objects = TeamMemberManager()

    USERNAME_FIELD = "name"
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name = "team member"
        verbose_name_plural = "team members"
        ordering = ["name"]

    def __str__(self):
        return self.name

    @property
    def is_admin(self) -> bool:
        return self.auth_role == self.AuthRole.ADMIN

    @property
    def can_delete_records(self) -> bool:
        return self.auth_role in (self.AuthRole.ADMIN, self.AuthRole.CLASS_A)

    # Django admin site hooks; there is no per-model permission table.
    @property
    def is_staff(self) -> bool:
        return self.is_active and self.is_admin

    @property
    def is_superuser(self) -> bool:
        return self.is_staff

    def has_perm(self, perm, obj=None) -> bool:
        return self.is_staff

    def has_module_perms(self, app_label) -> bool:
        return self.is_staff
