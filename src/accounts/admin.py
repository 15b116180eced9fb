from django.contrib import admin

from core.locks import profit_share_locked

from .models import TeamMember


@admin.register(TeamMember)
class TeamMemberAdmin(admin.ModelAdmin):
    """Roster admin. PINs are set through the API or ``seed_team``."""

    list_display = ("name", "role", "auth_role", "profit_share_pct", "is_active", "created_at")
    list_filter = ("auth_role", "is_active")
    search_fields = ("name", "role")
    ordering = ("name",)
    actions = ("activate_members", "deactivate_members")

    fieldsets = (
        (None, {"fields": ("name", "role", "color")}),
        ("Access", {"fields": ("auth_role", "is_active")}),
        ("Pay", {"fields": ("profit_share_pct",)}),
        ("Dates", {"fields": ("last_login", "created_at")}),
    )

    def get_readonly_fields(self, request, obj=None):
        readonly = ["last_login", "created_at"]
        if obj is not None and profit_share_locked(obj):
            readonly.append("profit_share_pct")
        return readonly

    def has_add_permission(self, request):
        return False

    @admin.action(description="Activate selected members")
    def activate_members(self, request, queryset):
        queryset.update(is_active=True)

    @admin.action(description="Deactivate selected members")
    def deactivate_members(self, request, queryset):
        queryset.update(is_active=False)
