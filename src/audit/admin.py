from django.contrib import admin

from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "actor_name", "action", "table_name", "record_id")
    list_filter = ("action", "table_name")
    search_fields = ("record_id", "actor_name", "action", "table_name")
    readonly_fields = (
        "actor_id",
        "actor_name",
        "action",
        "table_name",
        "record_id",
        "changes",
        "created_at",
    )
    date_hierarchy = "created_at"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
