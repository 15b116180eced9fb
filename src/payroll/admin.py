from django.contrib import admin

from .models import PayLogEntry, PayStatus, ProfitShareStatus


class ReadOnlyAdmin(admin.ModelAdmin):
    """Payroll rows are written through the API only."""

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(PayLogEntry)
class PayLogEntryAdmin(ReadOnlyAdmin):
    list_display = ("paid_at", "member_name", "pay_type", "amount", "is_manual", "created_by_name")
    list_filter = ("pay_type", "is_manual")
    search_fields = ("member_name", "note", "quarter_key")
    date_hierarchy = "paid_at"


@admin.register(PayStatus)
class PayStatusAdmin(ReadOnlyAdmin):
    list_display = ("project", "member", "paid", "updated_at")
    list_filter = ("paid",)


@admin.register(ProfitShareStatus)
class ProfitShareStatusAdmin(ReadOnlyAdmin):
    list_display = ("quarter_key", "member", "paid", "updated_at")
    list_filter = ("paid", "quarter_key")
