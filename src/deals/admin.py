from django.contrib import admin

from core.locks import deal_is_locked

from .models import Deal
from .services import FINANCIAL_FIELDS


@admin.register(Deal)
class DealAdmin(admin.ModelAdmin):
    list_display = ("name", "client", "stage", "value", "invoice_status", "prob", "created_at")
    list_filter = ("stage", "invoice_status")
    search_fields = ("name", "client", "owner")
    readonly_fields = ("created_at", "updated_at")

    def get_readonly_fields(self, request, obj=None):
        fields = super().get_readonly_fields(request, obj)
        if obj is not None and deal_is_locked(obj):
            return (*fields, *sorted(FINANCIAL_FIELDS))
        return fields

    def has_delete_permission(self, request, obj=None):
        if obj is not None and deal_is_locked(obj):
            return False
        return super().has_delete_permission(request, obj)
