from django.contrib import admin

from .models import Expense, Project, Task


class TaskInline(admin.TabularInline):
    model = Task
    extra = 0
    fields = ("title", "assignee", "status", "priority", "est_hours", "due_date")
    raw_id_fields = ("assignee",)


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("name", "client", "deal", "status", "archived", "start_date", "end_date")
    list_filter = ("status", "archived")
    search_fields = ("name", "client")
    raw_id_fields = ("deal",)
    inlines = [TaskInline]


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ("title", "project", "assignee", "status", "priority", "est_hours", "due_date")
    list_filter = ("status", "priority")
    search_fields = ("title", "project__name")
    raw_id_fields = ("project", "assignee")
    list_select_related = ("project", "assignee")


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ("description", "project", "category", "amount", "date", "payment_type", "reimbursed")
    list_filter = ("category", "payment_type", "reimbursed")
    search_fields = ("description", "project__name")
    raw_id_fields = ("project", "submitted_by")
    date_hierarchy = "date"
