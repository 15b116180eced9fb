"""Main API URL router for /api/v1/."""
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from api.v1 import views as v1_views

router = DefaultRouter()
router.register(r"team", v1_views.TeamMemberViewSet, basename="team")
router.register(r"deals", v1_views.DealViewSet, basename="deal")
router.register(r"projects", v1_views.ProjectViewSet, basename="project")
router.register(r"tasks", v1_views.TaskViewSet, basename="task")
router.register(r"expenses", v1_views.ExpenseViewSet, basename="expense")
router.register(r"pay-log", v1_views.PayLogViewSet, basename="pay-log")
router.register(r"audit-log", v1_views.AuditLogViewSet, basename="audit-log")


app_name = "api"
urlpatterns = [
    path("", include(router.urls)),

    path("health/", v1_views.HealthView.as_view(), name="health"),
    path("auth/login/", v1_views.LoginView.as_view(), name="auth-login"),
    path("bootstrap/", v1_views.BootstrapView.as_view(), name="bootstrap"),
    path("pay-status/", v1_views.PayStatusView.as_view(), name="pay-status"),
    path("profit-share-status/", v1_views.ProfitShareStatusView.as_view(), name="profit-share-status"),
]
