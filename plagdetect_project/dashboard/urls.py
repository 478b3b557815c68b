from django.urls import path
from .views import (
    DashboardLoginView, DashboardHomeView, SignUpView, CustomLogoutView,
    UploadView, AnalysisView
)

app_name = "dashboard"

urlpatterns = [
    path("", DashboardHomeView.as_view(), name="home"),
    path("login/", DashboardLoginView.as_view(), name="login"),
    path("signup/", SignUpView.as_view(), name="signup"),
    path("logout/", CustomLogoutView.as_view(), name="logout"),
    path("upload/", UploadView.as_view(), name="upload"),
    path("analysis/<uuid:document_id>/", AnalysisView.as_view(), name="analysis"),
]
