# plagdetect_project/urls.py
from django.urls import path, include
from django.contrib import admin
from django.shortcuts import redirect


def home(request):
    # Signed-in users go straight to the upload screen
    if request.user.is_authenticated:
        return redirect('dashboard:upload')
    return redirect('dashboard:login')


urlpatterns = [
    path("", home, name="root"),
    path("admin/", admin.site.urls),
    path("api/", include("detector.urls")),
    path("dashboard/", include("dashboard.urls")),
]
