from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    # JSON endpoints for documents, payments, budgets, reports and the portal
    path("api/", include("erp_core.urls")),
]
