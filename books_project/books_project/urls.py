from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    # JSON API for bills, payments, chart of accounts and locks
    path("api/", include("books_core.urls")),
]
