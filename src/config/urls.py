"""URL configuration for the HR Management System."""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from django.views.generic import RedirectView

admin.site.site_header = "HRMS - Administration"
admin.site.site_title = "HRMS"
admin.site.index_title = "Ressources humaines"

urlpatterns = [
    path("api/v1/", include("api.urls")),
    path("", RedirectView.as_view(url="/api/v1/", permanent=False)),
]

if getattr(settings, "ENABLE_DJANGO_ADMIN", False):
    urlpatterns.insert(0, path("admin/", admin.site.urls))

if settings.DEBUG:
    # Receipts, reimbursement proofs and photos
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
    if "debug_toolbar" in settings.INSTALLED_APPS:
        urlpatterns += [path("__debug__/", include("debug_toolbar.urls"))]
