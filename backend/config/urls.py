"""
URL configuration for the tailoring management backend.

Every app mounts its function views under /api/v1/.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

admin.site.site_header = "Tailoring Management Admin Panel"
admin.site.site_title = "Tailoring Management Admin Portal"
admin.site.index_title = "Welcome to the Tailoring Management Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('backend.core.urls')),
    path('api/v1/', include('backend.parties.urls')),
    path('api/v1/', include('backend.employees.urls')),
    path('api/v1/', include('backend.inventory.urls')),
    path('api/v1/', include('backend.orders.urls')),
    path('api/v1/', include('backend.purchasing.urls')),
    path('api/v1/', include('backend.communications.urls')),
    path('api/v1/', include('backend.documents.urls')),
    path('api/v1/', include('backend.reports.urls')),
    re_path(r'^media/(?P<path>.*)$', serve, {'document_root': settings.MEDIA_ROOT}),
]
