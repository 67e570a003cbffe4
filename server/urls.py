"""Root URL configuration.

The JSON API is mounted at the site root; the Django admin lives
under ``/admin/``.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('server.apps.accounts.urls')),
    path('', include('server.apps.files.urls')),
    path('', include('server.apps.languages.urls')),
]
