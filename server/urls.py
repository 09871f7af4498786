"""Root URL configuration.

Only the admin is routed here; the HTTP API lives outside this project
and calls into the ``logic`` packages of each app.
"""

from django.contrib import admin
from django.urls import path

urlpatterns = [
    path('admin/', admin.site.urls),
]
