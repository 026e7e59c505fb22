from django.contrib import admin
from django.urls import include, path

from bloodaid.views import health

urlpatterns = [
    path('', health, name='health'),
    path('admin/', admin.site.urls),
    path('api/', include('bloodaid.urls')),
]
