from django.urls import path, include

urlpatterns = [
    path('api/crash/', include('crash.urls')),
]
