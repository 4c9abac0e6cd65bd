from django.urls import path
from .consumers import DiveConsumer

websocket_urlpatterns = [
    path("ws/dive/", DiveConsumer.as_asgi()),
]
