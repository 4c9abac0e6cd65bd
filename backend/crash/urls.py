from django.urls import path
from . import views

urlpatterns = [
    path("rules/", views.RulesView.as_view(), name="crash-rules"),
]
