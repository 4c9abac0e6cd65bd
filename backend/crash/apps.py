from django.apps import AppConfig


class CrashConfig(AppConfig):
    name = "crash"
    verbose_name = "Dive Control crash engine"
