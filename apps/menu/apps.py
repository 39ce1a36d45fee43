"""
Menu app configuration.
"""

from django.apps import AppConfig


class MenuConfig(AppConfig):
    """Configuration for the menu app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.menu"
    verbose_name = "Menu"
