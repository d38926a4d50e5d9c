"""Admin interface for accounts app."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from accounts.models import TicketingUser


@admin.register(TicketingUser)
class TicketingUserAdmin(UserAdmin):  # type: ignore[type-arg]
    list_display = ["email", "first_name", "last_name", "role", "is_active", "date_joined"]
    list_filter = ["role", "is_active", "is_superuser"]
    search_fields = ["email", "first_name", "last_name"]
    ordering = ["email"]
    fieldsets = (
        *(UserAdmin.fieldsets or ()),
        ("Marketplace", {"fields": ("role",)}),
    )
