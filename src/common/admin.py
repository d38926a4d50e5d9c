from django.contrib import admin
from solo.admin import SingletonModelAdmin

from . import models


@admin.register(models.SiteSettings)
class SiteSettingsAdmin(SingletonModelAdmin):  # type: ignore[misc]
    list_display = ["__str__", "live_emails", "frontend_base_url", "internal_catchall_email"]


@admin.register(models.EmailLog)
class EmailLogAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["to", "subject", "sent_at"]
    search_fields = ["to", "subject"]
    readonly_fields = ["to", "subject", "sent_at", "body", "html"]
    exclude = ["compressed_body", "compressed_html"]
