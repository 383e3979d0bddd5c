"""Admin configuration for organizations app."""

from django.contrib import admin

from apps.organizations.models import Organization


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = [
        "name",
        "subscription_status",
        "stripe_account_status",
        "gympass_integration_code",
        "totalpass_integration_code",
        "created_at",
    ]
    list_filter = ["subscription_status", "stripe_account_status"]
    search_fields = ["name", "stripe_account_id"]
    readonly_fields = ["created_at", "updated_at"]
