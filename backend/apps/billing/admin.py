"""Admin configuration for billing app."""

from django.contrib import admin

from apps.billing.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ["name", "organization", "price", "recurring_interval", "modality", "is_archived"]
    list_filter = ["is_archived", "product_type", "recurring_interval"]
    search_fields = ["name", "stripe_product_id", "stripe_price_id"]
    readonly_fields = ["stripe_product_id", "stripe_price_id", "created_at", "updated_at"]
