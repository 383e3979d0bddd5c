"""
URL configuration for the backend.
"""

from django.contrib import admin
from django.urls import path

from apps.billing.webhooks import stripe_webhook
from apps.messaging.webhooks import whatsapp_webhook
from apps.partners.webhooks import partner_checkin_webhook

from .api import api

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/v1/", api.urls),
    # Webhooks - outside Django Ninja for raw request handling
    path("webhooks/partners/checkin/", partner_checkin_webhook, name="partner-checkin-webhook"),
    path("webhooks/stripe/", stripe_webhook, name="stripe-webhook"),
    path("webhooks/whatsapp/", whatsapp_webhook, name="whatsapp-webhook"),
]
