"""
Django Ninja API configuration.
"""

from django.http import HttpRequest
from ninja import NinjaAPI

from apps.billing.api import router as billing_router
from apps.messaging.api import router as messaging_router

api = NinjaAPI(
    title="GymHub API",
    version="1.0.0",
    description="Gym management API: Stripe Connect billing and WhatsApp messaging.",
    openapi_extra={
        "info": {
            "contact": {"name": "API Support"},
        },
        "tags": [
            {
                "name": "billing",
                "description": "Payout account onboarding, products, payment links and fee estimates",
            },
            {
                "name": "messaging",
                "description": "Outbound WhatsApp messages to students",
            },
            {
                "name": "health",
                "description": "Service health and readiness checks",
            },
        ],
        "components": {
            "securitySchemes": {
                "bearerAuth": {
                    "type": "http",
                    "scheme": "bearer",
                    "bearerFormat": "JWT",
                    "description": "Session JWT issued by the auth provider. Include as: Authorization: Bearer <session_jwt>",
                }
            }
        },
    },
)

# Register routers
api.add_router("/billing", billing_router)
api.add_router("/messaging", messaging_router)


@api.get("/health", tags=["health"], operation_id="healthCheck", summary="Health check")
def health_check(request: HttpRequest) -> dict:
    """Health check endpoint for load balancer."""
    return {"status": "ok"}
