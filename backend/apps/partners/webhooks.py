"""
Partner check-in webhook handler.

Receives check-in notifications from Gympass/Wellhub and TotalPass. This is
a plain Django view (not Django Ninja) because the signature covers the raw
request body.
"""

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from apps.core.logging import get_logger
from apps.partners.config import PartnerConfig
from apps.partners.exceptions import (
    InvalidPartnerPayload,
    OrganizationNotFound,
    PartnerSecretNotConfigured,
    SignatureInvalid,
    UnknownPartner,
)
from apps.partners.services import process_partner_checkin

logger = get_logger(__name__)


@csrf_exempt
@require_POST
def partner_checkin_webhook(request: HttpRequest) -> JsonResponse:
    """
    Record a partner check-in.

    Partners retry or alert on anything but 2xx, so a same-day duplicate is
    answered with the normal success body.
    """
    config = PartnerConfig.from_settings()

    try:
        outcome = process_partner_checkin(request.body, request.headers, config)
    except UnknownPartner:
        logger.warning("partner_webhook_unknown_partner")
        return JsonResponse({"error": "Parceiro desconhecido."}, status=400)
    except PartnerSecretNotConfigured as e:
        logger.error("partner_webhook_secret_not_configured", error=str(e))
        return JsonResponse(
            {"error": "Configuração interna do servidor incompleta."}, status=500
        )
    except SignatureInvalid as e:
        logger.warning("partner_webhook_invalid_signature", error=str(e))
        return JsonResponse({"error": "Assinatura inválida."}, status=401)
    except InvalidPartnerPayload as e:
        logger.warning("partner_webhook_invalid_payload", error=str(e))
        return JsonResponse({"error": "Payload inválido."}, status=400)
    except OrganizationNotFound as e:
        logger.warning(
            "partner_webhook_organization_not_found",
            partner=e.partner,
            gym_identifier=str(e.gym_identifier),
        )
        return JsonResponse(
            {"success": False, "message": "Organização não encontrada ou código inválido."},
            status=404,
        )
    except Exception:
        logger.exception("partner_webhook_handler_error")
        return JsonResponse({"error": "Erro interno ao processar o check-in."}, status=500)

    logger.info(
        "partner_checkin_processed",
        partner=outcome.partner.value,
        student_id=outcome.student.id,
        student_created=outcome.student_created,
        duplicate=outcome.check_in.is_duplicate,
        **{"organization.id": str(outcome.organization.id)},
    )
    return JsonResponse({"status": "success", "message": outcome.message}, status=200)
