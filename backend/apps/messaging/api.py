"""
Messaging API endpoints.
"""

from django.http import HttpRequest
from ninja import Router
from ninja.errors import HttpError

from apps.core.logging import get_logger, mask_phone
from apps.core.schemas import ErrorResponse
from apps.core.security import SessionJWTAuth
from apps.messaging.config import TwilioConfig
from apps.messaging.exceptions import MessagingError, MessagingNotConfigured
from apps.messaging.schemas import NotifyRequest, NotifyResponse
from apps.messaging.services import notify_student

logger = get_logger(__name__)

router = Router(tags=["messaging"])
session_auth = SessionJWTAuth()


@router.post(
    "/notify",
    response={200: NotifyResponse, 401: ErrorResponse, 403: ErrorResponse, 500: ErrorResponse},
    auth=session_auth,
    operation_id="notifyStudent",
    summary="Send a WhatsApp message to a student",
)
def notify(request: HttpRequest, payload: NotifyRequest) -> NotifyResponse:
    request.auth.require_organization()

    try:
        notify_student(TwilioConfig.from_settings(), payload.to, payload.message)
    except MessagingNotConfigured:
        logger.error("twilio_not_configured")
        raise HttpError(500, "As variáveis de ambiente do Twilio não estão configuradas.")
    except MessagingError as e:
        logger.warning("notify_student_failed", to=mask_phone(payload.to), error=str(e))
        raise HttpError(500, "Falha no serviço de mensagens.")

    return NotifyResponse(success=True, message=f"Mensagem enviada para {payload.to}")
