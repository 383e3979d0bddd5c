"""
Inbound WhatsApp webhook.

Twilio posts form-encoded ``From`` and ``Body`` fields and expects a TwiML
document back. Plain Django view (not Django Ninja) so the reply is raw XML.
"""

from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from apps.core.logging import get_logger, mask_phone
from apps.messaging.services import build_bot_reply, render_twiml

logger = get_logger(__name__)

TWIML_CONTENT_TYPE = "text/xml; charset=utf-8"
ERROR_REPLY = "Ocorreu um erro. Tente novamente mais tarde."


@csrf_exempt
@require_POST
def whatsapp_webhook(request: HttpRequest) -> HttpResponse:
    """Answer a student's WhatsApp message."""
    sender = request.POST.get("From", "").strip()
    text = request.POST.get("Body", "").strip()

    if not sender or not text:
        logger.warning("whatsapp_webhook_invalid_request")
        return HttpResponse("Parâmetros inválidos.", status=400)

    try:
        reply = build_bot_reply(sender, text)
    except Exception:
        logger.exception("whatsapp_webhook_handler_error", phone=mask_phone(sender))
        return HttpResponse(render_twiml(ERROR_REPLY), content_type=TWIML_CONTENT_TYPE, status=500)

    return HttpResponse(render_twiml(reply), content_type=TWIML_CONTENT_TYPE)
