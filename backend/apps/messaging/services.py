"""
Messaging services - WhatsApp notifications, expiry reminders and the
inbound check-in bot.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from xml.sax.saxutils import escape

from django.utils import timezone

from apps.core.logging import get_logger, mask_phone
from apps.messaging.config import TwilioConfig
from apps.messaging.exceptions import MessagingError
from apps.messaging.twilio_client import SentMessage, send_whatsapp_message, strip_whatsapp_prefix
from apps.students.models import Enrollment, Modality, Student
from apps.students.services import record_check_in

logger = get_logger(__name__)

WHATSAPP_CHECKIN_SOURCE = "WhatsApp"

# Days before expiry -> reminder text
REMINDER_TEMPLATES: dict[int, str] = {
    10: (
        "Olá {student_name}! 👋 Sua matrícula na {org_name} está quase vencendo. "
        "Faltam 10 dias! Que tal já garantir sua renovação e não perder o ritmo? 💪"
    ),
    6: (
        "Olá {student_name}! Passando para lembrar que sua matrícula na {org_name} "
        "vence em 6 dias. Continue focado nos seus objetivos! 😉"
    ),
    3: (
        "Estamos na contagem regressiva, {student_name}! Sua matrícula na {org_name} "
        "vence em 3 dias. Não deixe para a última hora, renove e continue treinando com a gente. 🔥"
    ),
    1: (
        "Atenção, {student_name}! Sua matrícula na {org_name} vence amanhã. "
        "Renove hoje mesmo para não interromper seus treinos. Esperamos você! 👍"
    ),
}

REMINDER_DAYS = tuple(REMINDER_TEMPLATES)


def notify_student(config: TwilioConfig, to: str, message: str) -> SentMessage:
    """
    Send a free-form WhatsApp message.

    Raises:
        MessagingError: If Twilio is not configured or rejects the message
    """
    return send_whatsapp_message(config, to, message)


# --- Expiry reminders ---


@dataclass
class ReminderSummary:
    """Counts for one reminder run."""

    sent: int = 0
    failed: int = 0
    skipped: int = 0
    failures: list[int] = field(default_factory=list)


def render_reminder(days: int, student_name: str, org_name: str) -> str:
    return REMINDER_TEMPLATES[days].format(student_name=student_name, org_name=org_name)


def enrollments_expiring_on(target: date):
    return Enrollment.objects.filter(expiry_date=target).select_related(
        "student", "modality__organization"
    )


def send_expiry_reminders(config: TwilioConfig, today: date | None = None) -> ReminderSummary:
    """
    Remind students whose enrollment expires in 10, 6, 3 or 1 days.

    A failed message is logged and counted; the run continues with the next
    enrollment.

    Raises:
        MessagingNotConfigured: Before sending anything, if Twilio is not configured
    """
    config.require_configured()
    today = today or timezone.localdate()
    summary = ReminderSummary()

    for days in REMINDER_DAYS:
        target = today + timedelta(days=days)
        for enrollment in enrollments_expiring_on(target):
            student = enrollment.student
            org_name = enrollment.modality.organization.name
            if not (student.phone_number and student.name and org_name):
                summary.skipped += 1
                continue

            body = render_reminder(days, student.name, org_name)
            try:
                send_whatsapp_message(config, student.phone_number, body)
            except MessagingError as e:
                summary.failed += 1
                summary.failures.append(enrollment.id)
                logger.warning(
                    "expiry_reminder_failed",
                    enrollment_id=enrollment.id,
                    days=days,
                    to=mask_phone(student.phone_number),
                    error=str(e),
                )
                continue

            summary.sent += 1
            logger.info(
                "expiry_reminder_sent",
                enrollment_id=enrollment.id,
                student_id=student.id,
                days=days,
            )

    logger.info(
        "expiry_reminders_completed",
        sent=summary.sent,
        failed=summary.failed,
        skipped=summary.skipped,
    )
    return summary


# --- Inbound bot ---

UNKNOWN_NUMBER_REPLY = (
    "Olá! Não encontramos seu cadastro. Verifique o número ou contate a recepção."
)
NO_MODALITIES_REPLY = "Nenhuma modalidade encontrada no momento."
NO_APPOINTMENTS_REPLY = "Você não possui agendamentos futuros."
CHECKIN_CANCELLED_REPLY = "Ok, check-in cancelado."

GREETINGS = ("olá", "ola", "oi")


def build_menu(student_name: str) -> str:
    return (
        f"Olá, {student_name}! Como posso te ajudar?\n\n"
        "1. *Modalidades e Preços*\n"
        "2. *Meus Agendamentos*\n"
        "3. *Fazer Check-in*\n\n"
        "Responda com o número."
    )


def format_price(price: Decimal | None) -> str:
    """Brazilian currency format without thousands separator, e.g. 'R$ 89,90'."""
    if price is None:
        return "N/A"
    return "R$ " + f"{price:.2f}".replace(".", ",")


def find_student_by_phone(phone_number: str) -> Student | None:
    return (
        Student.objects.select_related("organization")
        .filter(phone_number=phone_number)
        .order_by("-created_at")
        .first()
    )


def _modalities_reply(student: Student) -> str:
    modalities = Modality.objects.filter(organization=student.organization).order_by("name")
    if not modalities:
        return NO_MODALITIES_REPLY
    lines = [f"*{m.name}*: {format_price(m.price)}" for m in modalities]
    return "Nossas modalidades e preços são:\n\n" + "\n".join(lines)


def _check_in_reply(student: Student) -> str:
    org = student.organization
    result = record_check_in(student, org, source=WHATSAPP_CHECKIN_SOURCE)
    if result.is_duplicate:
        return f"Você já fez check-in na {org.name} hoje."
    return f"Check-in na {org.name} realizado! Bom treino! 💪"


def build_bot_reply(phone_number: str, text: str) -> str:
    """
    Answer one inbound WhatsApp message.

    Options: greeting or 'menu' shows the menu, '1' lists modalities,
    '2' lists appointments, '3' asks for confirmation, 'sim' records the
    check-in and 'não' cancels it.
    """
    phone_number = strip_whatsapp_prefix(phone_number)
    student = find_student_by_phone(phone_number)
    if student is None:
        logger.info("whatsapp_bot_unknown_number", phone=mask_phone(phone_number))
        return UNKNOWN_NUMBER_REPLY

    body = text.strip().lower()
    menu = build_menu(student.name)

    if body == "menu" or any(greeting in body for greeting in GREETINGS):
        return menu
    if body.startswith("1"):
        return _modalities_reply(student)
    if body.startswith("2"):
        # Appointments are not tracked yet
        return NO_APPOINTMENTS_REPLY
    if body.startswith("3") or body == "check-in":
        return f"Confirma o check-in na {student.organization.name} hoje? (Sim/Não)"
    if body == "sim":
        return _check_in_reply(student)
    if body in ("não", "nao"):
        return CHECKIN_CANCELLED_REPLY

    return f'Desculpe, não entendi "{text.strip()}". Envie "menu" para ver as opções.\n\n{menu}'


def render_twiml(message: str) -> str:
    """Wrap a reply in a TwiML <Message> document."""
    escaped = escape(message, {'"': "&quot;", "'": "&apos;"})
    return f'<?xml version="1.0" encoding="UTF-8"?><Response><Message>{escaped}</Message></Response>'
