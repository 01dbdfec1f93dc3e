import logging
import smtplib
from datetime import date
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from coachbook.core.config import settings
from coachbook.models.consultation import ConsultationCreate
from coachbook.services.timezone_service import calculate_end_time, format_for_display, friendly_name

logger = logging.getLogger(__name__)


def _send_email_sync(to_email: str, subject: str, html_body: str) -> None:
    """Send email via SMTP (blocking). Use from background task."""
    if not settings.email_enabled:
        logger.debug("Email disabled (SMTP not configured), skipping send")
        return
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.from_name} <{settings.from_email}>"
    msg["To"] = to_email
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
            server.starttls()
            server.login(settings.smtp_user, settings.smtp_password)
            server.sendmail(settings.from_email, [to_email], msg.as_string())
        logger.info("Email sent to %s", to_email)
    except Exception as e:
        logger.exception("Failed to send email to %s: %s", to_email, e)


def _html_escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def build_booking_confirmation_html(booking: ConsultationCreate) -> str:
    """HTML body for a consultation confirmation."""
    date_str = date.fromisoformat(booking.date_booked).strftime("%A, %B %d, %Y")
    end = booking.time_slot_end or calculate_end_time(booking.time_slot_start, settings.slot_duration_minutes)
    slot_display = (
        f"{format_for_display(booking.time_slot_start)} – {format_for_display(end)}"
        f" ({friendly_name(settings.business_timezone)})"
    )
    local_section = ""
    if booking.user_local_time and booking.user_timezone:
        local_display = _html_escape(f"{booking.user_local_time} ({friendly_name(booking.user_timezone)})")
        local_section = f'<p style="margin:4px 0 0 0;font-size:14px;color:#6b7280;">Your time: {local_display}</p>'
    contact_line = " &nbsp;·&nbsp; ".join(
        _html_escape(v) for v in (settings.contact_email, settings.contact_phone) if v
    )
    return f"""
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>Consultation Confirmed</title>
</head>
<body style="margin:0;padding:0;font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,sans-serif;background-color:#f3f4f6;">
  <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="background-color:#f3f4f6;">
    <tr>
      <td align="center" style="padding:40px 16px;">
        <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="max-width:560px;background:#ffffff;border-radius:12px;">
          <tr>
            <td style="padding:32px;">
              <h1 style="margin:0 0 8px 0;font-size:22px;color:#111827;">Your consultation is booked!</h1>
              <p style="margin:0 0 24px 0;font-size:15px;color:#6b7280;">Hi {_html_escape(booking.first_name) or 'there'}, here are your details.</p>
              <p style="margin:0 0 4px 0;font-size:12px;text-transform:uppercase;color:#6b7280;">{_html_escape(booking.booking_type.value)}</p>
              <p style="margin:0;font-size:16px;font-weight:600;color:#111827;">{date_str}</p>
              <p style="margin:4px 0 0 0;font-size:16px;font-weight:600;color:#111827;">{slot_display}</p>
              {local_section}
              <p style="margin:24px 0 0 0;font-size:14px;color:#374151;">If you need to reschedule or cancel, please contact us.</p>
            </td>
          </tr>
          <tr>
            <td style="padding:24px 32px;background:#f9fafb;border-top:1px solid #e5e7eb;">
              <p style="margin:0 0 4px 0;font-size:13px;font-weight:600;color:#111827;">{_html_escape(settings.site_name)}</p>
              <p style="margin:0;font-size:13px;color:#6b7280;">{contact_line}</p>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""


def send_booking_confirmation_email(booking: ConsultationCreate) -> None:
    """Compose and send the consultation confirmation (call from background task)."""
    subject = f"{settings.site_name} – Consultation Confirmed"
    _send_email_sync(booking.email.strip(), subject, build_booking_confirmation_html(booking))
