# labhub/services/mail_service.py
from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Iterable, Optional

from labhub.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

SUBMISSION_SUBJECT = "Project Submission Confirmation"


class MailSender:
    """
    Best-effort SMTP delivery. Callers never see a failure: it is logged and
    send() returns False.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def send(self, subject: str, body: str, to: Iterable[str]) -> bool:
        recipients = [addr for addr in to if addr]
        if not recipients:
            return False

        s = self.settings
        if not s.mail_enabled:
            logger.info("[mail] disabled; would send %r to %s", subject, recipients)
            return False

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = s.mail_from or s.smtp_username or ""
        msg["To"] = ", ".join(recipients)
        msg.set_content(body)

        try:
            with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=10) as smtp:
                smtp.starttls()
                if s.smtp_username:
                    smtp.login(s.smtp_username, s.smtp_password or "")
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("[mail] failed to send %r to %s: %s", subject, recipients, exc)
            return False

        logger.info("[mail] sent %r to %s", subject, recipients)
        return True

    def send_submission_confirmation(self, *, name: str, email: str, project_title: str) -> bool:
        body = (
            f"Hi {name},\n\n"
            f"Thank you for submitting your project idea \"{project_title}\" to the Robotics Lab. "
            "We have received it and will review it shortly.\n\n"
            "Best regards,\nThe Robotics Lab Team"
        )
        return self.send(SUBMISSION_SUBJECT, body, [email])
