import asyncio
import smtplib
from email.message import EmailMessage
from typing import Optional

from cineverse.domain.exceptions import EmailDeliveryError
from cineverse.domain.models.verification import VerificationPurpose
from cineverse.domain.ports.services.email_sender import EmailSender
from cineverse.domain.ports.services.logger import LoggerPort
from cineverse.infrastructure.config.settings import EmailSettings
from cineverse.infrastructure.logging.std_logger_adapter import StdLoggerAdapter

_SUBJECTS = {
    VerificationPurpose.REGISTRATION: "Verify your CineVerse account",
    VerificationPurpose.PASSWORD_RESET: "Reset your CineVerse password",
}


class SmtpEmailSender(EmailSender):
    """Sends one-time codes over SMTP; without a configured host the code is only logged."""

    def __init__(self, settings: EmailSettings, logger: Optional[LoggerPort] = None):
        self.settings = settings
        self.logger = logger or StdLoggerAdapter(__name__)

    def _build_message(self, email: str, code: str, purpose: VerificationPurpose) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = _SUBJECTS[purpose]
        message["From"] = self.settings.sender
        message["To"] = email
        message.set_content(
            f"Your CineVerse verification code is {code}.\n\n"
            "It expires in 5 minutes. If you did not request it, you can ignore this email."
        )
        return message

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.settings.host, self.settings.port, timeout=self.settings.timeout_seconds) as smtp:
            if self.settings.use_tls:
                smtp.starttls()
            if self.settings.username and self.settings.password:
                smtp.login(self.settings.username, self.settings.password)
            smtp.send_message(message)

    async def send_verification_code(self, email: str, code: str, purpose: VerificationPurpose) -> None:
        if not self.settings.configured:
            self.logger.warning(f"SMTP not configured; {purpose.value} code for {email}: {code}")
            return

        message = self._build_message(email, code, purpose)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as exc:
            self.logger.error(f"Failed to send {purpose.value} email to {email}: {type(exc).__name__}")
            raise EmailDeliveryError("Failed to send verification email", detail=type(exc).__name__) from exc
        self.logger.info(f"Sent {purpose.value} code to {email}")
