import html
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from mapa.core.config import Settings
from mapa.models.domain import User

logger = logging.getLogger(__name__)

_BUTTON_STYLE = (
    "display: inline-block; background-color: #1E88E5; color: #ffffff; "
    "padding: 10px 20px; text-decoration: none; border-radius: 5px;"
)


def _html(title: str, paragraphs: list[str], link: Optional[str] = None, link_label: str = "") -> str:
    # paragraphs carry user-supplied names
    body = "".join(f"<p>{html.escape(p)}</p>" for p in paragraphs)
    button = (
        f'<p><a href="{html.escape(link)}" style="{_BUTTON_STYLE}">{html.escape(link_label)}</a></p>'
        if link
        else ""
    )
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f'<h2 style="color: #1E88E5;">{html.escape(title)}</h2>{body}{button}'
        "<p>Best regards,<br/>The MAPA AI Team</p></div>"
    )


class EmailSender:
    """Templated transactional mail over SMTP.

    Sending never raises: a missing configuration or a delivery error is
    logged and reported as ``False`` so account flows can carry on.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def configured(self) -> bool:
        return bool(self.settings.email_user and self.settings.email_app_password)

    def send(self, to: str, subject: str, text: str, html: Optional[str] = None) -> bool:
        if not self.configured:
            logger.error("Email credentials not set, cannot send %r to %s", subject, to)
            return False

        msg = EmailMessage()
        msg["From"] = f'"{self.settings.from_name}" <{self.settings.email_from}>'
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(text)
        msg.add_alternative(html or text, subtype="html")

        try:
            with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=30) as smtp:
                smtp.starttls()
                smtp.login(self.settings.email_user, self.settings.email_app_password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError):
            logger.exception("Error sending %r to %s", subject, to)
            return False
        logger.info("Email %r sent to %s", subject, to)
        return True

    def send_verification(self, user: User, token: str) -> bool:
        url = f"{self.settings.base_url}/verify-email?token={token}"
        intro = (
            "Thank you for registering with MAPA AI. Please click the link below to verify "
            "your email address. This link will expire in 48 hours."
        )
        outro = "If you did not create an account, please ignore this email."
        return self.send(
            to=user.email,
            subject="Verify Your MAPA AI Email Address",
            text=f"Hello {user.greeting_name},\n\n{intro}\n\n{url}\n\n{outro}\n\nBest regards,\nThe MAPA AI Team",
            html=_html(
                "Verify Your MAPA AI Email Address",
                [f"Hello {user.greeting_name},", intro, f"Or copy and paste this URL into your browser: {url}", outro],
                link=url,
                link_label="Verify Email",
            ),
        )

    def send_password_reset(self, user: User, token: str) -> bool:
        url = f"{self.settings.base_url}/reset-password?token={token}"
        intro = (
            "You requested a password reset for your MAPA AI account. Please click the link "
            "below to reset your password. This link will expire in 24 hours."
        )
        outro = "If you did not request this, please ignore this email and your password will remain unchanged."
        return self.send(
            to=user.email,
            subject="Reset Your MAPA AI Password",
            text=f"Hello {user.greeting_name},\n\n{intro}\n\n{url}\n\n{outro}\n\nBest regards,\nThe MAPA AI Team",
            html=_html(
                "Reset Your MAPA AI Password",
                [f"Hello {user.greeting_name},", intro, f"Or copy and paste this URL into your browser: {url}", outro],
                link=url,
                link_label="Reset Password",
            ),
        )

    def send_welcome(self, user: User) -> bool:
        url = f"{self.settings.base_url}/dashboard"
        intro = "Thank you for verifying your email address. Your MAPA AI account is now fully activated!"
        return self.send(
            to=user.email,
            subject="Welcome to MAPA AI!",
            text=(
                f"Hello {user.greeting_name},\n\n{intro}\n\n"
                "Start planning your Filipino travel adventures today.\n\nBest regards,\nThe MAPA AI Team"
            ),
            html=_html(
                "Welcome to MAPA AI!",
                [f"Hello {user.greeting_name},", intro, "Start planning your Filipino travel adventures today."],
                link=url,
                link_label="Go to Dashboard",
            ),
        )
