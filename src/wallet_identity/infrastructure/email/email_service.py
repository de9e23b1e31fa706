import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from wallet_config.settings import Settings

logger = logging.getLogger(__name__)

WELCOME_SUBJECT = "Welcome to Wallet!"

WELCOME_TEXT = """Hello {name},

We're excited to have you on board. Thank you for signing up!

If you have any questions or need assistance, feel free to reach out to
our support team.

-- The Wallet Team
"""

WELCOME_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: Arial, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px;">
        <h2 style="color: #111827; margin-top: 0;">Welcome to Wallet!</h2>
        <p style="color: #374151; line-height: 1.6;">Hello {name},</p>
        <p style="color: #374151; line-height: 1.6;">We're excited to have you on board. Thank you for signing up!</p>
        <p style="color: #374151; line-height: 1.6;">If you have any questions or need assistance, feel free to reach out to our support team.</p>
        <p style="color: #9ca3af; font-size: 13px; margin-top: 40px;">The Wallet Team</p>
    </div>
</body>
</html>
"""

VERIFICATION_SUBJECT = "Verify Your Email Address - Wallet"

VERIFICATION_TEXT = """Hello {name},

Your Wallet verification code is:

    {code}

The code is valid for {ttl_minutes} minutes.

If you didn't create an account, you can safely ignore this email.

-- The Wallet Team
"""

VERIFICATION_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: Arial, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px;">
        <h2 style="color: #111827; margin-top: 0;">Email Verification</h2>
        <p style="color: #374151; line-height: 1.6;">Hello {name},</p>
        <p style="color: #374151; line-height: 1.6;">Enter this code in the app to verify your email address:</p>
        <p style="margin: 30px 0; text-align: center; font-size: 32px; font-weight: 700; letter-spacing: 8px; color: #111827;">{code}</p>
        <p style="color: #6b7280; font-size: 14px;">This code expires in {ttl_minutes} minutes.</p>
        <p style="color: #9ca3af; font-size: 13px; margin-top: 40px;">If you didn't create an account, you can safely ignore this email.</p>
    </div>
</body>
</html>
"""


class EmailService:
    def __init__(self, settings: Settings):
        self._settings = settings

    def _create_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self._settings.smtp_from_name} <{self._settings.smtp_from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain"))
        if html_body:
            msg.attach(MIMEText(html_body, "html"))

        return msg

    def _send_email(self, to_email: str, message: MIMEMultipart) -> None:
        if not self._settings.smtp_host:
            msg = "SMTP host not configured"
            raise RuntimeError(msg)

        smtp_password = (
            self._settings.smtp_password.get_secret_value()
            if self._settings.smtp_password
            else ""
        )

        try:
            if self._settings.smtp_use_tls and not self._settings.smtp_starttls:
                # Implicit TLS (port 465)
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                    context=context,
                ) as server:
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)
            else:
                # STARTTLS (port 587) or plain
                with smtplib.SMTP(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                ) as server:
                    if self._settings.smtp_starttls:
                        context = ssl.create_default_context()
                        server.starttls(context=context)
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)

            logger.info("Email sent to %s", to_email)

        except Exception as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            raise

    def send_welcome_email(self, to_email: str, name: str | None = None) -> None:
        if not self._settings.smtp_enabled:
            logger.warning("SMTP disabled, skipping welcome email to %s", to_email)
            return

        name = name or "there"
        message = self._create_message(
            to_email=to_email,
            subject=WELCOME_SUBJECT,
            text_body=WELCOME_TEXT.format(name=name),
            html_body=WELCOME_HTML.format(name=name),
        )

        self._send_email(to_email, message)

    def send_verification_code_email(
        self,
        to_email: str,
        code: str,
        name: str | None = None,
    ) -> None:
        if not self._settings.smtp_enabled:
            # Development mode: the code is only visible in the log
            logger.warning(
                "SMTP disabled, skipping verification email to %s (code: %s)",
                to_email,
                code,
            )
            return

        values = {
            "name": name or "there",
            "code": code,
            "ttl_minutes": self._settings.verification_code_ttl_minutes,
        }
        message = self._create_message(
            to_email=to_email,
            subject=VERIFICATION_SUBJECT,
            text_body=VERIFICATION_TEXT.format(**values),
            html_body=VERIFICATION_HTML.format(**values),
        )

        self._send_email(to_email, message)
