"""
Outgoing mail.

Every message is rendered from one of the templates below and sent through a
dispatcher whose send() never raises: delivery problems are logged and
reported as False.
"""

import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Dict
from myhome.core.config import settings
from myhome.models.security_token import SecurityToken
from myhome.models.user import User

logger = logging.getLogger(__name__)

PASSWORD_RESET_TEMPLATE = "password_reset"
PASSWORD_CHANGED_TEMPLATE = "password_changed"
ACCOUNT_CREATED_TEMPLATE = "account_created"
ACCOUNT_CONFIRMED_TEMPLATE = "account_confirmed"

MAIL_TEMPLATES: Dict[str, str] = {
    PASSWORD_RESET_TEMPLATE: (
        "<p>Hello {username},</p>"
        "<p>Use the code below to set a new password:</p>"
        "<p><b>{recover_code}</b></p>"
    ),
    PASSWORD_CHANGED_TEMPLATE: (
        "<p>Hello {username},</p>"
        "<p>Your password has been changed.</p>"
    ),
    ACCOUNT_CREATED_TEMPLATE: (
        "<p>Welcome {username}!</p>"
        "<p>Please confirm your email address: "
        "<a href=\"{email_confirm_link}\">{email_confirm_link}</a></p>"
    ),
    ACCOUNT_CONFIRMED_TEMPLATE: (
        "<p>Hello {username},</p>"
        "<p>Your account is now confirmed.</p>"
    ),
}


def render_template(template_name: str, model: Dict[str, Any]) -> str:
    """Fill a template with HTML-escaped model values"""
    template = MAIL_TEMPLATES[template_name]
    return template.format(**{key: html.escape(str(value)) for key, value in model.items()})


def build_email_confirm_link(base_url: str, user: User, token: SecurityToken) -> str:
    return f"{base_url.rstrip('/')}/users/{user.user_id}/email-confirm/{token.token}"


class MailService:
    """
    Base class for mail dispatchers.

    Subclasses only implement send(); the notification helpers build the
    template model for each message the application sends.
    """

    def send(self, email_to: str, subject: str, template_name: str, model: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def send_password_recover_code(self, user: User, recover_code: str) -> bool:
        model = {"username": user.name, "recover_code": recover_code}
        return self.send(user.email, settings.MAIL_SUBJECT_PASSWORD_RECOVER, PASSWORD_RESET_TEMPLATE, model)

    def send_password_successfully_changed(self, user: User) -> bool:
        model = {"username": user.name}
        return self.send(user.email, settings.MAIL_SUBJECT_PASSWORD_CHANGED, PASSWORD_CHANGED_TEMPLATE, model)

    def send_account_created(self, user: User, email_confirm_link: str) -> bool:
        model = {"username": user.name, "email_confirm_link": email_confirm_link}
        return self.send(user.email, settings.MAIL_SUBJECT_ACCOUNT_CREATED, ACCOUNT_CREATED_TEMPLATE, model)

    def send_account_confirmed(self, user: User) -> bool:
        model = {"username": user.name}
        return self.send(user.email, settings.MAIL_SUBJECT_ACCOUNT_CONFIRMED, ACCOUNT_CONFIRMED_TEMPLATE, model)


class SmtpMailService(MailService):
    """Sends HTML mail through the configured SMTP server"""

    def send(self, email_to: str, subject: str, template_name: str, model: Dict[str, Any]) -> bool:
        try:
            body = render_template(template_name, model)
            message = MIMEMultipart("alternative")
            message["Subject"] = subject
            message["From"] = settings.MAIL_FROM
            message["To"] = email_to
            message.attach(MIMEText(body, "html", "utf-8"))

            with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as server:
                if settings.SMTP_USE_TLS:
                    server.starttls()
                if settings.SMTP_USERNAME and settings.SMTP_PASSWORD:
                    server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
                server.sendmail(settings.MAIL_FROM, [email_to], message.as_string())
        except (smtplib.SMTPException, OSError, KeyError) as e:
            logger.error(f"Mail send error! template={template_name} to={email_to}: {str(e)}")
            return False
        return True


class DevMailService(MailService):
    """Logs messages instead of sending them - used for local development"""

    def send(self, email_to: str, subject: str, template_name: str, model: Dict[str, Any]) -> bool:
        logger.info(f"[dev mail] to={email_to} subject={subject!r} template={template_name} model={model}")
        return True


def get_mail_service() -> MailService:
    """Dependency returning the dispatcher selected by MAIL_DEV_MODE"""
    if settings.MAIL_DEV_MODE:
        return DevMailService()
    return SmtpMailService()
