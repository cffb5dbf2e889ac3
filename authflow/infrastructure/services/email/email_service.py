"""Email notifier for account lifecycle messages.

This module renders the activation, password reset and new-password emails
with Jinja2 and delivers them through FastMail. In test mode the rendered
message is logged instead of sent.
"""

from typing import Any, Mapping, Optional

import structlog
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from jinja2 import Environment, FileSystemLoader, TemplateError, TemplateNotFound

from authflow.core.config.settings import settings
from authflow.core.exceptions import EmailServiceError, TemplateRenderError
from authflow.core.logging import mask_email
from authflow.domain.interfaces.notifier import INotifier
from authflow.domain.value_objects import EmailMessage, RequestContext

logger = structlog.get_logger(__name__)


class EmailNotifier(INotifier):
    """Infrastructure notifier that renders and sends HTML emails.

    Attributes:
        jinja_env: Jinja2 environment loading templates from EMAIL_TEMPLATES_DIR
        fastmail: FastMail client, or None in test mode
    """

    def __init__(
        self,
        fastmail: Optional[FastMail] = None,
        test_mode: Optional[bool] = None,
        templates_dir: Optional[str] = None,
    ):
        """Initialize the notifier.

        Args:
            fastmail: Preconfigured FastMail client. Built from settings when omitted.
            test_mode: Overrides settings.EMAIL_TEST_MODE.
            templates_dir: Overrides settings.EMAIL_TEMPLATES_DIR.
        """
        self._test_mode = settings.EMAIL_TEST_MODE if test_mode is None else test_mode
        self.jinja_env = Environment(
            loader=FileSystemLoader(templates_dir or settings.EMAIL_TEMPLATES_DIR),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.fastmail = fastmail
        if self.fastmail is None and not self._test_mode:
            self.fastmail = self._build_fastmail()

        logger.info(
            "EmailNotifier initialized",
            test_mode=self._test_mode,
            smtp_configured=self.fastmail is not None,
        )

    def is_test_mode(self) -> bool:
        return self._test_mode

    async def send(self, ctx: RequestContext, message: EmailMessage) -> None:
        """Render `message` and deliver it.

        Raises:
            TemplateRenderError: If the template is missing or fails to render
            EmailServiceError: If delivery fails
        """
        log = logger.bind(request_id=ctx.request_id, template=message.template)
        body = self.render(message.template, message.context)

        if self._test_mode:
            log.info(
                "Email sent in test mode",
                to_email=mask_email(message.recipient),
                subject=message.subject,
                html_length=len(body),
            )
            return

        if self.fastmail is None:
            raise EmailServiceError("FastMail not configured for production mode")

        schema = MessageSchema(
            subject=message.subject,
            recipients=[message.recipient],
            body=body,
            subtype=MessageType.html,
        )
        try:
            await self.fastmail.send_message(schema)
        except Exception as e:
            log.error(
                "Failed to send email",
                to_email=mask_email(message.recipient),
                subject=message.subject,
                error=str(e),
            )
            raise EmailServiceError(f"Failed to send email: {e}") from e

        log.info("Email sent successfully", to_email=mask_email(message.recipient))

    def render(self, template_name: str, context: Mapping[str, Any]) -> str:
        """Render an email template, adding `app_name` to its variables.

        Raises:
            TemplateRenderError: If the template is missing or fails to render
        """
        variables = {"app_name": settings.PROJECT_NAME, **context}
        try:
            template = self.jinja_env.get_template(template_name)
            return template.render(**variables)
        except TemplateNotFound as e:
            logger.error("Template not found", template=template_name)
            raise TemplateRenderError(f"Template file not found: {template_name}") from e
        except TemplateError as e:
            logger.error("Template rendering failed", template=template_name, error=str(e))
            raise TemplateRenderError(f"Template rendering failed: {e}") from e

    @staticmethod
    def _build_fastmail() -> FastMail:
        try:
            settings.validate_smtp_config()
        except ValueError as e:
            logger.warning("Email configuration validation warning", error=str(e))

        password = settings.EMAIL_SMTP_PASSWORD
        try:
            config = ConnectionConfig(
                MAIL_USERNAME=settings.EMAIL_SMTP_USERNAME or "",
                MAIL_PASSWORD=password.get_secret_value() if password else "",
                MAIL_FROM=settings.EMAIL_FROM_EMAIL,
                MAIL_PORT=settings.EMAIL_SMTP_PORT,
                MAIL_SERVER=settings.EMAIL_SMTP_HOST,
                MAIL_FROM_NAME=settings.EMAIL_FROM_NAME,
                MAIL_STARTTLS=settings.EMAIL_SMTP_USE_TLS,
                MAIL_SSL_TLS=settings.EMAIL_SMTP_USE_SSL,
                USE_CREDENTIALS=bool(settings.EMAIL_SMTP_USERNAME and password),
                VALIDATE_CERTS=True,
            )
        except ValueError as e:
            logger.error("Failed to configure FastMail", error=str(e))
            raise EmailServiceError(f"Failed to configure email service: {e}") from e

        logger.info("FastMail configured for SMTP delivery", host=settings.EMAIL_SMTP_HOST)
        return FastMail(config)
