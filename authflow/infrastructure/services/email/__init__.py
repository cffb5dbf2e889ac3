from authflow.infrastructure.services.email.email_service import EmailNotifier

__all__ = ["EmailNotifier"]
