"""Outbound notification interface."""

from abc import ABC, abstractmethod

from authflow.domain.value_objects.email_message import EmailMessage
from authflow.domain.value_objects.request_context import RequestContext


class INotifier(ABC):
    """Delivers templated messages to users.

    Implementations raise `EmailServiceError` (or a subclass) when a message
    cannot be rendered or delivered; the use cases decide whether that error
    is fatal.
    """

    @abstractmethod
    async def send(self, ctx: RequestContext, message: EmailMessage) -> None:
        """Sends `message` on behalf of the request described by `ctx`."""
        raise NotImplementedError
