"""Value objects used by the account use cases."""

from .email_message import EmailMessage
from .request_context import RequestContext, store_user_in_context
from .user_input import UserInput

__all__ = ["EmailMessage", "RequestContext", "UserInput", "store_user_in_context"]
