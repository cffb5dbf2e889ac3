"""Outbound email value object handed to the notifier."""

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class EmailMessage:
    """A templated email addressed to a single recipient.

    Attributes:
        recipient: Destination email address.
        subject: Subject line.
        template: File name of the template under the email templates directory.
        context: Variables made available to the template.
    """

    recipient: str
    subject: str
    template: str
    context: Mapping[str, Any] = field(default_factory=dict)
