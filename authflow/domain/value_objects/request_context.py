"""Request context carrying the session principal through a use-case call."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

if TYPE_CHECKING:
    from authflow.domain.entities.user import User


@dataclass(frozen=True)
class RequestContext:
    """Immutable, request-scoped context passed explicitly to every use case.

    The transport layer builds one per incoming request and binds the
    authenticated user, if any, with `store_user_in_context`. The use cases
    only read it.
    """

    user: Optional[User] = None
    request_id: str = field(default_factory=lambda: uuid4().hex)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def __repr__(self) -> str:
        login = self.user.login if self.user is not None else None
        return f"RequestContext(request_id={self.request_id!r}, user={login!r})"


def store_user_in_context(ctx: RequestContext, user: User) -> RequestContext:
    """Returns a copy of `ctx` whose session principal is `user`."""
    return replace(ctx, user=user)
