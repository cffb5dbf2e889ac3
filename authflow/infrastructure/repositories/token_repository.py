"""Token Repository implementation using SQLAlchemy.

Activation and reset-password tokens share one table and are told apart by
their `kind`. Tokens are only ever inserted and deleted.
"""

from typing import List, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from authflow.core.exceptions import DatabaseError
from authflow.domain.entities.token import Token, TokenFilter
from authflow.domain.interfaces.repositories import ITokenRepository

logger = get_logger(__name__)


class TokenRepository(ITokenRepository):
    """SQLAlchemy implementation of ITokenRepository."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def store(self, token: Token) -> None:
        self.db_session.add(token)
        try:
            await self.db_session.commit()
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error(
                "Error storing token",
                user_id=token.user_id,
                kind=token.kind.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DatabaseError("Token could not be stored") from e

        await self.db_session.refresh(token)
        logger.debug("Token stored", token_id=token.id, user_id=token.user_id, kind=token.kind.value)

    async def fetch(self, token_filter: TokenFilter) -> List[Token]:
        """Return the tokens matching every set field of the filter, oldest first."""
        statement = select(Token)
        if token_filter.user_id is not None:
            statement = statement.where(Token.user_id == token_filter.user_id)
        if token_filter.value is not None:
            statement = statement.where(Token.value == token_filter.value)
        if token_filter.kind is not None:
            statement = statement.where(Token.kind == token_filter.kind)
        statement = statement.order_by(Token.created_at, Token.id)

        try:
            result = await self.db_session.execute(statement)
        except SQLAlchemyError as e:
            logger.error("Error fetching tokens", error=str(e), error_type=type(e).__name__)
            raise DatabaseError() from e
        return list(result.scalars().all())

    async def delete(self, ids: Sequence[int]) -> List[Token]:
        """Delete the tokens with the given ids and return the ones that existed.

        Unknown ids are ignored, so deleting an empty or already-deleted set
        succeeds with an empty result.
        """
        if not ids:
            return []

        try:
            result = await self.db_session.execute(select(Token).where(Token.id.in_(ids)))
            tokens = list(result.scalars().all())
            deleted_ids = [token.id for token in tokens]
            for token in tokens:
                await self.db_session.delete(token)
            await self.db_session.commit()
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error(
                "Error deleting tokens",
                token_ids=list(ids),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DatabaseError("Tokens could not be deleted") from e

        logger.debug("Tokens deleted", token_ids=deleted_ids)
        return tokens
