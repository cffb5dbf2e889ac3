from authflow.infrastructure.database.async_db import (
    AsyncSessionFactory,
    engine,
    get_async_db,
)

__all__ = ["AsyncSessionFactory", "engine", "get_async_db"]
