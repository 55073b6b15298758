from collections.abc import AsyncGenerator, Iterator
from contextlib import contextmanager

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shared.database.postgres import get_async_session_factory, session_scope

# Import all models so SQLAlchemy's Base.metadata is populated.
# Required for Alembic autogenerate and create_all().
import app.accounts.models  # noqa: F401
import app.onboarding.models  # noqa: F401
from app.onboarding.exceptions import StoreUnavailableError

_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_db(database_url: str) -> None:
    global _session_factory
    _session_factory = get_async_session_factory(database_url, expire_on_commit=False)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        raise RuntimeError("Database not initialized")
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with session_scope(get_session_factory()) as session:
        yield session


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Re-raise connectivity failures as StoreUnavailableError.

    Constraint violations (IntegrityError) pass through untouched; callers map
    those to domain errors themselves.
    """
    try:
        yield
    except (OperationalError, InterfaceError, PoolTimeoutError, OSError) as exc:
        raise StoreUnavailableError(operation) from exc
