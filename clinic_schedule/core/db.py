# clinic_schedule/core/db.py
from collections.abc import AsyncGenerator
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool
from clinic_schedule.core.config import settings


def engine_options(url: str) -> dict:
    """kwargs de ``create_async_engine`` según el backend de ``url``."""
    u = make_url(url)
    if u.get_backend_name() != "sqlite":
        return {"pool_pre_ping": True}
    if u.database in (None, "", ":memory:"):
        # una única conexión: cada conexión nueva a :memory: es otra base vacía
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {}


def sync_database_url(url: str) -> str:
    """Misma URL con el driver sync del dialecto (para alembic offline)."""
    u = make_url(url)
    return u.set(drivername=u.get_backend_name()).render_as_string(hide_password=False)


engine = create_async_engine(
    settings.async_database_url, echo=False, **engine_options(settings.async_database_url)
)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

class Base(DeclarativeBase):
    pass

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        yield session
