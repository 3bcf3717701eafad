import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from agromarket.config import settings

logger = logging.getLogger(__name__)

DATABASE_URL = settings.database_url

engine_kwargs = {"echo": settings.DB_ECHO_LOG}
if not DATABASE_URL.startswith("sqlite"):
    engine_kwargs.update(pool_size=settings.DB_POOL_SIZE, max_overflow=settings.DB_MAX_OVERFLOW)

# Créer le moteur de base de données asynchrone
engine = create_async_engine(DATABASE_URL, **engine_kwargs)

# Créer une classe de session asynchrone
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,  # Empêche les objets d'expirer après commit
)

logger.info("Moteur et Session Factory SQLAlchemy Async configurés.")


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides an async database session.

    Aucun commit ici: les commits sont faits par les services, via UnitOfWork.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception as e:
            logger.error(f"Erreur durant la session DB, rollback: {e}", exc_info=True)
            await session.rollback()
            raise
        finally:
            await session.close()
            logger.debug("Session DB fermée.")


DbSessionDep = Annotated[AsyncSession, Depends(get_db_session)]


def import_models() -> None:
    """Importe tous les modèles de table pour enregistrer leurs métadonnées."""
    from agromarket.users import models as _users  # noqa: F401
    from agromarket.categories import models as _categories  # noqa: F401
    from agromarket.products import models as _products  # noqa: F401
    from agromarket.addresses import models as _addresses  # noqa: F401
    from agromarket.carts import models as _carts  # noqa: F401
    from agromarket.orders import models as _orders  # noqa: F401


async def create_tables(bind=None):
    """Crée toutes les tables définies (SQLModel.metadata)."""
    import_models()
    async with (bind or engine).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def drop_tables(bind=None):
    """Supprime toutes les tables définies (SQLModel.metadata)."""
    import_models()
    async with (bind or engine).begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
