"""
Unité de travail transactionnelle.

Une instance de `UnitOfWork` représente UNE transaction de base de données.
Elle est passée explicitement à chaque fonction qui participe à la même
opération atomique (lecture du catalogue, mouvements de stock, création de
commande, vidage du panier), ce qui rend la frontière de la transaction
visible dans les signatures.
"""
import logging
from types import TracebackType
from typing import Optional, Type

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from agromarket.core.exceptions import TransactionFailureError

logger = logging.getLogger(__name__)


class UnitOfWork:
    """Commit à la sortie normale du bloc `async with`, rollback complet sinon.

    Les erreurs d'infrastructure (DBAPIError: verrou, deadlock, connexion perdue)
    sont journalisées puis converties en `TransactionFailureError`; les erreurs
    métier sont propagées telles quelles après le rollback.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self) -> "UnitOfWork":
        if self.session.in_transaction():
            # Clôt la transaction de lecture ouverte implicitement (autobegin),
            # par exemple par la résolution de l'utilisateur courant.
            await self.session.commit()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> bool:
        if exc_type is None:
            try:
                await self.session.commit()
            except DBAPIError as e:
                logger.error(f"[UnitOfWork] Échec du commit, rollback: {e}", exc_info=True)
                await self._safe_rollback()
                raise TransactionFailureError() from e
            return False

        await self._safe_rollback()
        if isinstance(exc, DBAPIError):
            logger.error(f"[UnitOfWork] Erreur base de données, transaction annulée: {exc}", exc_info=(exc_type, exc, tb))
            raise TransactionFailureError() from exc
        logger.debug(f"[UnitOfWork] Transaction annulée ({exc_type.__name__}).")
        return False

    async def flush(self) -> None:
        await self.session.flush()

    async def _safe_rollback(self) -> None:
        try:
            await self.session.rollback()
        except DBAPIError as e:
            # La connexion est probablement perdue: la base annulera la transaction d'elle-même.
            logger.error(f"[UnitOfWork] Rollback impossible: {e}", exc_info=True)
