"""
Registre de stock.

Seules la création d'une commande (décrément) et son annulation (incrément)
font varier `products.stock_quantity`. Chaque mouvement s'exécute dans la
transaction de l'appelant, reçue explicitement sous forme d'UnitOfWork.
"""
import logging

from agromarket.core.unit_of_work import UnitOfWork
from agromarket.stock import crud
from agromarket.stock.exceptions import InsufficientStockError, InvalidStockMovementError

logger = logging.getLogger(__name__)


class StockLedger:
    """Applique des mouvements de stock atomiques, jamais négatifs."""

    async def decrement(self, uow: UnitOfWork, product_id: int, amount: int, product_name: str = "") -> None:
        """Retire `amount` unités du stock.

        La mise à jour est conditionnelle (stock >= amount): si aucune ligne n'est
        affectée, une transaction concurrente a consommé le stock depuis la lecture
        de l'instantané. Le stock restant est relu et InsufficientStockError est
        levée; l'UnitOfWork annule alors toute la transaction.
        """
        self._check_amount(amount)
        affected = await crud.decrement_stock(uow.session, product_id, amount)
        if affected == 0:
            available = await crud.get_stock_quantity(uow.session, product_id) or 0
            logger.warning(
                f"[StockLedger] Décrément refusé pour produit {product_id}. "
                f"Demandé: {amount}, Disponible: {available}"
            )
            raise InsufficientStockError(
                product_name=product_name or f"#{product_id}",
                available=available,
                product_id=product_id,
                requested=amount,
            )
        logger.debug(f"[StockLedger] Produit {product_id}: -{amount}")

    async def increment(self, uow: UnitOfWork, product_id: int, amount: int) -> None:
        """Rend `amount` unités au stock (annulation d'une commande)."""
        self._check_amount(amount)
        affected = await crud.increment_stock(uow.session, product_id, amount)
        if affected == 0:
            # Produit supprimé du catalogue entre-temps: rien à restituer.
            logger.warning(f"[StockLedger] Incrément ignoré, produit {product_id} introuvable.")
            return
        logger.debug(f"[StockLedger] Produit {product_id}: +{amount}")

    @staticmethod
    def _check_amount(amount: int) -> None:
        if amount <= 0:
            raise InvalidStockMovementError(f"quantité {amount} non positive")
