"""
Lecture du catalogue.

Les instantanés sont lus colonne par colonne (et non comme entités) pour
toujours refléter l'état courant en base, même si des objets Product sont
déjà présents dans la session.
"""
import logging
from typing import Dict, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agromarket.core.unit_of_work import UnitOfWork
from agromarket.products.models import Product, ProductSnapshot
from agromarket.products.utils import effective_discount

logger = logging.getLogger(__name__)


class CatalogRepository:
    """Accès en lecture au catalogue produits."""

    async def find_snapshots(self, uow: UnitOfWork, product_ids: Iterable[int]) -> Dict[int, ProductSnapshot]:
        """Lit prix, remise, stock et statut des produits, dans la transaction courante.

        Les lignes sont verrouillées (`FOR UPDATE`) sur les bases qui le permettent.
        Les identifiants inconnus sont simplement absents du résultat.
        """
        ids = sorted(set(product_ids))
        if not ids:
            return {}

        stmt = (
            select(
                Product.id,
                Product.name,
                Product.price,
                Product.on_sale,
                Product.discount_percent,
                Product.stock_quantity,
                Product.is_active,
            )
            .where(Product.id.in_(ids))
            .order_by(Product.id)
            .with_for_update()
        )
        result = await uow.session.execute(stmt)

        snapshots: Dict[int, ProductSnapshot] = {}
        for row in result.all():
            snapshots[row.id] = ProductSnapshot(
                product_id=row.id,
                name=row.name,
                price=row.price,
                discount_percent=effective_discount(row.on_sale, row.discount_percent),
                stock_quantity=row.stock_quantity,
                is_active=row.is_active,
            )
        logger.debug(f"[CatalogRepository] {len(snapshots)}/{len(ids)} produits lus")
        return snapshots

    async def get_active(self, session: AsyncSession, product_id: int) -> Optional[Product]:
        """Retourne le produit s'il existe et est actif."""
        stmt = select(Product).where(Product.id == product_id, Product.is_active.is_(True))
        result = await session.execute(stmt.execution_options(populate_existing=True))
        return result.scalar_one_or_none()
