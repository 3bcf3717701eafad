"""
Repository des adresses.

Lookups simples sur une seule table, délégués à FastCRUD.
"""
import logging
from typing import Optional

from fastcrud import FastCRUD
from sqlalchemy.ext.asyncio import AsyncSession

from agromarket.addresses.models import Address, AddressRead

logger = logging.getLogger(__name__)

# Initialisation de FastCRUD pour le modèle Address
crud_address = FastCRUD(Address)


class AddressRepository:
    """Accès en lecture aux adresses d'un utilisateur."""

    async def find_by_id(self, session: AsyncSession, address_id: int, owner_id: int) -> Optional[AddressRead]:
        """Retourne l'adresse si elle appartient à `owner_id`, sinon None."""
        return await crud_address.get(
            db=session,
            schema_to_select=AddressRead,
            return_as_model=True,
            id=address_id,
            user_id=owner_id,
        )

    async def find_default(self, session: AsyncSession, owner_id: int) -> Optional[AddressRead]:
        """Retourne l'adresse par défaut de l'utilisateur (la plus ancienne si plusieurs)."""
        result = await crud_address.get_multi(
            db=session,
            limit=1,
            schema_to_select=AddressRead,
            return_as_model=True,
            return_total_count=False,
            sort_columns="id",
            sort_orders="asc",
            user_id=owner_id,
            is_default=True,
        )
        addresses = result.get("data", [])
        if not addresses:
            logger.debug(f"Aucune adresse par défaut pour l'utilisateur {owner_id}")
            return None
        return addresses[0]
